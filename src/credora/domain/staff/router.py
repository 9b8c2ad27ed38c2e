"""Staff account removal endpoints.

- ``POST /staff/deletions`` runs the cascade and always answers 200 with the
  report; ``success`` and ``outcome`` tell the caller what happened.
- ``GET /staff/{target_id}/deletion-preview`` is a read-only dry run.
- ``GET /staff/{target_id}/deletion-status`` checks both planes for the account.
"""

# NOTE: no ``from __future__ import annotations``: FastAPI resolves the
# Annotated dependency and header parameters at runtime.

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, Field

from credora.domain.staff.cascade_deletion import StaffDeletionService
from credora.domain.staff.dependencies import get_staff_deletion_service

router = APIRouter(prefix="/staff", tags=["staff"])

ServiceDep = Annotated[StaffDeletionService, Depends(get_staff_deletion_service)]


# -- Request / Response models ------------------------------------------------


class DeleteStaffRequest(BaseModel):
    target_id: str = Field(min_length=1, max_length=255)


class LedgerEntryResponse(BaseModel):
    rule: str
    relation: str
    column: str
    policy: str
    criticality: str
    outcome: str
    rows_affected: int
    reason: str | None = None


class ViolationResponse(BaseModel):
    code: str
    message: str
    context: dict[str, Any] = Field(default_factory=dict)


class DeletionReportResponse(BaseModel):
    success: bool
    outcome: str
    target_id: str
    ledger: list[LedgerEntryResponse]
    violations: list[ViolationResponse]
    data_record_removed: bool
    identity_record_removed: bool
    failure_reason: str | None = None
    verified: bool = False


class ReferenceCountResponse(BaseModel):
    rule: str
    policy: str
    criticality: str
    description: str
    matching_rows: int | None
    relation_absent: bool
    error: str | None = None


class DeletionPreviewResponse(BaseModel):
    target_id: str
    data_record_present: bool
    identity_record_present: bool
    role: str | None
    can_delete: bool
    total_references: int
    violations: list[ViolationResponse]
    references: list[ReferenceCountResponse]


class DeletionStatusResponse(BaseModel):
    target_id: str
    data_record_present: bool
    identity_record_present: bool
    confirmed: bool


# -- Endpoints ----------------------------------------------------------------


@router.post("/deletions")
def delete_staff(
    body: DeleteStaffRequest,
    service: ServiceDep,
    x_user_id: Annotated[str | None, Header()] = None,
) -> DeletionReportResponse:
    """Remove a staff account from both planes."""
    report = service.delete_staff(body.target_id, requested_by=x_user_id)
    return DeletionReportResponse.model_validate(report.to_dict())


@router.get("/{target_id}/deletion-preview")
def preview_deletion(target_id: str, service: ServiceDep) -> DeletionPreviewResponse:
    """Show what removing the account would touch, without changing anything."""
    return DeletionPreviewResponse.model_validate(service.preview(target_id).to_dict())


@router.get("/{target_id}/deletion-status")
def deletion_status(target_id: str, service: ServiceDep) -> DeletionStatusResponse:
    """Report whether either plane still holds the account."""
    return DeletionStatusResponse.model_validate(service.verify(target_id).to_dict())
