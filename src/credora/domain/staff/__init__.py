"""Credora Staff -- removal of staff accounts and every reference to them."""

from credora.domain.staff.cascade_deletion import StaffDeletionService
from credora.domain.staff.catalog import (
    CleanupPolicy,
    Criticality,
    ReferenceCatalog,
    ReferenceRule,
    build_default_catalog,
)
from credora.domain.staff.deadline import Deadline
from credora.domain.staff.executor import StepExecutor
from credora.domain.staff.guard import (
    GuardVerdict,
    InvariantGuard,
    LastRoleHolderCheck,
    SelfDeletionCheck,
)
from credora.domain.staff.report import (
    DeletionPreview,
    DeletionReport,
    ExecutionLedger,
    ExecutionStep,
    InvariantViolation,
    OverallOutcome,
    PreviewEntry,
    StepOutcome,
)
from credora.domain.staff.verification import DeletionVerifier, VerificationResult

__all__ = [
    "CleanupPolicy",
    "Criticality",
    "Deadline",
    "DeletionPreview",
    "DeletionReport",
    "DeletionVerifier",
    "ExecutionLedger",
    "ExecutionStep",
    "GuardVerdict",
    "InvariantGuard",
    "InvariantViolation",
    "LastRoleHolderCheck",
    "OverallOutcome",
    "PreviewEntry",
    "ReferenceCatalog",
    "ReferenceRule",
    "SelfDeletionCheck",
    "StaffDeletionService",
    "StepExecutor",
    "StepOutcome",
    "VerificationResult",
    "build_default_catalog",
]
