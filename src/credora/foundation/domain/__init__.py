"""Credora Foundation Domain -- pure Python domain primitives.

This package provides the foundational building blocks shared by the
back-office packages: exceptions, staff value objects, and the port
interfaces the domain uses to reach the data and identity planes.
"""

from credora.foundation.domain.exceptions import (
    CatalogError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from credora.foundation.domain.ports import (
    AuditSink,
    DeletedEmailTracker,
    IdentityProvider,
    IdentityRemovalResult,
    IdentityRemovalStatus,
    ReferenceStore,
    ReferenceStoreError,
    RelationAbsentError,
    StaffDeletedEvent,
    StaffDirectory,
    StoreTimeoutError,
)
from credora.foundation.domain.staff_value_objects import StaffId, StaffRole, TargetEntity

__all__ = [
    "AuditSink",
    "CatalogError",
    "DeletedEmailTracker",
    "DomainError",
    "IdentityProvider",
    "IdentityRemovalResult",
    "IdentityRemovalStatus",
    "NotFoundError",
    "ReferenceStore",
    "ReferenceStoreError",
    "RelationAbsentError",
    "StaffDeletedEvent",
    "StaffDirectory",
    "StaffId",
    "StaffRole",
    "StoreTimeoutError",
    "TargetEntity",
    "ValidationError",
]
