"""Domain port interfaces for hexagonal architecture.

Ports define abstract interfaces that the domain layer uses to interact
with external services. Implementations (adapters) live in infrastructure.
"""

from credora.foundation.domain.ports.audit_sink import AuditSink, StaffDeletedEvent
from credora.foundation.domain.ports.deleted_email_tracker import DeletedEmailTracker
from credora.foundation.domain.ports.identity_provider import (
    IdentityProvider,
    IdentityRemovalResult,
    IdentityRemovalStatus,
)
from credora.foundation.domain.ports.reference_store import (
    ReferenceStore,
    ReferenceStoreError,
    RelationAbsentError,
    StaffDirectory,
    StoreTimeoutError,
)

__all__ = [
    "AuditSink",
    "DeletedEmailTracker",
    "IdentityProvider",
    "IdentityRemovalResult",
    "IdentityRemovalStatus",
    "ReferenceStore",
    "ReferenceStoreError",
    "RelationAbsentError",
    "StaffDeletedEvent",
    "StaffDirectory",
    "StoreTimeoutError",
]
