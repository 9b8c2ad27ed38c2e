"""Adapters for the staff removal ports."""

from credora.domain.staff.infrastructure.audit_sink import LoggingAuditSink, SqlAuditSink
from credora.domain.staff.infrastructure.deleted_email_tracker import SqlDeletedEmailTracker
from credora.domain.staff.infrastructure.identity_admin_client import (
    IdentityAdminClient,
    IdentityAdminError,
)
from credora.domain.staff.infrastructure.in_memory import (
    InMemoryIdentityProvider,
    InMemoryReferenceStore,
    Mutation,
)
from credora.domain.staff.infrastructure.sql_reference_store import SqlReferenceStore

__all__ = [
    "IdentityAdminClient",
    "IdentityAdminError",
    "InMemoryIdentityProvider",
    "InMemoryReferenceStore",
    "LoggingAuditSink",
    "Mutation",
    "SqlAuditSink",
    "SqlDeletedEmailTracker",
    "SqlReferenceStore",
]
