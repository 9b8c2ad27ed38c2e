"""Service wiring for the staff endpoints.

Builds the deletion service from settings and the shared session factory.
Tests replace ``get_staff_deletion_service`` through
``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from credora.domain.staff.cascade_deletion import StaffDeletionService
from credora.domain.staff.catalog import build_default_catalog
from credora.domain.staff.infrastructure.audit_sink import LoggingAuditSink, SqlAuditSink
from credora.domain.staff.infrastructure.deleted_email_tracker import SqlDeletedEmailTracker
from credora.domain.staff.infrastructure.identity_admin_client import IdentityAdminClient
from credora.domain.staff.infrastructure.sql_reference_store import SqlReferenceStore
from credora.domain.staff.settings import get_identity_settings, get_staff_deletion_settings
from credora.infra.persistence.database import get_sync_session_factory


@lru_cache(maxsize=1)
def get_staff_deletion_service() -> StaffDeletionService:
    """Build the process-wide deletion service.

    Raises:
        RuntimeError: If the identity admin API is not configured.
    """
    settings = get_staff_deletion_settings()
    identity_settings = get_identity_settings()
    if not identity_settings.is_configured():
        msg = "IDENTITY_BASE_URL and IDENTITY_SERVICE_ROLE_KEY must be set"
        raise RuntimeError(msg)

    session_factory = get_sync_session_factory()
    store = SqlReferenceStore(session_factory)
    audit_sink = SqlAuditSink(session_factory) if settings.audit_to_database else LoggingAuditSink()
    email_tracker = (
        SqlDeletedEmailTracker(session_factory, cooldown_hours=settings.email_reuse_cooldown_hours)
        if settings.track_deleted_emails
        else None
    )

    return StaffDeletionService(
        catalog=build_default_catalog(
            reparent_members_to=settings.reparent_members_to,
            residual_procedure=settings.residual_procedure,
        ),
        store=store,
        directory=store,
        identity=IdentityAdminClient(
            identity_settings.base_url,
            identity_settings.service_role_key,
            timeout=identity_settings.timeout_seconds,
        ),
        audit_sink=audit_sink,
        email_tracker=email_tracker,
        protected_role=settings.protected_role,
        verify_after_removal=settings.verify_after_removal,
        deadline_seconds=settings.deadline_seconds,
    )
