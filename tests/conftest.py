"""Shared fixtures for Credora tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from credora.domain.staff.cascade_deletion import StaffDeletionService
from credora.domain.staff.catalog import CleanupPolicy, Criticality, ReferenceCatalog, ReferenceRule
from credora.domain.staff.infrastructure.in_memory import (
    InMemoryIdentityProvider,
    InMemoryReferenceStore,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

TARGET_ID = "7d1c6a0e-3b0f-4e7a-9a43-5e2f1c0b9d11"
OTHER_ADMIN_ID = "0c5e8f7a-21d4-4b9e-8c6f-3a7b1d2e4f50"
OPERATOR_ID = "f4a2b6c8-1d3e-4f5a-8b7c-9d0e1f2a3b4c"


@pytest.fixture(autouse=True)
def _clear_settings_caches() -> Iterator[None]:
    """Drop cached settings and singletons between tests."""
    from credora.domain.staff.dependencies import get_staff_deletion_service
    from credora.domain.staff.settings import get_identity_settings, get_staff_deletion_settings
    from credora.infra.observability.logging import get_logging_settings
    from credora.infra.observability.tracing import get_tracing_settings
    from credora.infra.persistence.database import get_database_manager

    caches = (
        get_staff_deletion_service,
        get_identity_settings,
        get_staff_deletion_settings,
        get_logging_settings,
        get_tracing_settings,
        get_database_manager,
    )
    for cached in caches:
        cached.cache_clear()
    yield
    for cached in caches:
        cached.cache_clear()


@pytest.fixture()
def store() -> InMemoryReferenceStore:
    """Data plane holding one loan officer and some activity rows."""
    store = InMemoryReferenceStore()
    store.add_staff(TARGET_ID, "loan_officer", email="Officer@Credora.test")
    store.create_relation("logs", ("id", "user_id"))
    store.create_relation("loans", ("id", "user_id"))
    store.create_relation("user_roles", ("id", "user_id"))
    return store


@pytest.fixture()
def identity() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider([TARGET_ID, OTHER_ADMIN_ID])


@pytest.fixture()
def catalog() -> ReferenceCatalog:
    return ReferenceCatalog(
        [
            ReferenceRule("logs", "user_id", CleanupPolicy.NULLIFY_COLUMN),
            ReferenceRule("loans", "user_id", CleanupPolicy.NULLIFY_COLUMN),
            ReferenceRule(
                "user_roles", "user_id", CleanupPolicy.CASCADE_DELETE, Criticality.CRITICAL
            ),
        ]
    )


@pytest.fixture()
def service(
    catalog: ReferenceCatalog,
    store: InMemoryReferenceStore,
    identity: InMemoryIdentityProvider,
) -> StaffDeletionService:
    return StaffDeletionService(catalog, store, store, identity)
