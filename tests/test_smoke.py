"""Smoke tests for PEP 420 namespace package resolution and the app entry point."""

from __future__ import annotations

import pytest


def test_foundation_domain_importable() -> None:
    import credora.foundation.domain  # noqa: F401


def test_foundation_application_importable() -> None:
    import credora.foundation.application  # noqa: F401


def test_domain_staff_importable() -> None:
    import credora.domain.staff  # noqa: F401


def test_infra_fastapi_importable() -> None:
    import credora.infra.fastapi  # noqa: F401


def test_infra_persistence_importable() -> None:
    import credora.infra.persistence  # noqa: F401


def test_infra_observability_importable() -> None:
    import credora.infra.observability  # noqa: F401


@pytest.mark.integration
def test_backoffice_app_exposes_staff_routes() -> None:
    from credora.app import create_backoffice_app
    from credora.infra.fastapi import AppSettings

    app = create_backoffice_app(
        AppSettings(), exclude_names=frozenset({"persistence", "observability"})
    )
    paths = {route.path for route in app.routes}  # type: ignore[attr-defined]
    assert "/staff/deletions" in paths
    assert "/healthz" in paths
