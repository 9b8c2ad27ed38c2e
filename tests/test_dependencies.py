"""Unit tests for the staff service wiring."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from credora.domain.staff.cascade_deletion import StaffDeletionService
from credora.domain.staff.dependencies import get_staff_deletion_service

_ENV = {
    "IDENTITY_BASE_URL": "https://auth.credora.test",
    "IDENTITY_SERVICE_ROLE_KEY": "key",
}


class TestGetStaffDeletionService:
    @pytest.mark.unit
    def test_requires_identity_configuration(self) -> None:
        with (
            patch.dict("os.environ", {}, clear=True),
            pytest.raises(RuntimeError, match="IDENTITY_BASE_URL"),
        ):
            get_staff_deletion_service()

    @pytest.mark.unit
    def test_builds_service(self) -> None:
        with (
            patch.dict("os.environ", _ENV, clear=True),
            patch(
                "credora.domain.staff.dependencies.get_sync_session_factory",
                return_value=MagicMock(),
            ),
        ):
            service = get_staff_deletion_service()
        assert isinstance(service, StaffDeletionService)
        assert get_staff_deletion_service() is service

    @pytest.mark.unit
    def test_logging_audit_sink_when_database_audit_disabled(self) -> None:
        env = {**_ENV, "STAFF_DELETION_AUDIT_TO_DATABASE": "false"}
        with (
            patch.dict("os.environ", env, clear=True),
            patch(
                "credora.domain.staff.dependencies.get_sync_session_factory",
                return_value=MagicMock(),
            ),
            patch("credora.domain.staff.dependencies.LoggingAuditSink") as sink_cls,
        ):
            get_staff_deletion_service()
        sink_cls.assert_called_once_with()
