"""Unit tests for credora.infra.observability."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest

from credora.foundation.application import LifespanContribution
from credora.infra.observability import lifespan_contribution
from credora.infra.observability.logging import (
    REDACTED_VALUE,
    LoggingSettings,
    SensitiveDataProcessor,
    configure_logging,
    get_logger,
)
from credora.infra.observability.tracing import (
    TracingSettings,
    _create_exporter,
    configure_tracing,
    shutdown_tracing,
)


class TestLoggingSettings:
    @pytest.mark.unit
    def test_defaults(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            settings = LoggingSettings()
        assert settings.log_level == "INFO"
        assert settings.use_json_logs is False

    @pytest.mark.unit
    def test_production_uses_json(self) -> None:
        assert LoggingSettings(environment="production").use_json_logs is True

    @pytest.mark.unit
    def test_normalizes_level(self) -> None:
        assert LoggingSettings(log_level="debug").log_level_int == logging.DEBUG

    @pytest.mark.unit
    def test_invalid_level(self) -> None:
        with pytest.raises(ValueError, match="log_level"):
            LoggingSettings(log_level="LOUD")


class TestSensitiveDataProcessor:
    @pytest.mark.unit
    def test_redacts_service_role_key(self) -> None:
        result = SensitiveDataProcessor()(None, "info", {"event": "x", "service_role_key": "k"})
        assert result["service_role_key"] == REDACTED_VALUE

    @pytest.mark.unit
    def test_redacts_substring(self) -> None:
        result = SensitiveDataProcessor()(None, "info", {"event": "x", "refresh_token": "t"})
        assert result["refresh_token"] == REDACTED_VALUE

    @pytest.mark.unit
    def test_keeps_target_id(self) -> None:
        result = SensitiveDataProcessor()(None, "info", {"event": "x", "target_id": "u-1"})
        assert result["target_id"] == "u-1"


class TestConfigureLogging:
    @pytest.mark.unit
    def test_routes_stdlib_through_structlog(self) -> None:
        configure_logging(LoggingSettings(log_level="WARNING", environment="production"))
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        configure_logging(LoggingSettings())
        assert get_logger("credora.test") is not None


class TestTracing:
    @pytest.mark.unit
    def test_disabled_by_default(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            settings = TracingSettings()
        assert settings.is_enabled is False
        assert settings.service_name == "credora-backoffice"

    @pytest.mark.unit
    def test_headers_parsing(self) -> None:
        settings = TracingSettings(otlp_headers="x-api-key=abc, tenant=credora")
        assert settings.otlp_headers_dict == {"x-api-key": "abc", "tenant": "credora"}

    @pytest.mark.unit
    def test_invalid_exporter(self) -> None:
        with pytest.raises(ValueError, match="exporter_type"):
            TracingSettings(exporter_type="zipkin")

    @pytest.mark.unit
    def test_console_exporter(self) -> None:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter

        assert isinstance(
            _create_exporter(TracingSettings(exporter_type="console")), ConsoleSpanExporter
        )

    @pytest.mark.unit
    def test_configure_noop_when_disabled(self) -> None:
        app = MagicMock()
        configure_tracing(app, TracingSettings(exporter_type="none"))
        shutdown_tracing()


class TestObservabilityLifespan:
    @pytest.mark.unit
    def test_contribution(self) -> None:
        assert isinstance(lifespan_contribution, LifespanContribution)
        assert lifespan_contribution.priority == 50

    @pytest.mark.unit
    @pytest.mark.asyncio(loop_scope="function")
    async def test_configures_and_shuts_down(self) -> None:
        with (
            patch("credora.infra.observability.configure_logging") as logging_mock,
            patch("credora.infra.observability.configure_tracing") as tracing_mock,
            patch("credora.infra.observability.shutdown_tracing") as shutdown_mock,
        ):
            app = MagicMock()
            async with lifespan_contribution.hook(app):
                logging_mock.assert_called_once_with()
                tracing_mock.assert_called_once_with(app)
                shutdown_mock.assert_not_called()
        shutdown_mock.assert_called_once_with()
