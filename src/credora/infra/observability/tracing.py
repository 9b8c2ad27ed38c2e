"""OpenTelemetry tracing configuration.

Provides:
- Configurable exporters (OTLP, Console, None)
- FastAPI auto-instrumentation for HTTP spans
- Service resource attributes (name, version)

The domain packages create their spans through the OpenTelemetry API only;
until ``configure_tracing`` installs a provider those spans are no-ops.

Usage:
    from credora.infra.observability.tracing import configure_tracing, shutdown_tracing
    configure_tracing(app)
    ...
    shutdown_tracing()
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from fastapi import FastAPI

_tracer_provider: TracerProvider | None = None


class TracingSettings(BaseSettings):
    """OpenTelemetry tracing configuration from environment variables.

    - OTEL_SERVICE_NAME: Service name for traces (default: credora-backoffice)
    - OTEL_SERVICE_VERSION: Service version (default: unknown)
    - OTEL_EXPORTER_TYPE: otlp, console, none (default: none)
    - OTEL_EXPORTER_OTLP_ENDPOINT: OTLP collector endpoint
    - OTEL_EXPORTER_OTLP_HEADERS: Auth headers as key1=val1,key2=val2

    Example:
        >>> TracingSettings().is_enabled
        False
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    service_name: str = Field(
        default="credora-backoffice",
        alias="OTEL_SERVICE_NAME",
        description="Service name for trace resource attributes",
    )
    service_version: str = Field(
        default="unknown",
        alias="OTEL_SERVICE_VERSION",
        description="Service version for trace resource attributes",
    )
    exporter_type: str = Field(
        default="none",
        alias="OTEL_EXPORTER_TYPE",
        description="Exporter type: otlp, console, none",
    )
    otlp_endpoint: str = Field(
        default="http://localhost:4317",
        alias="OTEL_EXPORTER_OTLP_ENDPOINT",
        description="OTLP collector gRPC endpoint",
    )
    otlp_headers: str = Field(
        default="",
        alias="OTEL_EXPORTER_OTLP_HEADERS",
        description="OTLP auth headers as key1=val1,key2=val2",
    )

    @field_validator("exporter_type", mode="before")
    @classmethod
    def normalize_exporter_type(cls, v: Any) -> str:
        if isinstance(v, str):
            return v.lower()
        return str(v)

    @field_validator("exporter_type")
    @classmethod
    def validate_exporter_type(cls, v: str) -> str:
        valid_types = {"otlp", "console", "none"}
        if v not in valid_types:
            msg = f"exporter_type must be one of {valid_types}"
            raise ValueError(msg)
        return v

    @property
    def is_enabled(self) -> bool:
        return self.exporter_type != "none"

    @property
    def otlp_headers_dict(self) -> dict[str, str]:
        """Parse OTLP headers from comma-separated key=value pairs.

        Example:
            >>> TracingSettings(otlp_headers="a=1,b=x=y").otlp_headers_dict
            {'a': '1', 'b': 'x=y'}
        """
        if not self.otlp_headers:
            return {}
        result: dict[str, str] = {}
        for pair in self.otlp_headers.split(","):
            if "=" in pair:
                key, value = pair.split("=", 1)
                result[key.strip()] = value.strip()
        return result


@lru_cache(maxsize=1)
def get_tracing_settings() -> TracingSettings:
    return TracingSettings()


def _create_exporter(settings: TracingSettings) -> SpanExporter:
    """Create the span exporter named by ``settings.exporter_type``.

    Raises:
        ValueError: If exporter_type is not recognized.
    """
    if settings.exporter_type == "otlp":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # type: ignore[import-not-found]
            OTLPSpanExporter,
        )

        return OTLPSpanExporter(  # type: ignore[no-any-return]
            endpoint=settings.otlp_endpoint,
            headers=settings.otlp_headers_dict or None,
        )
    if settings.exporter_type == "console":
        return ConsoleSpanExporter()
    msg = f"Unknown exporter type: {settings.exporter_type}"
    raise ValueError(msg)


def configure_tracing(app: FastAPI, settings: TracingSettings | None = None) -> None:
    """Install a TracerProvider and instrument the FastAPI application.

    Returns immediately when the exporter type is "none".

    Args:
        app: FastAPI application instance for instrumentation.
        settings: Optional TracingSettings. If None, loads from environment.
    """
    global _tracer_provider

    if settings is None:
        settings = get_tracing_settings()

    if not settings.is_enabled:
        return

    resource = Resource.create(
        {
            "service.name": settings.service_name,
            "service.version": settings.service_version,
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(_create_exporter(settings)))
    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    from opentelemetry.instrumentation.fastapi import (  # type: ignore[import-not-found]
        FastAPIInstrumentor,
    )

    FastAPIInstrumentor.instrument_app(app)


def shutdown_tracing() -> None:
    """Flush pending spans and shut the provider down. Idempotent."""
    global _tracer_provider

    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        _tracer_provider = None
