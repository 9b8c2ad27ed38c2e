"""Credora Infra Observability -- structlog logging and OpenTelemetry tracing."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from credora.foundation.application.contributions import (
    LIFESPAN_PRIORITY_OBSERVABILITY,
    LifespanContribution,
)
from credora.infra.observability.logging import (
    LoggingSettings,
    configure_logging,
    get_logger,
)
from credora.infra.observability.tracing import (
    TracingSettings,
    configure_tracing,
    shutdown_tracing,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@asynccontextmanager
async def _observability_lifespan(app: Any) -> AsyncIterator[None]:
    """Configure logging and tracing on startup; flush spans on shutdown."""
    configure_logging()
    configure_tracing(app)
    try:
        yield
    finally:
        shutdown_tracing()


lifespan_contribution = LifespanContribution(
    hook=_observability_lifespan,
    priority=LIFESPAN_PRIORITY_OBSERVABILITY,
)

__all__ = [
    "LoggingSettings",
    "TracingSettings",
    "configure_logging",
    "configure_tracing",
    "get_logger",
    "lifespan_contribution",
    "shutdown_tracing",
]
