"""Credora Foundation Application -- wiring primitives shared across packages."""

from credora.foundation.application.contributions import (
    LIFESPAN_PRIORITY_OBSERVABILITY,
    LIFESPAN_PRIORITY_PERSISTENCE,
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
)
from credora.foundation.application.discovery import (
    DiscoveredContribution,
    discover,
)

__all__ = [
    "LIFESPAN_PRIORITY_OBSERVABILITY",
    "LIFESPAN_PRIORITY_PERSISTENCE",
    "DiscoveredContribution",
    "ErrorHandlerContribution",
    "LifespanContribution",
    "MiddlewareContribution",
    "discover",
]
