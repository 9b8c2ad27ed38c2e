"""Contribution types for the auto-discovery system.

Packages declare middleware, exception handlers and lifespan hooks as
module-level contribution objects and expose them through entry points.
These dataclasses are framework-agnostic so that domain packages can declare
contributions without importing FastAPI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Middleware ordering band
MIDDLEWARE_PRIORITY_MIN = 0
MIDDLEWARE_PRIORITY_MAX = 499

# Lifespan ordering: lower starts first and stops last
LIFESPAN_PRIORITY_OBSERVABILITY = 50
LIFESPAN_PRIORITY_PERSISTENCE = 75


@dataclass(frozen=True, slots=True)
class MiddlewareContribution:
    """Describes a middleware to be auto-discovered and registered.

    Attributes:
        middleware_class: The ASGI middleware class.
        priority: Ordering priority in [0, 499]. Lower numbers are outermost.
    """

    middleware_class: type[Any]
    priority: int = 400

    def __post_init__(self) -> None:
        if not MIDDLEWARE_PRIORITY_MIN <= self.priority <= MIDDLEWARE_PRIORITY_MAX:
            msg = (
                f"Middleware priority must be between {MIDDLEWARE_PRIORITY_MIN} "
                f"and {MIDDLEWARE_PRIORITY_MAX}, got {self.priority}"
            )
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ErrorHandlerContribution:
    """Describes an exception handler to be auto-discovered and registered.

    Attributes:
        exception_class: The exception type to handle.
        handler: Async callable ``(Request, Exception) -> Response``.
    """

    exception_class: type[BaseException]
    handler: Any


@dataclass(frozen=True, slots=True)
class LifespanContribution:
    """Describes a lifespan hook to be auto-discovered and registered.

    Attributes:
        hook: Async context manager factory ``(app) -> AsyncContextManager[None]``.
        priority: Lower priorities start first and shut down last.
    """

    hook: Any
    priority: int = 500
