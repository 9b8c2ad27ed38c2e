"""FastAPI application factory with entry-point auto-discovery.

:func:`create_app` wires the routers, middleware, error handlers and lifespan
hooks that installed Credora packages advertise under the ``credora.*``
entry-point groups.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from credora.foundation.application import (
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
    discover,
)
from credora.infra.fastapi.lifespan import compose_lifespan
from credora.infra.fastapi.settings import AppSettings

if TYPE_CHECKING:
    from fastapi import APIRouter

logger = logging.getLogger(__name__)

GROUP_ROUTERS = "credora.routers"
GROUP_MIDDLEWARE = "credora.middleware"
GROUP_ERROR_HANDLERS = "credora.error_handlers"
GROUP_LIFESPAN = "credora.lifespan"


def create_app(
    settings: AppSettings | None = None,
    *,
    extra_routers: list[APIRouter] | None = None,
    extra_middleware: list[MiddlewareContribution] | None = None,
    extra_lifespan_hooks: list[LifespanContribution] | None = None,
    extra_error_handlers: list[ErrorHandlerContribution] | None = None,
    exclude_groups: frozenset[str] | None = None,
    exclude_names: frozenset[str] | None = None,
) -> FastAPI:
    """Create the back-office API application.

    Args:
        settings: Application settings. If ``None``, loaded from environment.
        extra_routers: Routers to include beyond discovered ones.
        extra_middleware: Middleware beyond discovered ones.
        extra_lifespan_hooks: Lifespan hooks beyond discovered ones.
        extra_error_handlers: Error handlers beyond discovered ones.
        exclude_groups: Entry-point groups to skip entirely.
        exclude_names: Entry-point names to skip across all groups.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or AppSettings()
    groups_off = exclude_groups or frozenset()
    names_off = exclude_names or frozenset()

    lifespan_hooks = list(extra_lifespan_hooks or [])
    if GROUP_LIFESPAN not in groups_off:
        lifespan_hooks.extend(_discover_lifespan_hooks(names_off))

    app = FastAPI(
        title=settings.title,
        version=settings.version,
        debug=settings.debug,
        lifespan=compose_lifespan(lifespan_hooks),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
        expose_headers=settings.cors.expose_headers,
    )

    middleware = list(extra_middleware or [])
    if GROUP_MIDDLEWARE not in groups_off:
        middleware.extend(_discover_middleware(names_off))
    # Starlette wraps in LIFO order: add the lowest priority last so it runs first.
    for mw in sorted(middleware, key=lambda m: m.priority, reverse=True):
        app.add_middleware(mw.middleware_class)
        logger.info(
            "Registered middleware %s (priority=%d)",
            mw.middleware_class.__name__,
            mw.priority,
        )

    error_handlers = list(extra_error_handlers or [])
    if GROUP_ERROR_HANDLERS not in groups_off:
        error_handlers.extend(_discover_error_handlers(app, names_off))
    for eh in error_handlers:
        app.add_exception_handler(eh.exception_class, eh.handler)
        logger.info("Registered error handler for %s", eh.exception_class.__name__)

    routers = list(extra_routers or [])
    if GROUP_ROUTERS not in groups_off:
        routers.extend(contrib.value for contrib in discover(GROUP_ROUTERS, exclude_names=names_off))
    for router in routers:
        app.include_router(router)
        logger.info("Included router: %r", router)

    return app


def _discover_lifespan_hooks(exclude_names: frozenset[str]) -> list[LifespanContribution]:
    hooks = []
    for contrib in discover(GROUP_LIFESPAN, exclude_names=exclude_names):
        value = contrib.value
        if isinstance(value, LifespanContribution):
            hooks.append(value)
        else:
            # Bare async context manager factory; default priority.
            hooks.append(LifespanContribution(hook=value))
    return hooks


def _discover_middleware(exclude_names: frozenset[str]) -> list[MiddlewareContribution]:
    found = []
    for contrib in discover(GROUP_MIDDLEWARE, exclude_names=exclude_names):
        if isinstance(contrib.value, MiddlewareContribution):
            found.append(contrib.value)
        else:
            logger.warning(
                "Middleware entry point %r did not return a MiddlewareContribution",
                contrib.name,
            )
    return found


def _discover_error_handlers(
    app: FastAPI,
    exclude_names: frozenset[str],
) -> list[ErrorHandlerContribution]:
    """Collect handler contributions; callables are invoked as ``register(app)``."""
    found = []
    for contrib in discover(GROUP_ERROR_HANDLERS, exclude_names=exclude_names):
        value = contrib.value
        if isinstance(value, ErrorHandlerContribution):
            found.append(value)
        elif callable(value):
            value(app)
        else:
            logger.warning(
                "Error handler entry point %r is not an ErrorHandlerContribution or callable",
                contrib.name,
            )
    return found
