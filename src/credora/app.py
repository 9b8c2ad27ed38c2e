"""Back-office API application.

Usage::

    from credora.app import create_backoffice_app

    app = create_backoffice_app()

Routers, middleware, error handlers and lifespan hooks are all discovered
from the ``credora.*`` entry points; nothing is wired by hand here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from credora.infra.fastapi import AppSettings, create_app

if TYPE_CHECKING:
    from fastapi import FastAPI


def create_backoffice_app(
    settings: AppSettings | None = None,
    *,
    exclude_names: frozenset[str] | None = None,
) -> FastAPI:
    """Create the Credora back-office API.

    Args:
        settings: Application settings. If ``None``, loaded from ``APP_*``.
        exclude_names: Entry-point names to suppress, e.g. ``{"persistence"}``
            when running without a database.
    """
    return create_app(settings=settings, exclude_names=exclude_names)
