"""Persistence lifespan hook for startup/shutdown resource management.

Handles:
- Database health check on startup (SELECT 1)
- Engine disposal on shutdown

Priority 75 starts persistence after observability (50), so startup
failures are logged with the configured processors.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import text

from credora.foundation.application import (
    LIFESPAN_PRIORITY_PERSISTENCE,
    LifespanContribution,
)
from credora.infra.persistence.database import get_database_manager

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _persistence_lifespan(app: Any) -> AsyncIterator[None]:
    """Verify connectivity on startup and release the pool on shutdown.

    Args:
        app: The application instance (unused but required by protocol).
    """
    manager = get_database_manager()

    engine = manager.get_sync_engine()
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("persistence_lifespan: database health check passed")

    settings = manager.settings
    logger.info(
        "persistence_lifespan: connection budget %d",
        settings.pool_size + settings.max_overflow,
    )

    try:
        yield
    finally:
        manager.dispose()
        logger.info("persistence_lifespan: database engine disposed")


lifespan_contribution = LifespanContribution(
    hook=_persistence_lifespan,
    priority=LIFESPAN_PRIORITY_PERSISTENCE,
)
