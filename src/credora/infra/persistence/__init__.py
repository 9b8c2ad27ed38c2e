"""Credora Infra Persistence -- engine, session factories and lifespan."""

from credora.infra.persistence.database import (
    DatabaseManager,
    DatabaseSettings,
    dispose_engine,
    get_database_manager,
    get_sync_engine,
    get_sync_session_factory,
)
from credora.infra.persistence.lifespan import lifespan_contribution

__all__ = [
    "DatabaseManager",
    "DatabaseSettings",
    "dispose_engine",
    "get_database_manager",
    "get_sync_engine",
    "get_sync_session_factory",
    "lifespan_contribution",
]
