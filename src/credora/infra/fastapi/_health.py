"""Health check endpoint.

Reports database connectivity and overall readiness.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.concurrency import run_in_threadpool

from credora.infra.persistence.database import get_database_manager

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


def _check_database() -> dict[str, str]:
    """SELECT 1 against the data plane."""
    try:
        engine = get_database_manager().get_sync_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("health_check: database unhealthy: %s", exc)
        return {"status": "error", "detail": str(exc)}
    return {"status": "ok"}


@router.get("/healthz")
async def healthz() -> Any:
    """Return 200 when every subsystem is healthy, 503 otherwise."""
    checks = {"database": await run_in_threadpool(_check_database)}

    all_ok = all(c["status"] == "ok" for c in checks.values())
    result = {
        "status": "ok" if all_ok else "degraded",
        "checks": checks,
    }
    return JSONResponse(content=result, status_code=200 if all_ok else 503)
