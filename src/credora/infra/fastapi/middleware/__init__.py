"""Middleware components for the Credora FastAPI integration."""

from credora.infra.fastapi.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIdMiddleware,
    get_request_id,
)

__all__ = [
    "REQUEST_ID_HEADER",
    "RequestIdMiddleware",
    "get_request_id",
]
