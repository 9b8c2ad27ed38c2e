"""Credora FastAPI integration: app factory, RFC 7807 errors, request IDs."""

from credora.infra.fastapi.app_factory import create_app
from credora.infra.fastapi.error_handlers import (
    ProblemDetail,
    register_exception_handlers,
)
from credora.infra.fastapi.middleware.request_id import (
    RequestIdMiddleware,
    get_request_id,
)
from credora.infra.fastapi.settings import AppSettings, CORSSettings

__all__ = [
    "AppSettings",
    "CORSSettings",
    "ProblemDetail",
    "RequestIdMiddleware",
    "create_app",
    "get_request_id",
    "register_exception_handlers",
]
