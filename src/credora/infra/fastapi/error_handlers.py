"""RFC 7807 Problem Details exception handlers for FastAPI.

Translates domain exceptions into ``application/problem+json`` responses.
Deletion refusals and failures are not exceptions (they come back as a
report); these handlers cover malformed input, unknown accounts, a broken
reference catalog and anything unexpected.

Usage:
    from credora.infra.fastapi.error_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from credora.foundation.domain.exceptions import (
    CatalogError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from credora.infra.fastapi.middleware.request_id import get_request_id

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response model.

    Extension fields:
    - error_code: Machine-readable error code for client handling
    - context: Structured debugging information
    - correlation_id: Request correlation ID (5xx errors only)
    """

    type: str = Field(
        ...,
        description="URI reference identifying problem type",
        examples=["/errors/not-found", "/errors/validation-error"],
    )
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., ge=400, le=599, description="HTTP status code")
    detail: str = Field(..., description="Human-readable explanation")
    instance: str | None = Field(
        default=None,
        description="URI reference to specific occurrence (request path)",
    )
    error_code: str | None = Field(default=None, description="Machine-readable error code")
    context: dict[str, Any] | None = Field(
        default=None,
        description="Structured debugging information",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for support requests",
    )


_SENSITIVE_PATTERNS = [
    (
        re.compile(r"postgresql(\+\w+)?://[^@]*@[^/\s]*"),
        "postgresql://[REDACTED]@[REDACTED]",
    ),
    (
        re.compile(r"password\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "password=[REDACTED]",
    ),
    (
        re.compile(r"bearer\s+[A-Za-z0-9._\-]+", re.IGNORECASE),
        "Bearer [REDACTED]",
    ),
    (
        re.compile(r"(api[_-]?key|service_role_key)\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "api_key=[REDACTED]",
    ),
]

_SENSITIVE_KEYS = frozenset(
    {"password", "secret", "token", "api_key", "apikey", "credential", "service_role_key"}
)


def _create_problem_response(problem: ProblemDetail) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _get_correlation_id() -> str:
    """Request ID set by RequestIdMiddleware, or "unknown" outside a request."""
    return get_request_id() or "unknown"


def _sanitize_context(context: dict[str, Any] | None) -> dict[str, Any] | None:
    """Make exception context safe to return to clients.

    Drops credential-named keys, stringifies UUIDs and datetimes, redacts
    connection strings and secrets embedded in text.
    """
    if context is None:
        return None

    sanitized = {
        key: _sanitize_value(value)
        for key, value in context.items()
        if key.lower() not in _SENSITIVE_KEYS
    }
    return sanitized or None


def _sanitize_value(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return _redact_sensitive_strings(value)
    if isinstance(value, dict):
        return _sanitize_context(value)
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(v) for v in value]
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


def _redact_sensitive_strings(text: str) -> str:
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def _domain_problem(
    request: Request,
    exc: DomainError,
    *,
    slug: str,
    title: str,
    status: int,
) -> JSONResponse:
    problem = ProblemDetail(
        type=f"/errors/{slug}",
        title=title,
        status=status,
        detail=_redact_sensitive_strings(str(exc)),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Translate NotFoundError to 404."""
    return _domain_problem(request, exc, slug="not-found", title="Resource Not Found", status=404)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Translate ValidationError to 422 with field-level details."""
    return _domain_problem(
        request, exc, slug="validation-error", title="Validation Error", status=422
    )


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Translate CatalogError to 500.

    A malformed reference catalog is a deployment defect, so the response
    carries the correlation ID like any other server error.
    """
    correlation_id = _get_correlation_id()
    logger.error(
        "reference_catalog_invalid",
        extra={"correlation_id": correlation_id, "reason": exc.reason},
    )
    problem = ProblemDetail(
        type="/errors/catalog-error",
        title="Reference Catalog Error",
        status=500,
        detail=str(exc),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Fallback for domain errors without a more specific handler: 400."""
    return _domain_problem(request, exc, slug="domain-error", title="Bad Request", status=400)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Translate FastAPI request validation failures to 422."""
    errors = [
        {
            "loc": list(error.get("loc", [])),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]

    problem = ProblemDetail(
        type="/errors/request-validation-error",
        title="Request Validation Error",
        status=422,
        detail="Request validation failed",
        instance=str(request.url.path),
        error_code="REQUEST_VALIDATION_ERROR",
        context={"errors": errors},
    )
    return _create_problem_response(problem)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log everything, return a sanitized 500.

    In debug mode the response includes the exception type and message.
    """
    correlation_id = _get_correlation_id()

    logger.exception(
        "unhandled_exception",
        extra={
            "correlation_id": correlation_id,
            "path": str(request.url.path),
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )

    if getattr(request.app, "debug", False):
        detail = _redact_sensitive_strings(f"{type(exc).__name__}: {exc}")
        context: dict[str, Any] | None = {"exception_type": type(exc).__name__}
    else:
        detail = "An internal error occurred. Please contact support with the correlation ID."
        context = None

    problem = ProblemDetail(
        type="/errors/internal-error",
        title="Internal Server Error",
        status=500,
        detail=detail,
        instance=str(request.url.path),
        error_code="INTERNAL_ERROR",
        context=context,
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers, most specific first.

    1. NotFoundError -> 404
    2. ValidationError -> 422
    3. CatalogError -> 500
    4. DomainError -> 400
    5. RequestValidationError -> 422
    6. Exception -> 500
    """
    # Starlette's handler typing is stricter than the runtime contract.
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(CatalogError, catalog_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
