"""Domain exception hierarchy for type-safe error handling.

This module provides the base exception hierarchy for all domain errors.
Exceptions include structured error codes and context for consistent
API error handling and logging across the back-office packages.

Example:
    >>> from credora.foundation.domain.exceptions import NotFoundError
    >>> raise NotFoundError("StaffAccount", "9b2f0c1e-7f43-4a55-9a51-2c0d2b1e8f10")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uuid import UUID

__all__ = [
    "CatalogError",
    "DomainError",
    "NotFoundError",
    "ValidationError",
]


class DomainError(Exception):
    """Base class for all domain errors.

    Provides error code and structured context for debugging. All domain
    exceptions inherit from this class so the HTTP layer can translate
    them into problem responses in one place.

    Attributes:
        error_code: Machine-readable error code for client handling.
        message: Human-readable error description.
        context: Structured debugging information (target ids, relation names).

    Example:
        >>> raise DomainError("Operation failed", context={"target_id": "123"})
        DomainError: Operation failed (target_id=123)
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize domain error with message and optional context.

        Args:
            message: Human-readable error description.
            context: Structured debugging information. Keys should be snake_case.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation including context for logging."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist.

    Maps to HTTP 404 Not Found.

    Attributes:
        error_code: "RESOURCE_NOT_FOUND" (class constant).
        resource_type: Type of missing resource.
        resource_id: Identifier of missing resource.

    Example:
        >>> raise NotFoundError("StaffAccount", "u-1")
        NotFoundError: StaffAccount not found: u-1
    """

    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        resource_id: UUID | str,
        **extra_context: Any,
    ) -> None:
        """Initialize not found error.

        Args:
            resource_type: Type of resource (e.g., "StaffAccount").
            resource_id: Identifier of missing resource. UUID is converted to string.
            **extra_context: Additional debugging context.
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type} not found: {resource_id}"
        context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            **extra_context,
        }
        super().__init__(message, context)


class ValidationError(DomainError):
    """Raised when input fails domain validation rules.

    Maps to HTTP 422 Unprocessable Entity.

    Example:
        >>> raise ValidationError("target_id", "must not be blank")
        ValidationError: Validation failed for 'target_id': must not be blank
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        **extra_context: Any,
    ) -> None:
        self.field = field
        self.reason = reason
        message = f"Validation failed for '{field}': {reason}"
        context = {
            "field": field,
            "reason": reason,
            **extra_context,
        }
        super().__init__(message, context)


class CatalogError(DomainError):
    """Raised when the reference catalog is malformed.

    A malformed catalog (duplicate rule keys, unsafe identifiers, a reparent
    rule without a default) is a deployment defect, not a per-request
    condition. It is raised before any mutation takes place and maps to
    HTTP 500.

    Example:
        >>> raise CatalogError("Duplicate rule", rule="loans.created_by")
        CatalogError: Invalid reference catalog: Duplicate rule (rule=loans.created_by)
    """

    error_code: str = "CATALOG_ERROR"

    def __init__(self, reason: str, **context: Any) -> None:
        """Initialize catalog error.

        Args:
            reason: What is wrong with the catalog.
            **context: Offending rule key, relation or column.
        """
        self.reason = reason
        super().__init__(f"Invalid reference catalog: {reason}", context)
