"""Port interface for the identity plane.

The identity plane owns login credentials. It is a separate system from the
data plane and shares no transaction with it, so removal reports a tri-state
result instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, runtime_checkable

__all__ = [
    "IdentityProvider",
    "IdentityRemovalResult",
    "IdentityRemovalStatus",
]


class IdentityRemovalStatus(StrEnum):
    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class IdentityRemovalResult:
    """Outcome of one identity removal attempt.

    Attributes:
        status: OK, NOT_FOUND or ERROR.
        message: Failure detail when status is ERROR.
    """

    status: IdentityRemovalStatus
    message: str = ""

    @property
    def satisfied(self) -> bool:
        """True when the identity is gone, whether removed now or earlier."""
        return self.status is not IdentityRemovalStatus.ERROR

    @classmethod
    def ok(cls) -> IdentityRemovalResult:
        return cls(IdentityRemovalStatus.OK)

    @classmethod
    def not_found(cls) -> IdentityRemovalResult:
        return cls(IdentityRemovalStatus.NOT_FOUND)

    @classmethod
    def error(cls, message: str) -> IdentityRemovalResult:
        return cls(IdentityRemovalStatus.ERROR, message)


@runtime_checkable
class IdentityProvider(Protocol):
    """Port for removing and probing login identities."""

    def remove_identity(
        self, target_id: str, *, timeout: float | None = None
    ) -> IdentityRemovalResult:
        """Remove the identity record for ``target_id``.

        Args:
            target_id: Identity identifier (same value as the staff id).
            timeout: Remaining request budget in seconds.

        Returns:
            OK when removed, NOT_FOUND when already absent, ERROR otherwise.
        """
        ...

    def identity_exists(self, target_id: str) -> bool:
        """Report whether the identity record is still present."""
        ...
