"""Port interface for audit notification.

Audit delivery is fire-and-forget from the cascade's point of view: a sink
may raise, and the caller logs and moves on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

__all__ = ["AuditSink", "StaffDeletedEvent"]


@dataclass(frozen=True, slots=True)
class StaffDeletedEvent:
    """Audit event emitted after a staff account is fully removed.

    Attributes:
        target_id: The removed account.
        requested_by: Operator who asked for the deletion, when known.
        role: Role the account held.
        email: Login email the account held.
        steps: Ledger summary as ``{rule_key: outcome}``.
        occurred_at: UTC timestamp of emission.
    """

    target_id: str
    requested_by: str | None = None
    role: str | None = None
    email: str | None = None
    steps: dict[str, str] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": "staff.deleted",
            "target_id": self.target_id,
            "requested_by": self.requested_by,
            "role": self.role,
            "email": self.email,
            "steps": dict(self.steps),
            "occurred_at": self.occurred_at.isoformat(),
        }


@runtime_checkable
class AuditSink(Protocol):
    """Port for recording deletion audit events."""

    def emit(self, event: StaffDeletedEvent) -> None:
        """Deliver the event. May raise; callers must not depend on delivery."""
        ...
