"""Port interface for tracking emails of removed staff accounts.

Released emails enter a cooldown before they may be registered again, so a
freshly removed operator cannot be re-created under the same login by
accident.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

__all__ = ["DeletedEmailTracker"]


@runtime_checkable
class DeletedEmailTracker(Protocol):
    """Port for recording released emails."""

    def track(self, email: str, target_id: str) -> None:
        """Record that ``email`` was released by the removal of ``target_id``."""
        ...
