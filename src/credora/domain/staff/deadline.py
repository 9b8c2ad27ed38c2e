"""Request-scoped deadline for blocking store and identity calls."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class Deadline:
    """Absolute point in time by which a deletion run must finish.

    Uses a monotonic clock. A deadline with ``expires_at=None`` never expires.

    Example:
        >>> d = Deadline.after(30.0)
        >>> d.expired
        False
    """

    expires_at: float | None
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    @classmethod
    def after(
        cls,
        seconds: float | None,
        clock: Callable[[], float] = time.monotonic,
    ) -> Deadline:
        """Create a deadline ``seconds`` from now, or an unbounded one for None."""
        if seconds is None:
            return cls(None, clock)
        return cls(clock() + seconds, clock)

    @classmethod
    def unbounded(cls) -> Deadline:
        return cls(None)

    def remaining(self) -> float | None:
        """Seconds left (never negative), or None when unbounded."""
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - self.clock())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0
