"""Unit tests for Deadline."""

from __future__ import annotations

import pytest

from credora.domain.staff.deadline import Deadline


class _Clock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.mark.unit
class TestDeadline:
    def test_after(self) -> None:
        clock = _Clock()
        deadline = Deadline.after(30.0, clock)
        assert deadline.expires_at == 130.0
        assert deadline.remaining() == 30.0

    def test_expires_as_clock_advances(self) -> None:
        clock = _Clock()
        deadline = Deadline.after(5.0, clock)
        clock.now = 104.0
        assert deadline.expired is False
        clock.now = 105.0
        assert deadline.expired is True

    def test_remaining_never_negative(self) -> None:
        clock = _Clock()
        deadline = Deadline.after(1.0, clock)
        clock.now = 200.0
        assert deadline.remaining() == 0.0

    def test_unbounded(self) -> None:
        deadline = Deadline.unbounded()
        assert deadline.remaining() is None
        assert deadline.expired is False

    def test_after_none_is_unbounded(self) -> None:
        assert Deadline.after(None).expires_at is None
