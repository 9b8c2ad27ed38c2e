"""Unit tests for contribution types and entry-point discovery."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from credora.foundation.application import (
    DiscoveredContribution,
    MiddlewareContribution,
    discover,
)


class TestMiddlewareContribution:
    @pytest.mark.unit
    def test_default_priority(self) -> None:
        assert MiddlewareContribution(object).priority == 400

    @pytest.mark.unit
    @pytest.mark.parametrize("priority", [-1, 500])
    def test_priority_out_of_band(self, priority: int) -> None:
        with pytest.raises(ValueError, match="priority"):
            MiddlewareContribution(object, priority=priority)


class TestDiscover:
    @pytest.mark.unit
    def test_unknown_group_empty(self) -> None:
        assert discover("credora.nonexistent.group.for.testing") == []

    @pytest.mark.unit
    def test_loads_and_excludes(self) -> None:
        keep = MagicMock()
        keep.name = "staff"
        keep.load.return_value = "router"
        skip = MagicMock()
        skip.name = "health"
        with patch(
            "credora.foundation.application.discovery.entry_points", return_value=[keep, skip]
        ):
            result = discover("credora.routers", exclude_names=frozenset({"health"}))
        assert result == [DiscoveredContribution("staff", "credora.routers", "router")]
        skip.load.assert_not_called()

    @pytest.mark.unit
    def test_broken_entry_point_skipped(self) -> None:
        broken = MagicMock()
        broken.name = "broken"
        broken.load.side_effect = ImportError("missing optional dependency")
        with patch(
            "credora.foundation.application.discovery.entry_points", return_value=[broken]
        ):
            assert discover("credora.routers") == []
