"""Tests for gesture translation."""

from datetime import date, datetime, timedelta

import pytest

from timeline.calendar_math import Granularity
from timeline.gestures import AddResult, GestureTranslator, MoveResult
from timeline.lanes import LaneAllocator
from timeline.models import ProjectWindow

START = date(2026, 3, 1)


def _translator(granularity: Granularity = Granularity.WEEK, lanes: LaneAllocator | None = None):
    window = ProjectWindow(START, date(2026, 4, 30), granularity)
    return GestureTranslator(lambda: window, lanes or LaneAllocator())


class TestOnAdd:
    @pytest.mark.parametrize("granularity,days", [("day", 1), ("week", 7), ("month", 30)])
    def test_default_duration(self, granularity: str, days: int) -> None:
        res = _translator(Granularity(granularity)).on_add(datetime(2026, 3, 10, 14, 30))
        assert res == AddResult("2026-03-10", (date(2026, 3, 10) + timedelta(days=days)).isoformat())

    def test_drag_before_start_is_clamped(self) -> None:
        res = _translator().on_add(datetime.combine(START - timedelta(days=5), datetime.min.time()))
        assert res.start == "2026-03-01"
        assert res.end == "2026-03-08"

    def test_missing_start_is_ignored(self) -> None:
        assert _translator().on_add(None) is None


class TestOnMove:
    def test_snaps_and_clamps_start_only(self) -> None:
        res = _translator().on_move("a", datetime(2026, 2, 20, 9), datetime(2026, 2, 27, 18))
        assert res == MoveResult("a", "2026-03-01", "2026-03-01", None)

    def test_end_is_snapped(self) -> None:
        res = _translator().on_move("a", datetime(2026, 3, 3, 9), datetime(2026, 3, 7, 18))
        assert (res.start, res.end) == ("2026-03-03", "2026-03-07")

    def test_missing_end_falls_back_to_start(self) -> None:
        res = _translator().on_move("a", date(2026, 3, 4))
        assert res.end == "2026-03-04"

    def test_lane_is_pinned(self) -> None:
        lanes = LaneAllocator()
        lanes.sync(["a"])
        res = _translator(lanes=lanes).on_move("a", date(2026, 3, 4), date(2026, 3, 6), 2)
        assert res.lane == 2
        assert lanes.lane_of("a") == 2

    @pytest.mark.parametrize("item_id,start", [(None, date(2026, 3, 4)), ("a", None)])
    def test_missing_values_are_ignored(self, item_id, start) -> None:
        assert _translator().on_move(item_id, start, date(2026, 3, 6)) is None


class TestOnRemove:
    def test_pass_through(self) -> None:
        assert _translator().on_remove("a") == "a"

    def test_none_is_ignored(self) -> None:
        assert _translator().on_remove(None) is None
