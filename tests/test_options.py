"""Tests for view option building."""

from datetime import date, datetime, timedelta

import pytest

from timeline.calendar_math import Granularity
from timeline.models import ProjectWindow
from timeline.options import (
    AXIS_CLEARANCE,
    ZOOM_MAX,
    ZOOM_MIN,
    build_options,
    get_default_duration,
    get_time_axis_scale,
    make_snap,
)


class TestOptions:
    @pytest.mark.parametrize("granularity,days", [("day", 1), ("week", 7), ("month", 30)])
    def test_default_duration(self, granularity: str, days: int) -> None:
        assert get_default_duration(granularity) == days

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_axis_scale_is_granularity_unit(self, granularity: Granularity) -> None:
        assert get_time_axis_scale(granularity) == (granularity.value, 1)

    def test_week_bounds_are_expanded(self) -> None:
        opts = build_options(ProjectWindow(date(2026, 3, 1), date(2026, 4, 30), Granularity.WEEK))
        assert opts.start == opts.min == date(2026, 2, 23)
        assert opts.end == opts.max == date(2026, 5, 3) + AXIS_CLEARANCE
        assert (opts.scale, opts.step) == ("week", 1)

    def test_fixed_settings(self) -> None:
        opts = build_options(ProjectWindow(date(2026, 3, 1), date(2026, 3, 10), Granularity.DAY))
        assert opts.zoom_min == ZOOM_MIN == timedelta(days=1)
        assert opts.zoom_max == ZOOM_MAX == timedelta(days=730)
        assert opts.orientation == "top"
        assert opts.stack is True
        assert opts.item_margin == 10
        assert opts.show_current_time is False
        assert (opts.height, opts.min_height) == (300, 200)
        ed = opts.editable
        assert ed.add and ed.update_time and ed.update_group and ed.remove

    def test_snap_truncates_and_clamps(self) -> None:
        snap = make_snap(date(2026, 3, 1))
        assert snap(datetime(2026, 3, 5, 13, 0)) == date(2026, 3, 5)
        assert snap(datetime(2026, 2, 5, 13, 0)) == date(2026, 3, 1)

    def test_custom_snap_is_kept(self) -> None:
        def snap(d):
            return d
        opts = build_options(ProjectWindow(date(2026, 3, 1), date(2026, 3, 10), Granularity.DAY), snap)
        assert opts.snap is snap
