from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Tuple

from timeline.calendar_math import Granularity, clamp_to_start, expand_to_full_period, snap_to_day

DAY = timedelta(days=1)
ZOOM_MIN = DAY
ZOOM_MAX = timedelta(days=365 * 2)
# the axis range is half-open; one extra day keeps the last column and its label on screen
AXIS_CLEARANCE = DAY

_DEFAULT_DURATION = {
    Granularity.DAY: 1,
    Granularity.WEEK: 7,
    Granularity.MONTH: 30,
}


@dataclass(frozen=True)
class EditableFlags:
    add: bool = True
    update_time: bool = True
    update_group: bool = True
    remove: bool = True


@dataclass(frozen=True)
class TimelineOptions:
    start: date
    end: date
    min: date
    max: date
    scale: str
    step: int = 1
    snap: Callable | None = None
    editable: EditableFlags = field(default_factory=EditableFlags)
    zoom_min: timedelta = ZOOM_MIN
    zoom_max: timedelta = ZOOM_MAX
    orientation: str = "top"
    stack: bool = True
    item_margin: int = 10
    show_current_time: bool = False
    height: int = 300
    min_height: int = 200
    # gesture hooks, called by the view; the view never edits its datasets
    on_add: Callable | None = None       # (native_start)
    on_move: Callable | None = None      # (id, native_start, native_end, native_lane)
    on_remove: Callable | None = None    # (id)


def get_default_duration(granularity: Granularity | str) -> int:
    return _DEFAULT_DURATION[Granularity(granularity)]


def get_time_axis_scale(granularity: Granularity | str) -> Tuple[str, int]:
    return Granularity(granularity).value, 1


def make_snap(project_start: date) -> Callable:
    def snap(d):
        return clamp_to_start(snap_to_day(d), project_start)
    return snap


def build_options(window, snap: Callable | None = None) -> TimelineOptions:
    """View options for a ProjectWindow: expanded bounds, axis unit, snapping."""
    scale, step = get_time_axis_scale(window.granularity)
    start, end = expand_to_full_period(window.start_date, window.end_date, window.granularity)
    end = end + AXIS_CLEARANCE
    return TimelineOptions(
        start=start,
        end=end,
        min=start,
        max=end,
        scale=scale,
        step=step,
        snap=snap or make_snap(window.start_date),
    )
