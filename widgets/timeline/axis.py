from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Set

from dateutil.relativedelta import relativedelta
from dateutil.rrule import DAILY, MONTHLY, MO, WEEKLY, rrule

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass
class AxisLabel:
    """One tick segment on the time axis. ``end`` is exclusive."""
    text: str
    start: date
    end: date
    classes: Set[str] = field(default_factory=set)
    measure: bool = False

    @property
    def days(self) -> int:
        return (self.end - self.start).days


def _first_of_next_month(d: date) -> date:
    return d.replace(day=1) + relativedelta(months=1)


def _day_labels(start: date, end: date) -> List[AxisLabel]:
    out = []
    for dt in rrule(DAILY, dtstart=start, until=end - timedelta(days=1)):
        d = dt.date()
        out.append(AxisLabel(str(d.day), d, d + timedelta(days=1), {"day", f"day{d.day}"}))
    return out


def _week_labels(start: date, end: date) -> List[AxisLabel]:
    out = []
    first_monday = start - timedelta(days=start.weekday())
    for dt in rrule(WEEKLY, byweekday=MO, dtstart=first_monday, until=end - timedelta(days=1)):
        monday = dt.date()
        week = monday.isocalendar()[1]
        seg_start = max(monday, start)
        seg_end = min(monday + timedelta(days=7), end)
        classes = {"week", f"week{week}"}
        cut = _first_of_next_month(seg_start)
        if cut < seg_end:
            # the week crosses a month column: two segments, text on the first only
            out.append(AxisLabel(str(week), seg_start, cut, set(classes)))
            out.append(AxisLabel("", cut, seg_end, set(classes)))
        else:
            out.append(AxisLabel(str(week), seg_start, seg_end, set(classes)))
    return out


def _month_labels(start: date, end: date) -> List[AxisLabel]:
    out = []
    for dt in rrule(MONTHLY, dtstart=start.replace(day=1), until=end - timedelta(days=1)):
        first = dt.date()
        seg_start = max(first, start)
        seg_end = min(_first_of_next_month(first), end)
        text = f"{_MONTH_ABBR[first.month - 1]} {first.year}"
        out.append(AxisLabel(text, seg_start, seg_end, {"month", f"month{first.month}"}))
    return out


def build_axis_labels(start: date, end: date, scale: str) -> List[AxisLabel]:
    """Minor tick segments covering ``[start, end)`` for a day/week/month scale."""
    if end <= start:
        return []
    if scale == "day":
        return _day_labels(start, end)
    if scale == "week":
        return _week_labels(start, end)
    if scale == "month":
        return _month_labels(start, end)
    raise ValueError(f"unknown axis scale {scale!r}")


def build_major_labels(start: date, end: date, scale: str) -> List[AxisLabel]:
    """Upper axis row: months above day/week ticks, years above month ticks."""
    out: List[AxisLabel] = []
    if end <= start:
        return out
    if scale == "month":
        y = start.year
        while date(y, 1, 1) < end:
            seg_start = max(date(y, 1, 1), start)
            seg_end = min(date(y + 1, 1, 1), end)
            out.append(AxisLabel(str(y), seg_start, seg_end, {"major"}))
            y += 1
        return out
    for m in _month_labels(start, end):
        out.append(AxisLabel(m.text, m.start, m.end, {"major"}))
    return out
