from __future__ import annotations
import re
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Tuple, Union

from dateutil.relativedelta import relativedelta

DateLike = Union[date, datetime]

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


class FormatError(ValueError):
    """Raised for date strings that are not ``YYYY-MM-DD``."""


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


# ---- parsing / formatting ----
def parse_local_date(s: str) -> date:
    """Parse ``YYYY-MM-DD`` as a plain calendar date (no timezone shift)."""
    m = _DATE_RE.match(s.strip()) if isinstance(s, str) else None
    if not m:
        raise FormatError(f"expected YYYY-MM-DD, got {s!r}")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError as e:
        raise FormatError(f"invalid calendar date {s!r}: {e}") from e


def format_date(d: DateLike) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def as_date(d: DateLike | str) -> date:
    if isinstance(d, str):
        return parse_local_date(d)
    if isinstance(d, datetime):
        return d.date()
    return d


# ---- snapping ----
def snap_to_day(d: DateLike) -> date:
    """Drop the time-of-day part."""
    return as_date(d)


def clamp_to_start(d: DateLike, project_start: DateLike | str) -> date:
    d = as_date(d)
    start = as_date(project_start)
    return start if d < start else d


def monday_of(d: DateLike) -> date:
    d = as_date(d)
    return d - timedelta(days=d.weekday())


def sunday_of(d: DateLike) -> date:
    return monday_of(d) + timedelta(days=6)


def expand_to_full_period(start: DateLike | str, end: DateLike | str,
                          granularity: Granularity | str) -> Tuple[date, date]:
    """Widen ``[start, end]`` to whole periods of ``granularity``.

    week  -> Monday of the start week .. Sunday of the end week
    month -> 1st of the start month .. last day of the end month
    """
    start = as_date(start)
    end = as_date(end)
    g = Granularity(granularity)
    if g is Granularity.WEEK:
        return monday_of(start), sunday_of(end)
    if g is Granularity.MONTH:
        return start.replace(day=1), end + relativedelta(day=31)
    return start, end


# ---- week numbering / relative counters ----
def get_iso_week_number(d: DateLike) -> int:
    return as_date(d).isocalendar()[1]


def days_between(d: DateLike, project_start: DateLike | str) -> int:
    return (as_date(d) - as_date(project_start)).days


def get_relative_time_label(d: DateLike, project_start: DateLike | str,
                            granularity: Granularity | str) -> str:
    """``DAYn`` / ``WEEKn`` / ``MONTHn`` counted from the project start (1-based).

    MONTH uses fixed 30-day buckets, not calendar months.
    """
    diff = days_between(d, project_start)
    g = Granularity(granularity)
    if g is Granularity.DAY:
        return f"DAY{max(1, diff + 1)}"
    if g is Granularity.WEEK:
        return f"WEEK{max(1, diff // 7 + 1)}"
    return f"MONTH{max(1, diff // 30 + 1)}"


def get_relative_week_index(d: DateLike, project_start: DateLike | str) -> int:
    """Week counter aligned to ISO (Monday-start) weeks; the start's own week is 1."""
    weeks = (monday_of(d) - monday_of(as_date(project_start))).days // 7
    return max(1, weeks + 1)
