from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, FrozenSet, Iterable, Set, Tuple

from PyQt6 import QtCore

from timeline.calendar_math import (
    Granularity, as_date, get_relative_time_label, get_relative_week_index,
)

logger = logging.getLogger(__name__)

LABEL_REFRESH_MS = 100

# style classes written onto axis labels
CLS_RELATIVE     = "tl-relative"
CLS_FLAT         = "tl-relative-flat"          # first half of a split week, no arrow edge
CLS_CONTINUATION = "tl-relative-continuation"  # second half of a split week, background only
CLS_MEASURE      = "tl-measure"                # renderer-internal sizing label, never shown

_RELATIVE_RE = re.compile(r"^(DAY|WEEK|MONTH)\d+$")
_WEEK_CLASS_RE = re.compile(r"^week(\d+)$")
_MONTHS = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")


@dataclass(frozen=True)
class AxisContext:
    granularity: Granularity
    project_start: date
    hint: date | None = None          # approximate tick date, if the renderer exposes one
    classes: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def base(self) -> date:
        return self.hint or self.project_start


# ---------------------------------------------------------------------
# tick text -> date
# ---------------------------------------------------------------------
def _nearest(candidates: Iterable[date], base: date) -> date | None:
    best = None
    for c in candidates:
        if best is None or abs((c - base).days) < abs((best - base).days):
            best = c
    return best


def _shift_month(d: date, months: int) -> date:
    idx = d.year * 12 + (d.month - 1) + months
    return date(idx // 12, idx % 12 + 1, 1)


def _day_tick(text: str, ctx: AxisContext) -> date | None:
    text = text.strip()
    if not text.isdigit():
        return None
    day = int(text)
    out = []
    for offset in (-1, 0, 1):
        first = _shift_month(ctx.base.replace(day=1), offset)
        try:
            out.append(first.replace(day=day))
        except ValueError:
            continue
    return _nearest(out, ctx.base)


def _month_tick(text: str, ctx: AxisContext) -> date | None:
    low = text.strip().lower()
    month = next((i + 1 for i, m in enumerate(_MONTHS) if m in low), None)
    if month is None:
        return None
    year = re.search(r"\b(\d{4})\b", low)
    if year:
        return date(int(year.group(1)), month, 1)
    b = ctx.base
    return _nearest((date(y, month, 1) for y in (b.year - 1, b.year, b.year + 1)), b)


def week_number_of(classes: Iterable[str]) -> int | None:
    for c in classes:
        m = _WEEK_CLASS_RE.match(c)
        if m:
            return int(m.group(1))
    return None


def _week_key(lb) -> Tuple[int, int] | None:
    """(ISO year, week) of a week segment; None without a week class or start."""
    week = week_number_of(lb.classes)
    seg_start = getattr(lb, "start", None)
    if week is None or seg_start is None:
        return None
    return as_date(seg_start).isocalendar()[0], week


def _week_tick(text: str, ctx: AxisContext) -> date | None:
    week = week_number_of(ctx.classes)
    if week is None:
        digits = re.search(r"(\d+)", text)
        if not digits:
            return None
        week = int(digits.group(1))
    iso_year = ctx.base.isocalendar()[0]
    out = []
    for y in (iso_year - 1, iso_year, iso_year + 1):
        try:
            out.append(date.fromisocalendar(y, week, 1))
        except ValueError:
            continue
    return _nearest(out, ctx.base)


TICK_PARSERS: Dict[Granularity, Callable[[str, AxisContext], date | None]] = {
    Granularity.DAY: _day_tick,
    Granularity.WEEK: _week_tick,
    Granularity.MONTH: _month_tick,
}


def tick_to_date(text: str, ctx: AxisContext, parsers=None) -> date | None:
    """Recover the date an absolute axis label stands for, or None."""
    parser = (parsers or TICK_PARSERS).get(ctx.granularity)
    if parser is None:
        return None
    return parser(text or "", ctx)


# ---------------------------------------------------------------------
# rewriting
# ---------------------------------------------------------------------
def is_relative_text(text: str) -> bool:
    return bool(_RELATIVE_RE.match((text or "").strip()))


class LabelRewriter:
    """Replace absolute axis labels with project-relative counters.

    Labels are duck-typed: ``text`` (str), ``classes`` (mutable set),
    ``measure`` (bool) and an optional ``start`` date hint. Re-running on the
    same labels changes nothing.
    """

    def __init__(self, window_provider: Callable, parsers=None):
        self._window = window_provider
        self._parsers = parsers

    def rewrite(self, labels: Iterable) -> int:
        window = self._window()
        if window is None:
            return 0
        gran = Granularity(window.granularity)
        start = as_date(window.start_date)
        live = [lb for lb in labels if not self._skip_always(lb)]

        split_heads: Set[int] = set()
        continuations: Set[int] = set()
        if gran is Granularity.WEEK:
            split_heads, continuations = self._split_weeks(live)

        changed = 0
        for lb in live:
            if is_relative_text(lb.text) or CLS_CONTINUATION in lb.classes:
                continue
            ctx = AxisContext(gran, start, getattr(lb, "start", None), frozenset(lb.classes))
            if id(lb) in continuations:
                lb.text = ""
                lb.classes.add(CLS_CONTINUATION)
                changed += 1
                continue
            d = tick_to_date(lb.text, ctx, self._parsers)
            if d is None:
                logger.debug("axis label %r has no recoverable date", lb.text)
                continue
            lb.text = self.relative_label(d, start, gran)
            if id(lb) in split_heads:
                lb.classes.add(CLS_FLAT)
            else:
                lb.classes.add(CLS_RELATIVE)
            changed += 1
        return changed

    @staticmethod
    def _split_weeks(labels) -> Tuple[Set[int], Set[int]]:
        """ids of split-week heads and of their continuation segments.

        A segment continues a week only when it has the same ISO year and
        week as the segment right before it and starts where that one ends.
        """
        heads: Set[int] = set()
        tails: Set[int] = set()
        head_of: Dict[Tuple[int, int], object] = {}
        end_of: Dict[Tuple[int, int], date] = {}
        for lb in labels:
            key = _week_key(lb)
            if key is None:
                continue
            seg_start = getattr(lb, "start", None)
            if key in end_of and seg_start is not None and end_of[key] == seg_start:
                tails.add(id(lb))
                heads.add(id(head_of[key]))
            else:
                head_of[key] = lb
            end_of[key] = getattr(lb, "end", None)
        return heads, tails

    @staticmethod
    def relative_label(d: date, project_start: date, granularity: Granularity) -> str:
        if granularity is Granularity.WEEK:
            return f"WEEK{get_relative_week_index(d, project_start)}"
        return get_relative_time_label(d, project_start, granularity)

    @staticmethod
    def _skip_always(lb) -> bool:
        return bool(getattr(lb, "measure", False)) or CLS_MEASURE in lb.classes


class LabelScheduler(QtCore.QObject):
    """Runs the rewriter on a fixed timer and on view redraw/range signals.

    ``stop()`` must be called when the view goes away; it stops the timer and
    disconnects from the view.
    """
    rewritten = QtCore.pyqtSignal(int)

    def __init__(self, rewriter: LabelRewriter, parent=None, interval_ms: int = LABEL_REFRESH_MS):
        super().__init__(parent)
        self._rewriter = rewriter
        self._view = None
        self._timer = QtCore.QTimer(self)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self.run)

    def isActive(self) -> bool:
        return self._timer.isActive()

    def start(self, view):
        self.stop()
        self._view = view
        view.rangeChanged.connect(self.run)
        view.redrawn.connect(self.run)
        self._timer.start()

    def stop(self):
        self._timer.stop()
        view, self._view = self._view, None
        if view is None:
            return
        for sig in (view.rangeChanged, view.redrawn):
            try:
                sig.disconnect(self.run)
            except TypeError:
                pass

    @QtCore.pyqtSlot()
    def run(self) -> int:
        if self._view is None:
            return 0
        n = self._rewriter.rewrite(self._view.axis_labels())
        if n:
            self._view.update()
            self.rewritten.emit(n)
        return n
