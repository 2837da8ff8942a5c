from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable

from timeline.calendar_math import Granularity, clamp_to_start, format_date, snap_to_day
from timeline.lanes import LaneAllocator
from timeline.options import get_default_duration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddResult:
    start: str
    end: str


@dataclass(frozen=True)
class MoveResult:
    id: str
    start: str
    end: str
    lane: int | None = None


class GestureTranslator:
    """Renderer pointer gestures -> snapped, clamped domain dates.

    Nothing here edits the task list; results go back to the owner, and the
    renderer's own item store is never allowed to keep an added item.
    """

    def __init__(self, window_provider: Callable, lanes: LaneAllocator):
        self._window = window_provider
        self._lanes = lanes

    @property
    def project_start(self) -> date:
        return self._window().start_date

    @property
    def granularity(self) -> Granularity:
        return self._window().granularity

    def on_add(self, native_start) -> AddResult | None:
        if native_start is None:
            logger.debug("add gesture without a start date ignored")
            return None
        start = clamp_to_start(snap_to_day(native_start), self.project_start)
        end = start + timedelta(days=get_default_duration(self.granularity))
        return AddResult(format_date(start), format_date(end))

    def on_move(self, item_id, native_start, native_end=None, native_lane=None) -> MoveResult | None:
        if item_id is None or native_start is None:
            logger.debug("move gesture for %r without a start date ignored", item_id)
            return None
        start = clamp_to_start(snap_to_day(native_start), self.project_start)
        end = snap_to_day(native_end) if native_end is not None else start
        if end < start:
            end = start
        lane = None
        if native_lane is not None:
            lane = int(native_lane)
            self._lanes.pin(str(item_id), lane)
        return MoveResult(str(item_id), format_date(start), format_date(end), lane)

    def on_remove(self, item_id) -> str | None:
        if item_id is None:
            return None
        return str(item_id)
