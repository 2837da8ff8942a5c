from __future__ import annotations
import logging
from typing import Dict, Iterable

logger = logging.getLogger(__name__)

# one empty row is always kept below the last used lane as a drop target
BUFFER_LANES = 1


class LaneAllocator:
    """Task id -> lane (row) index.

    Every task gets its own row; no interval packing. An id keeps its lane
    until it disappears from the task list, and freed lanes are reused
    lowest-first.
    """

    def __init__(self):
        self._lanes: Dict[str, int] = {}

    def __contains__(self, task_id: str) -> bool:
        return task_id in self._lanes

    def __len__(self) -> int:
        return len(self._lanes)

    def lane_of(self, task_id: str) -> int | None:
        return self._lanes.get(task_id)

    def assignments(self) -> Dict[str, int]:
        return dict(self._lanes)

    def sync(self, task_ids: Iterable[str]) -> Dict[str, int]:
        """Drop ids that are gone, give new ids the lowest free lane."""
        ids = list(task_ids)
        live = set(ids)
        for stale in [tid for tid in self._lanes if tid not in live]:
            logger.debug("lane %s freed by %s", self._lanes[stale], stale)
            del self._lanes[stale]

        for tid in ids:
            if tid in self._lanes:
                continue
            used = set(self._lanes.values())
            lane = 0
            while lane in used:
                lane += 1
            self._lanes[tid] = lane
        return self.assignments()

    def pin(self, task_id: str, lane: int) -> None:
        """Record a lane chosen by the user (drag to another row).

        If another task holds that lane the two swap, so lanes stay unique.
        """
        lane = int(lane)
        if lane < 0:
            return
        previous = self._lanes.get(task_id)
        for other, other_lane in list(self._lanes.items()):
            if other != task_id and other_lane == lane:
                if previous is None:
                    del self._lanes[other]
                else:
                    self._lanes[other] = previous
                logger.debug("lane %s swapped: %s -> %s", lane, other, previous)
        self._lanes[task_id] = lane

    def release(self, task_id: str) -> None:
        self._lanes.pop(task_id, None)

    def clear(self) -> None:
        self._lanes.clear()

    def lane_count(self) -> int:
        """Rows the view needs: highest used lane + the buffer row."""
        top = max(self._lanes.values(), default=0)
        return top + 1 + BUFFER_LANES
