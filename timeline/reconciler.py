from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Hashable, Iterable, List, Sequence, Tuple

from timeline.dataset import DataSet
from timeline.lanes import LaneAllocator
from timeline.models import Lane, Task, VisualItem, to_visual_item

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcilePlan:
    remove: Tuple[Hashable, ...] = ()
    add: Tuple[VisualItem, ...] = ()
    update: Tuple[VisualItem, ...] = ()

    def is_empty(self) -> bool:
        return not (self.remove or self.add or self.update)


def diff_items(old_ids: Iterable[Hashable], new_items: Sequence[VisualItem]) -> ReconcilePlan:
    """Split into remove (old only), add (new only) and update (both)."""
    old = set(old_ids)
    new_ids = {it.id for it in new_items}
    return ReconcilePlan(
        remove=tuple(i for i in old if i not in new_ids),
        add=tuple(it for it in new_items if it.id not in old),
        update=tuple(it for it in new_items if it.id in old),
    )


def project_tasks(tasks: Sequence[Task], allocator: LaneAllocator) -> List[VisualItem]:
    """Assign lanes, then convert every task to its visual item."""
    lanes = allocator.sync(t.id for t in tasks)
    return [to_visual_item(t, lanes.get(t.id, 0)) for t in tasks]


class DatasetReconciler:
    """The only writer of the view's item and lane datasets."""

    def __init__(self, items: DataSet, lanes: DataSet):
        self.items = items
        self.lanes = lanes

    def reconcile(self, visual_items: Sequence[VisualItem]) -> ReconcilePlan:
        plan = diff_items(self.items.get_ids(), visual_items)
        for key in plan.remove:
            self.items.remove(key)
        for it in plan.add:
            self.items.add(it)
        for it in plan.update:
            self.items.update(it)
        logger.debug("reconcile: -%d +%d ~%d", len(plan.remove), len(plan.add), len(plan.update))
        return plan

    def sync_lanes(self, count: int) -> Tuple[List[int], List[int]]:
        """Make lane rows exactly ``0..count-1``."""
        existing = set(self.lanes.get_ids())
        added = [i for i in range(count) if i not in existing]
        removed = sorted(i for i in existing if i >= count)
        for i in added:
            self.lanes.add(Lane(id=i))
        for i in removed:
            self.lanes.remove(i)
        return added, removed

    def clear(self) -> None:
        self.items.clear()
        self.lanes.clear()
