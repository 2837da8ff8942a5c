from __future__ import annotations
import logging
from dataclasses import replace
from typing import Callable, Sequence, Tuple

from PyQt6 import QtCore

from timeline.dataset import DataSet
from timeline.gestures import GestureTranslator
from timeline.labels import LABEL_REFRESH_MS, LabelRewriter, LabelScheduler
from timeline.lanes import LaneAllocator
from timeline.models import ProjectWindow, Task
from timeline.options import build_options
from timeline.reconciler import DatasetReconciler, ReconcilePlan, project_tasks
from timeline.templates import Template, template_to_style_vars
from widgets.timeline.timeline_view import create_view

logger = logging.getLogger(__name__)


class TimelineController(QtCore.QObject):
    """Owns everything derived from one project window: lanes, datasets,
    the label timer and the view. ``destroy()`` ends that lifetime.
    """
    itemAddRequested    = QtCore.pyqtSignal(str, str)        # start, end
    itemUpdateRequested = QtCore.pyqtSignal(str, str, str)   # id, start, end
    itemSelected        = QtCore.pyqtSignal(object)          # id | None
    itemRemoveRequested = QtCore.pyqtSignal(str)             # id

    def __init__(self, container, window: ProjectWindow, template: Template | None = None,
                 view_factory: Callable = create_view, parent=None,
                 label_interval_ms: int = LABEL_REFRESH_MS):
        super().__init__(parent)
        self._container = container
        self._window = window
        self._template = template
        self._factory = view_factory
        self._tasks: Tuple[Task, ...] = ()
        self._view = None
        self._destroyed = False

        self.items = DataSet(parent=self)
        self.lane_rows = DataSet(parent=self)
        self.lanes = LaneAllocator()
        self.reconciler = DatasetReconciler(self.items, self.lane_rows)
        self.gestures = GestureTranslator(lambda: self._window, self.lanes)
        self.rewriter = LabelRewriter(lambda: self._window)
        self.labels = LabelScheduler(self.rewriter, self, label_interval_ms)

        self._build_view()
        self.reconciler.sync_lanes(self.lanes.lane_count())

    # ---- public ----
    @property
    def view(self):
        return self._view

    @property
    def window(self) -> ProjectWindow:
        return self._window

    def is_destroyed(self) -> bool:
        return self._destroyed

    def set_tasks(self, tasks: Sequence[Task]) -> ReconcilePlan:
        if self._destroyed:
            logger.debug("set_tasks after destroy ignored")
            return ReconcilePlan()
        self._tasks = tuple(tasks)
        plan = self.reconciler.reconcile(project_tasks(self._tasks, self.lanes))
        self.reconciler.sync_lanes(self.lanes.lane_count())
        return plan

    def set_project_window(self, window: ProjectWindow):
        if self._destroyed:
            logger.debug("set_project_window after destroy ignored")
            return
        if window == self._window:
            return
        logger.info("project window -> %s..%s (%s)", window.start_date, window.end_date, window.granularity.value)
        self._teardown_view()
        self.lanes.clear()
        self.reconciler.clear()
        self._window = window
        self._build_view()
        self.set_tasks(self._tasks)

    def set_template(self, template: Template):
        self._template = template
        if self._view is not None:
            self._view.set_style_vars(template_to_style_vars(template))

    def select(self, item_id):
        if self._view is not None:
            self._view.set_selection([item_id] if item_id is not None else [])

    def refresh_labels(self) -> int:
        return self.labels.run()

    def destroy(self):
        if self._destroyed:
            return
        self._teardown_view()
        self.lanes.clear()
        self._destroyed = True
        logger.debug("timeline controller destroyed")

    # ---- view lifetime ----
    def _build_view(self):
        opts = replace(
            build_options(self._window),
            on_add=self._on_add,
            on_move=self._on_move,
            on_remove=self._on_remove,
        )
        view = self._factory(self._container, self.items, self.lane_rows, opts)
        view.add_custom_marker(self._window.start_date, "project-start")
        view.add_custom_marker(self._window.end_date, "project-end")
        view.select.connect(self._on_select)
        view.itemHoverStart.connect(self._on_hover)
        if self._template is not None:
            view.set_style_vars(template_to_style_vars(self._template))
        self._view = view
        self.labels.start(view)
        logger.debug("timeline view built: %s..%s", opts.start, opts.end)

    def _teardown_view(self):
        self.labels.stop()
        view, self._view = self._view, None
        if view is None:
            return
        for sig, slot in ((view.select, self._on_select), (view.itemHoverStart, self._on_hover)):
            try:
                sig.disconnect(slot)
            except TypeError:
                pass
        view.dispose()

    # ---- renderer callbacks ----
    def _on_add(self, native_start):
        res = self.gestures.on_add(native_start)
        if res is not None:
            self.itemAddRequested.emit(res.start, res.end)
        # never let the renderer keep its own copy
        return None

    def _on_move(self, item_id, native_start, native_end=None, native_lane=None):
        res = self.gestures.on_move(item_id, native_start, native_end, native_lane)
        if res is None:
            return None
        self.itemUpdateRequested.emit(res.id, res.start, res.end)
        if res.lane is not None:
            self.set_tasks(self._tasks)
        return res

    def _on_remove(self, item_id):
        rid = self.gestures.on_remove(item_id)
        if rid is not None:
            self.itemRemoveRequested.emit(rid)
        return None

    def _on_select(self, ids):
        self.itemSelected.emit(ids[0] if ids else None)

    def _on_hover(self, item_id):
        if self._view is not None and item_id is not None:
            self._view.set_selection([item_id])
