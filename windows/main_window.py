# windows/main_window.py
from __future__ import annotations
import logging

from PyQt6 import QtWidgets, QtGui

from theme.colors import COLOR_PRIMARY_BG, COLOR_SECONDARY_BG, COLOR_TEXT, COLOR_TEXT_MUTED
from timeline.controller import TimelineController
from timeline.models import (
    DEFAULT_TASK_CONTENT,
    Project,
    add_item,
    create_task,
    find_item,
    new_task_range,
    remove_item,
    update_item,
    with_granularity,
)
from timeline.templates import get_default_template, get_template_by_id
from widgets.workspace.granularity_toggle import GranularityToggle
from widgets.workspace.item_editor import ItemEditorDialog
from widgets.workspace.task_sidebar import TaskSidebar

logger = logging.getLogger(__name__)


class MainWindow(QtWidgets.QMainWindow):
    """Owns the Project value; every edit replaces it and re-syncs the views."""

    def __init__(self, project: Project):
        super().__init__()
        self.project = project
        self.template = get_template_by_id(project.template_id) or get_default_template()
        self._selected_id: str | None = None
        self.setWindowTitle(f"{project.name} · Timeline")

        root = QtWidgets.QWidget()
        v = QtWidgets.QVBoxLayout(root)
        v.setContentsMargins(0, 0, 0, 0)
        v.setSpacing(0)

        # ---- header ----
        header_w = QtWidgets.QWidget()
        header = QtWidgets.QHBoxLayout(header_w)
        header.setContentsMargins(16, 12, 16, 8)
        header.setSpacing(8)
        title = QtWidgets.QLabel(project.name)
        font = title.font()
        font.setPointSize(18); font.setWeight(QtGui.QFont.Weight.DemiBold); title.setFont(font)
        header.addWidget(title)
        header.addStretch(1)
        self.toggle = GranularityToggle(initial=project.window.granularity)
        self.toggle.changed.connect(self._on_granularity_changed)
        header.addWidget(self.toggle)
        v.addWidget(header_w)

        # ---- body: sidebar | timeline ----
        body = QtWidgets.QHBoxLayout()
        body.setContentsMargins(0, 0, 0, 0)
        body.setSpacing(0)
        self.sidebar = TaskSidebar()
        body.addWidget(self.sidebar)

        self.timeline_host = QtWidgets.QWidget()
        host_lay = QtWidgets.QVBoxLayout(self.timeline_host)
        host_lay.setContentsMargins(16, 16, 16, 16)
        body.addWidget(self.timeline_host, 1)
        v.addLayout(body, 1)

        # ---- footer ----
        self.status = QtWidgets.QLabel()
        self.status.setStyleSheet(f"color:{COLOR_TEXT_MUTED}; background:{COLOR_SECONDARY_BG}; padding:4px 12px;")
        v.addWidget(self.status)

        self.controller = TimelineController(self.timeline_host, project.window, self.template, parent=self)
        self.controller.itemAddRequested.connect(self._on_item_add)
        self.controller.itemUpdateRequested.connect(self._on_item_update)
        self.controller.itemSelected.connect(self._on_item_select)
        self.controller.itemRemoveRequested.connect(self._on_item_remove)

        self.sidebar.addTaskRequested.connect(self._on_sidebar_add)
        self.sidebar.itemSelected.connect(self._on_sidebar_select)
        self.sidebar.itemEditRequested.connect(self._open_editor)
        self.sidebar.itemDeleteRequested.connect(self._on_item_remove)

        self.setCentralWidget(root)
        self.setStyleSheet(self.styleSheet() + f" QMainWindow {{ background: {COLOR_PRIMARY_BG}; color: {COLOR_TEXT}; }}")
        self._apply()

    # ---- project edits ----
    def _set_project(self, project: Project):
        self.project = project
        self._apply()

    def _apply(self):
        self.controller.set_tasks(self.project.items)
        if find_item(self.project, self._selected_id) is None:
            self._selected_id = None
        self.sidebar.set_tasks(self.project.items, self._selected_id)
        self.status.setText(
            f"{len(self.project.items)} tasks · {self.project.window.granularity.value} view"
        )

    def _add_task(self, start: str, end: str):
        task = create_task(DEFAULT_TASK_CONTENT, start, end, color=self.template.palette[0])
        self._set_project(add_item(self.project, task))
        self._open_editor(task.id)

    def _on_item_add(self, start: str, end: str):
        self._add_task(start, end)

    def _on_sidebar_add(self):
        self._add_task(*new_task_range(self.project.window))

    def _on_item_update(self, item_id: str, start: str, end: str):
        self._set_project(update_item(self.project, item_id, start=start, end=end))

    def _on_item_select(self, item_id):
        self._selected_id = item_id
        self.sidebar.set_selected(item_id)

    def _on_sidebar_select(self, item_id):
        self._selected_id = item_id
        self.controller.select(item_id)

    def _on_item_remove(self, item_id: str):
        if self._selected_id == item_id:
            self._selected_id = None
        self._set_project(remove_item(self.project, item_id))

    def _on_granularity_changed(self, granularity: str):
        logger.debug("granularity toggled to %s", granularity)
        self.project = with_granularity(self.project, granularity)
        self.controller.set_project_window(self.project.window)
        self._apply()

    def _open_editor(self, item_id: str):
        task = find_item(self.project, item_id)
        if task is None:
            return
        dlg = ItemEditorDialog(task, self.template.palette, self)
        dlg.saved.connect(self._on_editor_saved)
        dlg.deleted.connect(self._on_item_remove)
        dlg.open()

    def _on_editor_saved(self, edit):
        self._set_project(update_item(
            self.project, edit.id, content=edit.content, category=edit.category, color=edit.color,
        ))

    def closeEvent(self, e: QtGui.QCloseEvent):
        self.controller.destroy()
        super().closeEvent(e)
