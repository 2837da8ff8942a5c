from __future__ import annotations
from typing import Iterable

from PyQt6 import QtCore, QtGui, QtWidgets

from theme.colors import COLOR_TEXT, COLOR_TEXT_MUTED, COLOR_SECONDARY_BG
from timeline.models import Task


class TaskList(QtWidgets.QListWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setVerticalScrollMode(QtWidgets.QAbstractItemView.ScrollMode.ScrollPerPixel)
        self.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)
        self.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        self.setSpacing(4)
        self.setStyleSheet(
            f"color:{COLOR_TEXT}; background:{COLOR_SECONDARY_BG}; "
            f"border:none; border-radius:8px;"
        )

    def _add_task_item(self, task: Task):
        it = QtWidgets.QListWidgetItem()
        it.setData(QtCore.Qt.ItemDataRole.UserRole, task.id)
        it.setToolTip(task.content)

        # colour swatch + title, dates on the right
        w = QtWidgets.QWidget()
        row = QtWidgets.QHBoxLayout(w); row.setContentsMargins(8, 6, 8, 6); row.setSpacing(8)
        swatch = QtWidgets.QLabel(); swatch.setFixedSize(10, 10)
        swatch.setStyleSheet(f"background:{task.color}; border-radius:5px;")
        title = task.content if not task.category else f"{task.content} <span style='color:{COLOR_TEXT_MUTED};'>({task.category})</span>"
        lbl_left = QtWidgets.QLabel(title)
        lbl_left.setTextFormat(QtCore.Qt.TextFormat.RichText)
        lbl_right = QtWidgets.QLabel(f"{task.start} → {task.end}")
        lbl_right.setStyleSheet(f"color:{COLOR_TEXT_MUTED};")
        lbl_right.setAlignment(QtCore.Qt.AlignmentFlag.AlignRight | QtCore.Qt.AlignmentFlag.AlignVCenter)
        row.addWidget(swatch); row.addWidget(lbl_left, 1); row.addWidget(lbl_right)

        self.addItem(it)
        self.setItemWidget(it, w)
        it.setSizeHint(QtCore.QSize(self.viewport().width() - 12, max(36, w.sizeHint().height())))

    def resizeEvent(self, e: QtGui.QResizeEvent):
        super().resizeEvent(e)
        w = self.viewport().width() - 12
        for i in range(self.count()):
            it = self.item(i)
            sz = it.sizeHint()
            if sz.width() != w:
                it.setSizeHint(QtCore.QSize(w, sz.height()))


class TaskSidebar(QtWidgets.QWidget):
    itemSelected      = QtCore.pyqtSignal(object)  # id | None
    itemEditRequested = QtCore.pyqtSignal(str)
    itemDeleteRequested = QtCore.pyqtSignal(str)
    addTaskRequested  = QtCore.pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFixedWidth(300)
        self._syncing = False

        v = QtWidgets.QVBoxLayout(self); v.setContentsMargins(12, 12, 12, 12); v.setSpacing(8)
        lbl = QtWidgets.QLabel("Tasks"); lbl.setStyleSheet(f"color:{COLOR_TEXT_MUTED};")
        v.addWidget(lbl)

        self.list = TaskList(self)
        self.list.currentItemChanged.connect(self._on_current_changed)
        self.list.itemDoubleClicked.connect(self._on_double_clicked)
        v.addWidget(self.list, 1)

        btn_css = f"background:{COLOR_SECONDARY_BG}; color:{COLOR_TEXT}; border:1px solid #3a3a3a; border-radius:10px;"
        row = QtWidgets.QHBoxLayout(); row.setSpacing(8)
        self.btn_add = QtWidgets.QPushButton("Add New Task"); self.btn_add.setFixedHeight(36)
        self.btn_add.setStyleSheet(btn_css)
        self.btn_add.clicked.connect(self.addTaskRequested.emit)
        self.btn_delete = QtWidgets.QPushButton("Delete"); self.btn_delete.setFixedHeight(36)
        self.btn_delete.setStyleSheet(btn_css)
        self.btn_delete.clicked.connect(self._on_delete_clicked)
        row.addWidget(self.btn_add, 1); row.addWidget(self.btn_delete)
        v.addLayout(row)

    # Public
    def set_tasks(self, tasks: Iterable[Task], selected_id: str | None = None):
        self._syncing = True
        try:
            self.list.clear()
            for t in tasks:
                self.list._add_task_item(t)
            self.set_selected(selected_id)
        finally:
            self._syncing = False

    def set_selected(self, item_id: str | None):
        self._syncing, prev = True, self._syncing
        try:
            for i in range(self.list.count()):
                it = self.list.item(i)
                if it.data(QtCore.Qt.ItemDataRole.UserRole) == item_id:
                    self.list.setCurrentItem(it)
                    return
            self.list.setCurrentItem(None)
        finally:
            self._syncing = prev

    def selected_id(self) -> str | None:
        it = self.list.currentItem()
        return it.data(QtCore.Qt.ItemDataRole.UserRole) if it else None

    def _on_current_changed(self, current, _previous):
        if self._syncing:
            return
        self.itemSelected.emit(current.data(QtCore.Qt.ItemDataRole.UserRole) if current else None)

    def _on_double_clicked(self, item: QtWidgets.QListWidgetItem):
        self.itemEditRequested.emit(str(item.data(QtCore.Qt.ItemDataRole.UserRole)))

    def _on_delete_clicked(self):
        tid = self.selected_id()
        if tid is not None:
            self.itemDeleteRequested.emit(str(tid))
