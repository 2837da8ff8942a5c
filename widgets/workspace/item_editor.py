from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

from PyQt6 import QtCore, QtWidgets

from theme.colors import COLOR_PRIMARY_BG, COLOR_SECONDARY_BG, COLOR_TEXT, COLOR_ACCENT
from timeline.models import Task


@dataclass
class ItemEdit:
    id: str
    content: str
    category: str
    color: str


class ItemEditorDialog(QtWidgets.QDialog):
    saved = QtCore.pyqtSignal(object)    # ItemEdit
    deleted = QtCore.pyqtSignal(str)     # id

    def __init__(self, task: Task, palette: Sequence[str], parent=None):
        super().__init__(parent)
        self.setWindowTitle("Edit Task")
        self.setObjectName("item-editor")
        self.setModal(True)
        self.setMinimumWidth(360)
        self._task = task
        self._color = task.color

        main = QtWidgets.QVBoxLayout(self)
        main.setContentsMargins(14, 14, 14, 14)
        main.setSpacing(10)

        form = QtWidgets.QFormLayout(); form.setHorizontalSpacing(8)
        self.edt_content = QtWidgets.QLineEdit(task.content)
        self.edt_content.setPlaceholderText("Task name")
        form.addRow("Name", self.edt_content)
        self.edt_category = QtWidgets.QLineEdit(task.category)
        self.edt_category.setPlaceholderText("Category")
        form.addRow("Category", self.edt_category)
        form.addRow("Dates", QtWidgets.QLabel(f"{task.start} → {task.end}"))
        main.addLayout(form)

        # palette swatches
        sw_row = QtWidgets.QHBoxLayout(); sw_row.setSpacing(6)
        self._swatches: dict[str, QtWidgets.QToolButton] = {}
        for c in palette:
            b = QtWidgets.QToolButton()
            b.setCheckable(True)
            b.setAutoExclusive(True)
            b.setFixedSize(24, 24)
            b.setStyleSheet(
                f"QToolButton {{ background:{c}; border:1px solid #3a3a3a; border-radius:12px; }}"
                f"QToolButton:checked {{ border:2px solid {COLOR_ACCENT}; }}"
            )
            b.setChecked(c.lower() == task.color.lower())
            b.clicked.connect(lambda _=False, col=c: self._pick(col))
            self._swatches[c] = b
            sw_row.addWidget(b)
        sw_row.addStretch(1)
        main.addLayout(sw_row)

        buttons = QtWidgets.QHBoxLayout()
        self.btn_delete = QtWidgets.QPushButton("Delete")
        self.btn_delete.clicked.connect(self._on_delete)
        self.btn_save = QtWidgets.QPushButton("Save")
        self.btn_save.setDefault(True)
        self.btn_save.clicked.connect(self._on_save)
        buttons.addWidget(self.btn_delete); buttons.addStretch(1); buttons.addWidget(self.btn_save)
        main.addLayout(buttons)

        self.setStyleSheet(f"""
            QDialog#item-editor {{ background: {COLOR_PRIMARY_BG}; color: {COLOR_TEXT}; }}
            QLineEdit {{
                background: {COLOR_SECONDARY_BG};
                border: 1px solid #3a3a3a;
                border-radius: 8px;
                padding: 4px 8px;
                color: {COLOR_TEXT};
            }}
        """)

    def _pick(self, color: str):
        self._color = color

    def result_edit(self) -> ItemEdit:
        return ItemEdit(
            id=self._task.id,
            content=self.edt_content.text().strip() or self._task.content,
            category=self.edt_category.text().strip(),
            color=self._color,
        )

    def _on_save(self):
        self.saved.emit(self.result_edit())
        self.accept()

    def _on_delete(self):
        self.deleted.emit(self._task.id)
        self.accept()
