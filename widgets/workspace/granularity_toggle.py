from PyQt6 import QtCore, QtWidgets
from theme.colors import COLOR_TEXT, COLOR_ACCENT
from timeline.calendar_math import Granularity


class GranularityToggle(QtWidgets.QWidget):
    changed = QtCore.pyqtSignal(str)  # "day" | "week" | "month"

    def __init__(self, parent=None, initial: Granularity | str = Granularity.WEEK):
        super().__init__(parent)
        self._buttons: dict[str, QtWidgets.QPushButton] = {}

        lay = QtWidgets.QHBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(6)

        self.setStyleSheet(f"""
        QPushButton {{
            background: transparent;
            color: {COLOR_TEXT};
            border: 1px solid #3a3a3a;
            border-radius: 10px;
            padding: 4px 12px;
        }}
        QPushButton:checked {{
            background: {COLOR_ACCENT};
            border-color: {COLOR_ACCENT};
        }}
        QPushButton:hover {{ border-color: #4a4a4a; }}
        """)

        for g in Granularity:
            btn = QtWidgets.QPushButton(g.value.capitalize())
            btn.setCheckable(True)
            btn.setAutoExclusive(True)
            btn.setObjectName(f"granularity-{g.value}")
            btn.clicked.connect(self._on_clicked)
            self._buttons[g.value] = btn
            lay.addWidget(btn)

        self.setValue(initial, emit=False)

    def value(self) -> str:
        for key, btn in self._buttons.items():
            if btn.isChecked():
                return key
        return Granularity.WEEK.value

    def _on_clicked(self):
        self.changed.emit(self.value())

    def setValue(self, key: Granularity | str, emit: bool = True):
        key = Granularity(key).value
        for k, btn in self._buttons.items():
            btn.setChecked(k == key)
        if emit:
            self.changed.emit(key)
