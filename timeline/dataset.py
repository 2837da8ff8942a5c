from __future__ import annotations
from typing import Any, Dict, Hashable, List

from PyQt6 import QtCore


class DataSet(QtCore.QObject):
    """Keyed record store shared between the reconciler (writer) and the view (reader).

    Records are any objects with an ``id`` attribute. Insertion order is kept.
    """
    added   = QtCore.pyqtSignal(list)   # ids
    updated = QtCore.pyqtSignal(list)
    removed = QtCore.pyqtSignal(list)

    def __init__(self, records: list | None = None, parent=None):
        super().__init__(parent)
        self._rows: Dict[Hashable, Any] = {}
        for r in records or []:
            self._rows[r.id] = r

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._rows

    def add(self, record) -> None:
        if record.id in self._rows:
            raise ValueError(f"duplicate id {record.id!r}")
        self._rows[record.id] = record
        self.added.emit([record.id])

    def update(self, record) -> None:
        if record.id not in self._rows:
            raise KeyError(record.id)
        self._rows[record.id] = record
        self.updated.emit([record.id])

    def remove(self, key: Hashable) -> None:
        if self._rows.pop(key, None) is not None:
            self.removed.emit([key])

    def clear(self) -> None:
        keys = list(self._rows)
        self._rows.clear()
        if keys:
            self.removed.emit(keys)

    def get(self, key: Hashable) -> Any:
        return self._rows.get(key)

    def get_ids(self) -> List[Hashable]:
        return list(self._rows)

    def records(self) -> List[Any]:
        return list(self._rows.values())
