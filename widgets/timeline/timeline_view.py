from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Tuple

from PyQt6 import QtCore, QtGui, QtWidgets

from theme.colors import (
    COLOR_PRIMARY_BG,
    COLOR_TEXT,
    COLOR_TEXT_MUTED,
    COLOR_ACCENT,
    COLOR_MARKER,
    COLOR_LABEL_BG,
)
from timeline.calendar_math import format_date
from timeline.dataset import DataSet
from timeline.labels import CLS_CONTINUATION, CLS_FLAT, CLS_RELATIVE
from timeline.options import TimelineOptions
from widgets.timeline.axis import AxisLabel, build_axis_labels, build_major_labels

logger = logging.getLogger(__name__)

_ROUNDED_RADIUS = 4
_RESIZE_MARGIN_PX = 6   # grab zone on the right edge of a bar
_MAJOR_H = 22
_MINOR_H = 26
_LANE_H = 36
_ARROW_PX = 6


@dataclass
class CustomMarker:
    when: date
    tag: str
    label: str


def _to_datetime(d) -> datetime:
    if isinstance(d, datetime):
        return d
    return datetime(d.year, d.month, d.day)


class TimelineView(QtWidgets.QWidget):
    """Paints items from a DataSet on lanes under a day/week/month axis.

    Gestures are offered to ``options.on_add/on_move/on_remove``; the view
    never writes to its datasets itself.
    """
    select         = QtCore.pyqtSignal(list)            # selected ids
    itemHoverStart = QtCore.pyqtSignal(object)          # id
    rangeChanged   = QtCore.pyqtSignal(object, object)  # start, end (datetime)
    redrawn        = QtCore.pyqtSignal()

    def __init__(self, parent, items: DataSet, lanes: DataSet, options: TimelineOptions):
        super().__init__(parent)
        self._items = items
        self._lanes = lanes
        self._options = options
        self._range: Tuple[datetime, datetime] = (_to_datetime(options.start), _to_datetime(options.end))
        self._labels: List[AxisLabel] = []
        self._major: List[AxisLabel] = []
        self._markers: List[CustomMarker] = []
        self._selection: List = []
        self._hover_id = None
        self._style: Dict[str, str] = {}
        self._disposed = False

        self._drag_id = None
        self._drag_mode: str | None = None    # "move" | "resize"
        self._grab_offset = timedelta(0)
        self._preview: Tuple[datetime, datetime, int] | None = None

        for ds in (items, lanes):
            ds.added.connect(self._on_data_changed)
            ds.updated.connect(self._on_data_changed)
            ds.removed.connect(self._on_data_changed)

        self.setMouseTracking(True)
        self.setFocusPolicy(QtCore.Qt.FocusPolicy.StrongFocus)
        self.setMinimumHeight(options.min_height)
        self._rebuild_axis()

    # ---- renderer interface ----
    def axis_labels(self) -> List[AxisLabel]:
        return self._labels

    def add_custom_marker(self, when, tag: str, label: str | None = None):
        d = when.date() if isinstance(when, datetime) else when
        self._markers.append(CustomMarker(d, tag, label if label is not None else format_date(d)))
        self.update()

    def markers(self) -> List[CustomMarker]:
        return list(self._markers)

    def set_selection(self, ids):
        self._selection = [i for i in ids if i in self._items]
        self.update()

    def selection(self) -> List:
        return list(self._selection)

    def set_style_vars(self, style: Dict[str, str]):
        self._style = dict(style)
        self.update()

    def visible_range(self) -> Tuple[datetime, datetime]:
        return self._range

    def set_window(self, start, end):
        """Move the visible range, clamped to the option bounds and zoom limits."""
        o = self._options
        start, end = _to_datetime(start), _to_datetime(end)
        lo, hi = _to_datetime(o.min), _to_datetime(o.max)
        span = max(o.zoom_min, min(o.zoom_max, end - start, hi - lo))
        start = max(lo, min(start, hi - span))
        new = (start, start + span)
        if new == self._range:
            return
        self._range = new
        self._rebuild_axis()
        self.rangeChanged.emit(*new)
        self.update()

    def dispose(self):
        if self._disposed:
            return
        self._disposed = True
        for ds in (self._items, self._lanes):
            for sig in (ds.added, ds.updated, ds.removed):
                try:
                    sig.disconnect(self._on_data_changed)
                except TypeError:
                    pass
        self._labels.clear()
        self.hide()
        self.setParent(None)
        self.deleteLater()
        logger.debug("timeline view disposed")

    # ---- geometry helpers ----
    def _header_h(self) -> int:
        return _MAJOR_H + _MINOR_H

    def _x_for(self, when) -> float:
        s, e = self._range
        total = (e - s).total_seconds() or 1.0
        return (_to_datetime(when) - s).total_seconds() / total * self.width()

    def _when_for_x(self, x: float) -> datetime:
        s, e = self._range
        frac = max(0.0, min(1.0, x / max(1, self.width())))
        return s + (e - s) * frac

    def _lane_for_y(self, y: float) -> int:
        lane = int((y - self._header_h()) // _LANE_H)
        return max(0, min(max(0, len(self._lanes) - 1), lane))

    def _bar_rect(self, start, end, lane: int) -> QtCore.QRectF:
        x1 = self._x_for(start)
        x2 = self._x_for(end)
        y = self._header_h() + lane * _LANE_H + self._options.item_margin / 2
        return QtCore.QRectF(x1, y, max(6.0, x2 - x1), _LANE_H - self._options.item_margin)

    def _item_at(self, pos: QtCore.QPointF):
        for it in reversed(self._items.records()):
            if self._bar_rect(it.start, it.end, it.lane).contains(pos):
                return it
        return None

    def _rebuild_axis(self):
        s, e = self._range
        self._labels = build_axis_labels(s.date(), e.date(), self._options.scale)
        self._major = build_major_labels(s.date(), e.date(), self._options.scale)

    def _snap(self, when):
        snap = self._options.snap
        return snap(when) if snap else when

    def sizeHint(self) -> QtCore.QSize:
        return QtCore.QSize(900, max(self._options.height, self._header_h() + _LANE_H * max(2, len(self._lanes))))

    # ---- data ----
    def _on_data_changed(self, _ids):
        self._selection = [i for i in self._selection if i in self._items]
        self.updateGeometry()
        self.update()

    # ---- mouse ----
    def mousePressEvent(self, e: QtGui.QMouseEvent):
        if e.button() != QtCore.Qt.MouseButton.LeftButton:
            super().mousePressEvent(e); return
        pos = e.position()
        it = self._item_at(pos)
        if it is None:
            if self._selection:
                self._selection = []
                self.select.emit([])
                self.update()
            return
        if self._selection != [it.id]:
            self._selection = [it.id]
            self.select.emit([it.id])
        ed = self._options.editable
        r = self._bar_rect(it.start, it.end, it.lane)
        if ed.update_time and r.right() - _RESIZE_MARGIN_PX <= pos.x() <= r.right() + 1:
            self._drag_mode = "resize"
        elif ed.update_time or ed.update_group:
            self._drag_mode = "move"
            self._grab_offset = self._when_for_x(pos.x()) - _to_datetime(it.start)
        self._drag_id = it.id
        self._preview = (_to_datetime(it.start), _to_datetime(it.end), it.lane)
        self.update()

    def mouseMoveEvent(self, e: QtGui.QMouseEvent):
        pos = e.position()
        if self._drag_mode and self._drag_id in self._items:
            it = self._items.get(self._drag_id)
            dur = _to_datetime(it.end) - _to_datetime(it.start)
            ed = self._options.editable
            lane = self._lane_for_y(pos.y()) if ed.update_group else it.lane
            if self._drag_mode == "move":
                start = _to_datetime(self._snap(self._when_for_x(pos.x()) - self._grab_offset)) \
                    if ed.update_time else _to_datetime(it.start)
                self._preview = (start, start + dur, lane)
            else:
                start = _to_datetime(it.start)
                end = max(start + timedelta(days=1), _to_datetime(self._snap(self._when_for_x(pos.x()))))
                self._preview = (start, end, it.lane)
            self.update()
            return

        hovered = self._item_at(pos)
        hid = hovered.id if hovered is not None else None
        if hid != self._hover_id:
            self._hover_id = hid
            if hid is not None:
                self.itemHoverStart.emit(hid)
        if hovered is not None:
            r = self._bar_rect(hovered.start, hovered.end, hovered.lane)
            if r.right() - _RESIZE_MARGIN_PX <= pos.x() <= r.right() + 1:
                self.setCursor(QtCore.Qt.CursorShape.SizeHorCursor)
            else:
                self.setCursor(QtCore.Qt.CursorShape.OpenHandCursor)
        else:
            self.setCursor(QtCore.Qt.CursorShape.ArrowCursor)

    def mouseReleaseEvent(self, e: QtGui.QMouseEvent):
        if e.button() == QtCore.Qt.MouseButton.LeftButton and self._drag_mode and self._preview:
            start, end, lane = self._preview
            it = self._items.get(self._drag_id)
            moved = it is not None and (start, end, lane) != (_to_datetime(it.start), _to_datetime(it.end), it.lane)
            if moved and self._options.on_move:
                self._options.on_move(self._drag_id, start, end, lane)
        self._drag_mode = None
        self._drag_id = None
        self._preview = None
        self.update()

    def mouseDoubleClickEvent(self, e: QtGui.QMouseEvent):
        pos = e.position()
        if pos.y() < self._header_h() or self._item_at(pos) is not None:
            super().mouseDoubleClickEvent(e); return
        if self._options.editable.add and self._options.on_add:
            # result is ignored on purpose: items only enter through the dataset
            self._options.on_add(self._when_for_x(pos.x()))

    def keyPressEvent(self, e: QtGui.QKeyEvent):
        if e.key() in (QtCore.Qt.Key.Key_Delete, QtCore.Qt.Key.Key_Backspace) and self._selection:
            if self._options.editable.remove and self._options.on_remove:
                for item_id in list(self._selection):
                    self._options.on_remove(item_id)
            return
        super().keyPressEvent(e)

    def wheelEvent(self, e: QtGui.QWheelEvent):
        s, end = self._range
        span = end - s
        steps = e.angleDelta().y() / 120.0
        if not steps:
            return
        if e.modifiers() & QtCore.Qt.KeyboardModifier.ControlModifier:
            anchor = self._when_for_x(e.position().x())
            factor = 0.8 ** steps
            new_span = span * factor
            ratio = (anchor - s) / span if span else 0
            new_start = anchor - new_span * ratio
            self.set_window(new_start, new_start + new_span)
        else:
            shift = span * (-0.1 * steps)
            self.set_window(s + shift, end + shift)
        e.accept()

    # ---- painting ----
    def _color(self, key: str, fallback: str) -> QtGui.QColor:
        return QtGui.QColor(self._style.get(key, fallback))

    def _paint_axis(self, p: QtGui.QPainter):
        text_c = self._color("--tl-text", COLOR_TEXT)
        axis_c = self._color("--tl-axis", COLOR_TEXT_MUTED)
        grid_c = self._color("--tl-grid", "#3a3a3a")

        for lb in self._major:
            x1, x2 = self._x_for(lb.start), self._x_for(lb.end)
            r = QtCore.QRectF(x1, 0, x2 - x1, _MAJOR_H)
            p.setPen(QtGui.QPen(axis_c))
            p.drawText(r.adjusted(6, 0, -2, 0),
                       QtCore.Qt.AlignmentFlag.AlignVCenter | QtCore.Qt.AlignmentFlag.AlignLeft, lb.text)

        for lb in self._labels:
            if lb.measure:
                continue
            x1, x2 = self._x_for(lb.start), self._x_for(lb.end)
            r = QtCore.QRectF(x1 + 1, _MAJOR_H + 2, max(1.0, x2 - x1 - 2), _MINOR_H - 4)
            p.setPen(QtGui.QPen(grid_c))
            p.drawLine(QtCore.QLineF(x1, _MAJOR_H, x1, self.height()))
            styled = lb.classes & {CLS_RELATIVE, CLS_FLAT, CLS_CONTINUATION}
            if styled:
                self._paint_label_shape(p, r, lb.classes)
                p.setPen(QtGui.QPen(QtGui.QColor("#FFFFFF")))
            else:
                p.setPen(QtGui.QPen(text_c))
            if lb.text:
                p.drawText(r, QtCore.Qt.AlignmentFlag.AlignCenter, lb.text)

    def _paint_label_shape(self, p: QtGui.QPainter, r: QtCore.QRectF, classes):
        path = QtGui.QPainterPath()
        arrow = CLS_RELATIVE in classes or CLS_CONTINUATION in classes
        tip = r.right() if not arrow else r.right() - _ARROW_PX
        path.moveTo(r.left(), r.top())
        path.lineTo(tip, r.top())
        if arrow:
            path.lineTo(r.right(), r.center().y())
        path.lineTo(tip, r.bottom())
        path.lineTo(r.left(), r.bottom())
        path.closeSubpath()
        p.fillPath(path, QtGui.QBrush(QtGui.QColor(COLOR_LABEL_BG)))

    def _paint_items(self, p: QtGui.QPainter):
        fm = p.fontMetrics()
        radius = float(self._style.get("--tl-bar-radius", f"{_ROUNDED_RADIUS}px").rstrip("px") or _ROUNDED_RADIUS)
        for it in self._items.records():
            if it.id == self._drag_id and self._preview:
                start, end, lane = self._preview
            else:
                start, end, lane = it.start, it.end, it.lane
            r = self._bar_rect(start, end, lane)
            color = QtGui.QColor(it.color)
            p.setPen(QtGui.QPen(QtGui.QColor(COLOR_ACCENT) if it.id in self._selection else color,
                                2 if it.id in self._selection else 1))
            p.setBrush(QtGui.QBrush(color))
            p.drawRoundedRect(r.adjusted(0.5, 0.5, -0.5, -0.5), radius, radius)
            p.setPen(QtGui.QPen(QtGui.QColor("#FFFFFF")))
            text = it.content
            if it.is_long:
                text = fm.elidedText(text, QtCore.Qt.TextElideMode.ElideRight, int(max(0, r.width() - 12)))
            p.drawText(r.adjusted(6, 0, -6, 0),
                       QtCore.Qt.AlignmentFlag.AlignVCenter | QtCore.Qt.AlignmentFlag.AlignLeft, text)

    def _paint_markers(self, p: QtGui.QPainter):
        fm = p.fontMetrics()
        for m in self._markers:
            x = self._x_for(m.when)
            p.setPen(QtGui.QPen(QtGui.QColor(COLOR_MARKER), 2))
            p.drawLine(QtCore.QLineF(x, self._header_h(), x, self.height()))
            w = fm.horizontalAdvance(m.label) + 12
            box = QtCore.QRectF(x - w / 2, self._header_h() + 2, w, fm.height() + 4)
            p.fillRect(box, QtGui.QColor(COLOR_MARKER))
            p.setPen(QtGui.QPen(QtGui.QColor("#FFFFFF")))
            p.drawText(box, QtCore.Qt.AlignmentFlag.AlignCenter, m.label)

    def paintEvent(self, ev):
        if self._disposed:
            return
        p = QtGui.QPainter(self)
        p.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        p.fillRect(self.rect(), self._color("--tl-bg", COLOR_PRIMARY_BG))
        self._paint_axis(p)
        self._paint_items(p)
        self._paint_markers(p)
        p.end()
        self.redrawn.emit()


def create_view(container: QtWidgets.QWidget | None, items: DataSet, lanes: DataSet,
                options: TimelineOptions) -> TimelineView:
    view = TimelineView(container, items, lanes, options)
    if container is not None and container.layout() is not None:
        container.layout().addWidget(view)
    return view
