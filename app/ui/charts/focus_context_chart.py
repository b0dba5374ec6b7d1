from __future__ import annotations

from typing import Callable, List, Optional, Tuple

import pyqtgraph as pg
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QFont

from core.chart.models import BrushResult, FrameModel, PaneModel, TooltipModel
from core.chart.theme import Palette


def _xy(path: List[Tuple[float, float]]) -> Tuple[List[float], List[float]]:
    if not path:
        return [], []
    xs, ys = zip(*path)
    return list(xs), list(ys)


def _dash_pen(color: str, width: int = 1) -> pg.QtGui.QPen:
    pen = pg.mkPen(QColor(color), width=width)
    pen.setStyle(Qt.PenStyle.DashLine)
    pen.setDashPattern([4, 4])
    return pen


class FocusContextChart:
    """
    Draws a FrameModel onto two plot widgets laid out in pixel space.

    Every render rebuilds the overlay items from the frame, so drawing the same
    frame twice leaves the scene unchanged. The context pane owns the brush; its
    continuous and finished signals both feed `on_selection`.
    """

    def __init__(
        self,
        focus_widget: pg.PlotWidget,
        context_widget: pg.PlotWidget,
        on_selection: Optional[Callable[[Tuple[float, float]], None]] = None,
    ) -> None:
        self.focus_widget = focus_widget
        self.context_widget = context_widget
        self.on_selection = on_selection
        self._palette: Optional[Palette] = None
        self._event_items: List[object] = []
        self._brush_syncing = False

        for widget in (self.focus_widget, self.context_widget):
            widget.setMenuEnabled(False)
            widget.hideButtons()
            view_box = widget.getViewBox()
            view_box.setMouseEnabled(x=False, y=False)
            view_box.enableAutoRange('x', False)
            view_box.enableAutoRange('y', False)
            view_box.invertY(True)
            widget.showAxis('left')
            widget.showAxis('bottom')
        self.context_widget.getAxis('left').setStyle(showValues=False)

        self.focus_curve = pg.PlotDataItem()
        self.focus_widget.addItem(self.focus_curve)
        self.trend_curve = pg.PlotDataItem()
        self.trend_curve.setZValue(5)
        self.focus_widget.addItem(self.trend_curve)
        self.context_curve = pg.PlotDataItem()
        self.context_widget.addItem(self.context_curve)

        self.brush = pg.LinearRegionItem(orientation='vertical')
        self.brush.setZValue(10)
        self.brush.sigRegionChanged.connect(self._on_brush_moved)
        self.brush.sigRegionChangeFinished.connect(self._on_brush_moved)
        self.context_widget.addItem(self.brush)

        self.hover_line = pg.InfiniteLine(angle=90)
        self.hover_line.setZValue(20)
        self.hover_dot = pg.ScatterPlotItem(size=8)
        self.hover_dot.setZValue(21)
        self.hover_label = pg.TextItem(anchor=(0, 0))
        self.hover_label.setZValue(22)
        for item in (self.hover_line, self.hover_dot, self.hover_label):
            self.focus_widget.addItem(item, ignoreBounds=True)
        self.hide_tooltip()

    # -- frame drawing -------------------------------------------------

    def render(self, frame: FrameModel) -> None:
        self._apply_palette(frame.palette)
        self._layout_pane(self.focus_widget, frame.focus)
        self._layout_pane(self.context_widget, frame.context)

        xs, ys = _xy(frame.focus.path)
        self.focus_curve.setData(xs, ys, pen=pg.mkPen(QColor(frame.palette.line), width=1.5))
        xs, ys = _xy(frame.context.path)
        self.context_curve.setData(xs, ys, pen=pg.mkPen(QColor(frame.palette.context_line), width=1))
        self._draw_trend(frame.trend_path, frame.palette)
        self._draw_events(frame.events, frame.palette)
        self.set_selection(frame.selection, frame.context.width)
        self.hide_tooltip()

    def render_brush(self, result: BrushResult, palette: Palette) -> None:
        """Redraw only the focus pane after a brush move; the context pane is fixed."""
        self._apply_palette(palette)
        self._layout_pane(self.focus_widget, result.focus)
        xs, ys = _xy(result.focus.path)
        self.focus_curve.setData(xs, ys, pen=pg.mkPen(QColor(palette.line), width=1.5))
        self._draw_trend(result.trend_path, palette)
        self._draw_events(result.events, palette)

    def set_selection(self, selection: Optional[Tuple[float, float]], width: float) -> None:
        self._brush_syncing = True
        try:
            self.brush.setBounds((0.0, float(width)))
            if selection is None:
                self.brush.hide()
            else:
                self.brush.setRegion(selection)
                self.brush.show()
        finally:
            self._brush_syncing = False

    def _layout_pane(self, widget: pg.PlotWidget, pane: PaneModel) -> None:
        widget.setXRange(0.0, max(1.0, pane.width), padding=0)
        widget.setYRange(0.0, max(1.0, pane.height), padding=0)
        widget.getAxis('bottom').setTicks([[(t.position, t.label) for t in pane.x_ticks]])
        widget.getAxis('left').setTicks([[(t.position, t.label) for t in pane.y_ticks]])

    def _draw_trend(self, path: List[Tuple[float, float]], palette: Palette) -> None:
        if not path:
            self.trend_curve.setData([], [])
            self.trend_curve.hide()
            return
        xs, ys = _xy(path)
        self.trend_curve.setData(xs, ys, pen=_dash_pen(palette.trend, width=2))
        self.trend_curve.show()

    def _draw_events(self, events, palette: Palette) -> None:
        for item in self._event_items:
            try:
                self.focus_widget.removeItem(item)
            except Exception:
                pass
        self._event_items = []
        font = QFont()
        font.setPointSize(8)
        color = QColor(palette.event)
        for placed in events:
            line = pg.InfiniteLine(pos=placed.x, angle=90, pen=_dash_pen(palette.event))
            line.setZValue(3)
            label = pg.TextItem(placed.marker.label, color=color, anchor=(1.0, 0.5), angle=65)
            label.setFont(font)
            label.setPos(placed.x, 12.0)
            label.setZValue(4)
            self.focus_widget.addItem(line, ignoreBounds=True)
            self.focus_widget.addItem(label, ignoreBounds=True)
            self._event_items.extend((line, label))

    def _apply_palette(self, palette: Palette) -> None:
        if palette == self._palette:
            return
        self._palette = palette
        axis_pen = pg.mkPen(QColor(palette.grid))
        text_pen = pg.mkPen(QColor(palette.text))
        font = QFont()
        font.setPointSize(8)
        for widget in (self.focus_widget, self.context_widget):
            widget.setBackground(QColor(palette.background))
            widget.showGrid(x=True, y=True, alpha=0.2)
            for axis_name in ('left', 'bottom'):
                axis = widget.getAxis(axis_name)
                axis.setPen(axis_pen)
                axis.setTextPen(text_pen)
                axis.setTickFont(font)
        self.brush.setBrush(pg.mkBrush(QColor(palette.brush)))
        self.hover_line.setPen(_dash_pen(palette.text))
        self.hover_dot.setBrush(pg.mkBrush(QColor(palette.line)))
        self.hover_dot.setPen(pg.mkPen(QColor(palette.background)))
        self.hover_label.setColor(QColor(palette.tooltip_text))
        self.hover_label.fill = pg.mkBrush(QColor(palette.tooltip_bg))

    # -- tooltip -------------------------------------------------------

    def show_tooltip(self, tooltip: Optional[TooltipModel]) -> None:
        if tooltip is None or tooltip.x is None or tooltip.y is None:
            self.hide_tooltip()
            return
        self.hover_line.setValue(tooltip.x)
        self.hover_dot.setData([tooltip.x], [tooltip.y])
        self.hover_label.setText('\n'.join(tooltip.lines()))
        self.hover_label.setPos(tooltip.x + 8.0, tooltip.y + 8.0)
        for item in (self.hover_line, self.hover_dot, self.hover_label):
            item.show()

    def hide_tooltip(self) -> None:
        for item in (self.hover_line, self.hover_dot, self.hover_label):
            item.hide()

    # -- brush ---------------------------------------------------------

    def _on_brush_moved(self) -> None:
        if self._brush_syncing or self.on_selection is None:
            return
        x0, x1 = self.brush.getRegion()
        self.on_selection((float(x0), float(x1)))
