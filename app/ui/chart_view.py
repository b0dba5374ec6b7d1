import os
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

import pyqtgraph as pg
from PyQt6.QtCore import QThread, pyqtSignal, Qt, QTimer
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QCheckBox, QSlider, QGridLayout

from core.chart.events import EVENT_CATALOGUE, filterable_events
from core.chart.frame import ChartEngine
from core.chart.models import RenderConfig, ViewState
from core.chart.theme import palette_for
from core.data_load import DEFAULT_COLUMN, load_series_csv
from .charts.focus_context_chart import FocusContextChart

MAX_SMOOTHING_WINDOW = 24


class SeriesLoadWorker(QThread):
    data_ready = pyqtSignal(list, int)
    error = pyqtSignal(str)

    def __init__(self, path: str, column: str) -> None:
        super().__init__()
        self.path = path
        self.column = column

    def run(self) -> None:
        try:
            series, skipped = load_series_csv(self.path, column=self.column)
            self.data_ready.emit(series, skipped)
        except Exception as exc:
            self.error.emit(str(exc))


class ChartView(QWidget):
    def __init__(self, error_sink=None, config: Optional[RenderConfig] = None, column: str = DEFAULT_COLUMN) -> None:
        super().__init__()
        self.error_sink = error_sink
        self.column = column
        self.engine = ChartEngine(config or RenderConfig())
        self._state = ViewState()
        self._worker: Optional[SeriesLoadWorker] = None
        self._series_path: Optional[str] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        self.title_label = QLabel('MSCI World Index (USD) with Major Financial Events')
        self.title_label.setObjectName('ChartTitle')
        font = self.title_label.font()
        font.setPointSize(13)
        font.setBold(True)
        self.title_label.setFont(font)
        layout.addWidget(self.title_label)

        self.toolbar = QWidget()
        self.toolbar.setObjectName('TopToolbar')
        toolbar_layout = QHBoxLayout(self.toolbar)
        toolbar_layout.setContentsMargins(0, 0, 0, 0)
        toolbar_layout.setSpacing(12)

        self.log_toggle = QCheckBox('Log Scale')
        self.log_toggle.toggled.connect(self._on_log_toggled)
        toolbar_layout.addWidget(self.log_toggle)

        self.smoothing_label = QLabel()
        toolbar_layout.addWidget(self.smoothing_label)
        self.smoothing_slider = QSlider(Qt.Orientation.Horizontal)
        self.smoothing_slider.setRange(1, MAX_SMOOTHING_WINDOW)
        self.smoothing_slider.setSingleStep(1)
        self.smoothing_slider.setValue(self._state.smoothing_window)
        self.smoothing_slider.setFixedWidth(220)
        self.smoothing_slider.valueChanged.connect(self._on_smoothing_changed)
        toolbar_layout.addWidget(self.smoothing_slider)
        self._update_smoothing_label(self._state.smoothing_window)

        self.events_toggle = QCheckBox('Show Events')
        self.events_toggle.setChecked(self._state.show_events)
        self.events_toggle.toggled.connect(lambda checked: self._update_state(show_events=checked))
        toolbar_layout.addWidget(self.events_toggle)

        self.trend_toggle = QCheckBox('Show Trend Line')
        self.trend_toggle.setToolTip('Log-space trend; available with Log Scale')
        self.trend_toggle.setEnabled(self._state.log_scale)
        self.trend_toggle.toggled.connect(lambda checked: self._update_state(show_trendline=checked))
        toolbar_layout.addWidget(self.trend_toggle)

        self.dark_toggle = QCheckBox('Dark Mode')
        self.dark_toggle.setChecked(self.engine.config.dark_mode)
        self.dark_toggle.toggled.connect(self._on_dark_toggled)
        toolbar_layout.addWidget(self.dark_toggle)

        toolbar_layout.addStretch(1)
        self.status_label = QLabel('')
        toolbar_layout.addWidget(self.status_label)
        layout.addWidget(self.toolbar)

        self.filter_panel = QWidget()
        self.filter_panel.setObjectName('EventFilters')
        filter_layout = QGridLayout(self.filter_panel)
        filter_layout.setContentsMargins(0, 0, 0, 0)
        filter_layout.setHorizontalSpacing(12)
        self.filter_boxes: Dict[str, QCheckBox] = {}
        for index, event in enumerate(filterable_events(EVENT_CATALOGUE)):
            box = QCheckBox(f'Highlight Major Event: {event.label}')
            box.toggled.connect(lambda checked, event_id=event.id: self._on_filter_toggled(event_id, checked))
            self.filter_boxes[event.id] = box
            filter_layout.addWidget(box, index // 4, index % 4)
        layout.addWidget(self.filter_panel)

        self.focus_widget = pg.PlotWidget()
        self.focus_widget.setMinimumHeight(self.engine.config.focus_height)
        self.context_widget = pg.PlotWidget()
        self.context_widget.setFixedHeight(self.engine.config.context_height + 40)
        layout.addWidget(self.focus_widget, 1)
        layout.addWidget(self.context_widget)

        self.cagr_label = QLabel('CAGR: n/a')
        self.cagr_label.setObjectName('CagrLabel')
        layout.addWidget(self.cagr_label)

        self.chart = FocusContextChart(self.focus_widget, self.context_widget, on_selection=self._on_brush)

        self._mouse_move_timer = QTimer(self)
        self._mouse_move_timer.setSingleShot(True)
        self._mouse_move_timer.timeout.connect(self._flush_mouse_move)
        self._mouse_move_delay_ms = 30
        self._pending_mouse_pos = None
        self.focus_widget.scene().sigMouseMoved.connect(self._on_mouse_moved)

    # -- loading -------------------------------------------------------

    def load_series(self, path: str) -> None:
        if self._worker and self._worker.isRunning():
            return
        self._series_path = path
        self._set_loading(True, f'Loading {os.path.basename(path)}...')
        self._worker = SeriesLoadWorker(path, self.column)
        self._worker.data_ready.connect(self._on_data_ready)
        self._worker.error.connect(self._on_load_error)
        self._worker.finished.connect(lambda: self._set_loading(False, ''))
        self._worker.start()

    def _on_data_ready(self, series: list, skipped: int) -> None:
        if skipped:
            self._report_error(f'Skipped {skipped} unparsable row(s) in {self._series_path}', source='load')
        self.engine.set_series(series)
        self._state = replace(self._state, selected_domain=None)
        self._redraw()

    def _on_load_error(self, message: str) -> None:
        self.status_label.setText(f'Error: {message}')
        self._report_error(f'Series load failed: {message}', source='load')

    def _set_loading(self, is_loading: bool, message: str) -> None:
        if is_loading:
            self.status_label.setText(message)
        elif not self.status_label.text().startswith('Error:'):
            self.status_label.setText('')

    def shutdown(self) -> None:
        if self._worker and self._worker.isRunning():
            self._worker.quit()
            self._worker.wait(1500)

    # -- state changes -------------------------------------------------

    @property
    def view_state(self) -> ViewState:
        return self._state

    def _update_state(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        self._redraw()

    def _on_log_toggled(self, checked: bool) -> None:
        self.trend_toggle.setEnabled(checked)
        self._update_state(log_scale=checked)

    def _on_smoothing_changed(self, value: int) -> None:
        self._update_smoothing_label(value)
        self._update_state(smoothing_window=int(value))

    def _update_smoothing_label(self, value: int) -> None:
        self.smoothing_label.setText(f"Smoothing Window: {value} month{'s' if value > 1 else ''}")

    def _on_filter_toggled(self, event_id: str, checked: bool) -> None:
        filters = set(self._state.event_filters)
        if checked:
            filters.add(event_id)
        else:
            filters.discard(event_id)
        self._update_state(event_filters=frozenset(filters))

    def _on_dark_toggled(self, checked: bool) -> None:
        self.engine.set_config(replace(self.engine.config, dark_mode=checked))
        self._redraw()

    def _on_brush(self, selection: Tuple[float, float]) -> None:
        if not self.engine.series:
            return
        try:
            result = self.engine.on_brush(selection, self._state)
        except Exception as exc:
            self._report_error(f'Brush update failed: {exc}', source='brush')
            return
        self._state = replace(self._state, selected_domain=result.domain)
        self.chart.render_brush(result, palette_for(self.engine.config.dark_mode))
        self._update_cagr_label(result.cagr)

    def _redraw(self) -> None:
        try:
            frame = self.engine.compute_frame(self._state)
            self.chart.render(frame)
        except Exception as exc:
            self._report_error(f'Chart redraw failed: {exc}')
            return
        self._update_cagr_label(frame.cagr)

    def _update_cagr_label(self, cagr) -> None:
        if cagr is None:
            self.cagr_label.setText('CAGR: n/a')
            return
        self.cagr_label.setText(
            f"CAGR {cagr.start_date.strftime('%b %Y')} - {cagr.end_date.strftime('%b %Y')}: "
            f"{cagr.cagr:.2f}% over {cagr.years:.2f} years "
            f"({cagr.start_value:,.2f} -> {cagr.end_value:,.2f})"
        )

    # -- hover ---------------------------------------------------------

    def _on_mouse_moved(self, scene_pos) -> None:
        self._pending_mouse_pos = scene_pos
        if self._mouse_move_timer.isActive():
            return
        self._mouse_move_timer.start(self._mouse_move_delay_ms)

    def _flush_mouse_move(self) -> None:
        scene_pos = self._pending_mouse_pos
        frame = self.engine.last_frame
        if scene_pos is None or frame is None or frame.focus.x_scale is None:
            return
        view_box = self.focus_widget.getPlotItem().getViewBox()
        if not view_box.sceneBoundingRect().contains(scene_pos):
            self.chart.hide_tooltip()
            return
        view_pos = view_box.mapSceneToView(scene_pos)
        query = frame.focus.x_scale.invert(view_pos.x())
        self.chart.show_tooltip(self.engine.on_hover(query, self._state))

    def export_chart_png(self, path: str) -> None:
        pixmap = self.grab()
        pixmap.save(path, 'PNG')

    def _report_error(self, message: str, source: str = 'chart') -> None:
        if self.error_sink is not None:
            try:
                self.error_sink.append_error(message, source=source)
            except Exception:
                pass
