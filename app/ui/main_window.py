import os
from typing import Optional

from PyQt6.QtWidgets import QMainWindow, QDockWidget, QFileDialog
from PyQt6.QtGui import QAction
from PyQt6.QtCore import Qt

from core.chart.models import RenderConfig
from core.data_load import DEFAULT_COLUMN
from .chart_view import ChartView
from .error_dock import ErrorDock


class MainWindow(QMainWindow):
    def __init__(self, series_path: Optional[str] = None, column: str = DEFAULT_COLUMN, dark_mode: bool = False) -> None:
        super().__init__()
        self.setWindowTitle('Index Focus Chart')
        self.resize(1200, 820)

        self.error_dock = ErrorDock()
        self.chart_view = ChartView(
            error_sink=self.error_dock,
            config=RenderConfig(dark_mode=dark_mode),
            column=column,
        )
        self.setCentralWidget(self.chart_view)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, self.error_dock)

        self._setup_menu()
        if series_path:
            self.chart_view.load_series(series_path)

    def _setup_menu(self) -> None:
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu('File')
        window_menu = menu_bar.addMenu('Window')

        open_action = QAction('Open Series CSV...', self)
        open_action.triggered.connect(self._open_series)
        file_menu.addAction(open_action)

        export_action = QAction('Export Chart as PNG...', self)
        export_action.triggered.connect(self._export_chart_png)
        file_menu.addAction(export_action)

        action = QAction(self.error_dock.windowTitle(), self)
        action.setCheckable(True)
        action.setChecked(not self.error_dock.isHidden())
        action.triggered.connect(lambda checked: self._toggle_dock(self.error_dock, checked))
        self.error_dock.visibilityChanged.connect(action.setChecked)
        window_menu.addAction(action)

    def _toggle_dock(self, dock: QDockWidget, visible: bool) -> None:
        if visible:
            dock.show()
            dock.raise_()
        else:
            dock.hide()

    def _open_series(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, 'Open Series CSV', os.path.expanduser('~'), 'CSV Files (*.csv)')
        if path:
            self.chart_view.load_series(path)

    def _export_chart_png(self) -> None:
        default_path = os.path.join(os.path.expanduser('~'), 'index_chart.png')
        path, _ = QFileDialog.getSaveFileName(
            self,
            'Export Chart as PNG',
            default_path,
            'PNG Image (*.png)',
        )
        if not path:
            return
        if not path.lower().endswith('.png'):
            path = f'{path}.png'
        try:
            self.chart_view.export_chart_png(path)
        except Exception as exc:
            self.error_dock.append_error(f'Export failed: {exc}', source='export')

    def closeEvent(self, event) -> None:
        try:
            self.chart_view.shutdown()
        except Exception:
            pass
        super().closeEvent(event)
