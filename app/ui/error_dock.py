import time
from typing import List, Tuple

from PyQt6.QtWidgets import QDockWidget, QHBoxLayout, QLabel, QPushButton, QTextEdit, QVBoxLayout, QWidget

REPEAT_WINDOW_S = 2.0


class ErrorDock(QDockWidget):
    """Sink for recoverable load/chart errors; crashes go to exception.log instead."""

    def __init__(self) -> None:
        super().__init__('Errors')
        self.setObjectName('ErrorDock')
        self._entries: List[Tuple[str, str]] = []
        self._last_key: Tuple[str, str] = ('', '')
        self._last_at = 0.0
        self._suppressed = 0

        body = QWidget()
        layout = QVBoxLayout(body)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        header = QHBoxLayout()
        self.count_label = QLabel('')
        header.addWidget(self.count_label)
        header.addStretch(1)
        self.clear_button = QPushButton('Clear')
        self.clear_button.clicked.connect(self.clear)
        header.addWidget(self.clear_button)
        layout.addLayout(header)

        self.text = QTextEdit()
        self.text.setReadOnly(True)
        self.text.setPlaceholderText('Series load and chart errors will appear here.')
        layout.addWidget(self.text)
        self.setWidget(body)
        self._update_count()

    @property
    def entries(self) -> List[Tuple[str, str]]:
        return list(self._entries)

    def append_error(self, message: str, source: str = 'chart') -> None:
        # Brush drags fire continuously; identical messages inside the window are counted, not shown.
        now = time.monotonic()
        key = (source, message)
        if key == self._last_key and (now - self._last_at) < REPEAT_WINDOW_S:
            self._suppressed += 1
            self._last_at = now
            return
        self._flush_suppressed()
        self._last_key = key
        self._last_at = now
        self._entries.append(key)
        self.text.append(f"[{time.strftime('%H:%M:%S')}] {source}: {message}")
        self._update_count()

    def clear(self) -> None:
        self._entries = []
        self._last_key = ('', '')
        self._suppressed = 0
        self.text.clear()
        self._update_count()

    def _flush_suppressed(self) -> None:
        if self._suppressed:
            self.text.append(f'    (previous message repeated {self._suppressed} more time(s))')
            self._suppressed = 0

    def _update_count(self) -> None:
        count = len(self._entries)
        self.count_label.setText(f'{count} error(s)' if count else 'No errors')
