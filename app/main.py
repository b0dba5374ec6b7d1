import argparse
import faulthandler
import os
import sys
import threading
import traceback

from PyQt6.QtWidgets import QApplication

from core.data_load import DEFAULT_COLUMN
from ui.main_window import MainWindow

APP_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_SERIES_PATH = os.path.join(APP_DIR, 'data', 'sample_chart.csv')

_FAULT_LOG_HANDLE = None


def _enable_fault_log() -> None:
    global _FAULT_LOG_HANDLE
    try:
        # Overwritten each run; the handle stays open because faulthandler writes on crash.
        _FAULT_LOG_HANDLE = open(os.path.join(APP_DIR, 'faulthandler.log'), 'w', encoding='utf-8')
        _FAULT_LOG_HANDLE.write(f"pid={os.getpid()} argv={' '.join(sys.argv[1:])}\n")
        _FAULT_LOG_HANDLE.flush()
        faulthandler.enable(_FAULT_LOG_HANDLE, all_threads=True)
    except OSError:
        faulthandler.enable(all_threads=True)


def _install_exception_logging() -> None:
    log_path = os.path.join(APP_DIR, 'exception.log')

    def _hook(exc_type, exc_value, exc_tb):
        try:
            with open(log_path, 'a', encoding='utf-8') as handle:
                handle.write(f'\n=== Unhandled exception in {threading.current_thread().name} ===\n')
                traceback.print_exception(exc_type, exc_value, exc_tb, file=handle)
        except OSError:
            pass
        traceback.print_exception(exc_type, exc_value, exc_tb)

    def _thread_hook(args):
        _hook(args.exc_type, args.exc_value, args.exc_traceback)

    sys.excepthook = _hook
    threading.excepthook = _thread_hook


def _parse_args(argv=None):
    ap = argparse.ArgumentParser(description='Focus/context chart of a monthly index series.')
    ap.add_argument('--csv', default=DEFAULT_SERIES_PATH, help='Series CSV with a Date (MM/YYYY) column')
    ap.add_argument('--column', default=DEFAULT_COLUMN, help=f'Value column (default: {DEFAULT_COLUMN})')
    ap.add_argument('--dark', action='store_true', help='Start in dark mode')
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    _enable_fault_log()
    _install_exception_logging()
    app = QApplication(sys.argv[:1])
    app.setApplicationName('Index Focus Chart')
    window = MainWindow(series_path=os.path.abspath(args.csv), column=args.column, dark_mode=args.dark)
    window.show()
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
