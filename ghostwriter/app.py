"""Application bootstrap for Ghostwriter."""
from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path

from PySide6.QtWidgets import QApplication

from ghostwriter.core.config import ConfigManager
from ghostwriter.core.logging import configure_logging, get_logger, resolve_level
from ghostwriter.ui.main_window import MainWindow


class GhostwriterApplication:
    """Owns application-wide objects and startup sequence."""

    def __init__(self, argv: list[str] | None = None) -> None:
        self.args = self._parse_args(argv)
        self.config = ConfigManager()
        level = logging.DEBUG if self.args.debug else resolve_level(self.config.get("logging", {}).get("level"))
        configure_logging(level)
        self.logger = get_logger(__name__)
        self.qt_app = QApplication.instance() or QApplication(sys.argv[:1])
        self._install_exception_hook()
        path = Path(self.args.path).expanduser() if self.args.path else None
        self.main_window = MainWindow(self.config, path)

    def _parse_args(self, argv: list[str] | None) -> argparse.Namespace:
        parser = argparse.ArgumentParser(description="Ghostwriter editor with inline AI completion")
        parser.add_argument("path", nargs="?", help="File to open")
        parser.add_argument("--debug", action="store_true", help="Enable debug logging")
        return parser.parse_args(argv)

    def run(self) -> int:
        try:
            self.main_window.show()
            return self.qt_app.exec()
        except Exception:
            self.logger.exception("Unhandled exception in main loop")
            return 1
        finally:
            self.cleanup()

    def cleanup(self) -> None:
        if self.main_window is not None:
            self.main_window.completion.shutdown()
            self.main_window.deleteLater()
            self.main_window = None

    # Error handling
    def _install_exception_hook(self) -> None:
        sys.excepthook = self._handle_exception  # type: ignore[assignment]

    def _handle_exception(self, exc_type, exc_value, exc_tb) -> None:
        """Log uncaught exceptions instead of letting Qt abort the process."""
        try:
            formatted = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
        except RecursionError:
            logging.error("Uncaught exception (formatting failed with RecursionError)")
            return
        logging.error("Uncaught exception:\n%s", formatted)
