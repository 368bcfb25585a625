"""Central logging configuration."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from pathlib import Path

LOG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "ghostwriter" / "logs"
LOG_FILE = LOG_DIR / "ghostwriter.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Translate a configured level (``"debug"``, ``20`` ...) into a logging level."""

    if isinstance(value, int):
        return value
    if isinstance(value, str):
        level = logging.getLevelName(value.strip().upper())
        if isinstance(level, int):
            return level
    return default


def configure_logging(level: int = logging.INFO, log_file: Path | None = None) -> None:
    """Attach a stdout handler and a rotating file handler to the root logger.

    Handlers are only installed once; later calls just adjust the level so the
    ``--debug`` flag can raise verbosity after the lazy default setup.
    """

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if root_logger.handlers:
        return

    target = log_file or LOG_FILE
    target.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    file_handler = RotatingFileHandler(target, maxBytes=512_000, backupCount=5, encoding="utf-8")
    file_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger, configuring logging on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)
