"""File-based debug logging for the terminal app."""

from __future__ import annotations

import logging
from pathlib import Path

from hanamo.config import DEBUG_LOG_PATH

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_debug_log(path: str | Path = DEBUG_LOG_PATH, level: int = logging.DEBUG) -> logging.Handler | None:
    """
    Send `hanamo.*` log records to a file.

    The TUI owns the terminal, so nothing goes to stderr. Returns None when
    the file cannot be opened; logging must never interfere with app flow.
    """
    log_file = Path(path).resolve()
    package_logger = logging.getLogger("hanamo")
    for existing in package_logger.handlers:
        if isinstance(existing, logging.FileHandler) and Path(existing.baseFilename) == log_file:
            return existing

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        return None

    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False
    return handler
