"""Logging setup for the flicker monitor."""

import json
import logging
import sys
from typing import Any, Dict, List

from PyQt6.QtCore import QObject, pyqtSignal

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure root logging with a deterministic format."""
    level_value = getattr(logging, level.upper(), logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if json_format:
        formatter: logging.Formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level_value, handlers=handlers, force=True)


class _JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, datefmt=DATE_FORMAT),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        return json.dumps(payload, sort_keys=True)


class LogEmitter(QObject):
    """Carries formatted log lines to the GUI thread."""

    message = pyqtSignal(str)


class QtLogHandler(logging.Handler):
    """
    Logging handler that forwards records to the debug panel.

    Records may come from the serial reader thread; the signal is queued
    onto the GUI thread by Qt.

    Example:
        >>> handler = QtLogHandler()
        >>> handler.emitter.message.connect(debug_panel.append_message)
        >>> logging.getLogger().addHandler(handler)
    """

    def __init__(self, level: int = logging.INFO):
        super().__init__(level)
        self.emitter = LogEmitter()
        self.setFormatter(logging.Formatter(
            fmt="[%(asctime)s] %(message)s", datefmt=DATE_FORMAT
        ))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.emitter.message.emit(self.format(record))
        except RuntimeError:
            # Emitter already deleted during shutdown
            self.handleError(record)
