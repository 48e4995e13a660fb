"""Logging setup for the desktop app: JSON lines on disk, plain text on the console."""

from __future__ import annotations

import json
import logging
from logging import Handler
from pathlib import Path
from typing import Any, Optional

from utils.env import get_data_dir, is_dev_mode


LOG_FILE_NAME = "sdd.log"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Attributes every LogRecord carries; anything else on a record came from ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

_CONFIGURED = False


def _json_safe(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool, type(None))):
        return value
    return str(value)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` fields such as ``event`` or ``project`` ride along."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, _json_safe(value))
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _build_handlers(log_file: Path) -> list[Handler]:
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(StructuredFormatter())

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    return [file_handler, console_handler]


def get_log_file_path() -> Path:
    """``<data dir>/logs/sdd.log``"""
    return get_data_dir() / "logs" / LOG_FILE_NAME


def setup_logging(level: Optional[int] = None, log_file: Optional[Path] = None) -> Path:
    """Install the app's handlers on the root logger.

    Only the first call has an effect; later calls just report the log path.
    The level defaults to DEBUG in dev mode and INFO otherwise.
    """
    global _CONFIGURED

    target = log_file or get_log_file_path()
    if _CONFIGURED:
        return target

    target.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level if level is not None else (logging.DEBUG if is_dev_mode() else logging.INFO))
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in _build_handlers(target):
        root_logger.addHandler(handler)

    _CONFIGURED = True
    return target
