from __future__ import annotations

"""Logging for the focus tracker: JSON lines in a rotating file plus an optional console stream.

Engine and storage modules log through ``logging.getLogger(__name__)``; fields
passed as ``extra={"_json_<name>": value}`` land in the JSON payload as
``<name>``.
"""

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Dict

LOG_DIR_NAME = "logs"
LOG_FILE_BASENAME = "focus_tracker.log"
LOG_MAX_BYTES = 512_000
LOG_BACKUP_COUNT = 5
EXTRA_PREFIX = "_json_"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).isoformat().replace("+00:00", "Z")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, carrying ``_json_`` extras and any exception text."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utc_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key[len(EXTRA_PREFIX):], value)
            for key, value in record.__dict__.items()
            if key.startswith(EXTRA_PREFIX)
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _file_handler(logfile: Path) -> logging.Handler:
    handler = RotatingFileHandler(logfile, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8")
    handler.setFormatter(JsonFormatter())
    return handler


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def configure_logging(base_dir: Path, level: int = logging.INFO, *, console: bool = True) -> Path:
    """Replace the root handlers and return the path of the JSON log file."""
    log_dir = base_dir / LOG_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    logfile = log_dir / LOG_FILE_BASENAME
    root = logging.getLogger()
    root.setLevel(level)
    # Repeated calls (tests, app restarts) must not stack handlers
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.addHandler(_file_handler(logfile))
    if console:
        root.addHandler(_console_handler())
    logging.getLogger(__name__).info("logging initialised", extra={"_json_logfile": logfile})
    return logfile


__all__ = ["configure_logging", "JsonFormatter", "LOG_DIR_NAME", "LOG_FILE_BASENAME"]
