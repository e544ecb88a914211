"""Structured logging: readable console output plus rotating JSON lines.

Engine log calls pass the rhythm they are working on through ``extra``.
The JSON formatter lifts those context fields to the top level of each
line so one rhythm can be followed across cache reads, recomputes and
invalidations.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import BaseConfig

ROOT_LOGGER_NAME = "rhythmchain"
LOG_FILENAME = "rhythmchain.log"

# Lifted out of "extra" into the top level of each JSON line
CONTEXT_FIELDS = ("rhythm_id", "as_of")

# Everything a bare LogRecord carries; anything else came in via extra=
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with rhythm context at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        extra_fields = {
            key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS
        }
        for key in CONTEXT_FIELDS:
            if key in extra_fields:
                log_data[key] = extra_fields.pop(key)
        if extra_fields:
            log_data["extra"] = extra_fields

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data, default=str)


def _console_handler(config: BaseConfig) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO if config.DEV_MODE else logging.WARNING)
    if config.DEV_MODE:
        fmt = "[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"
        datefmt = "%H:%M:%S"
    else:
        fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        datefmt = "%Y-%m-%d %H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
    return handler


def _file_handler(config: BaseConfig) -> logging.handlers.RotatingFileHandler:
    logs_dir = Path(config.DATA_DIR) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        filename=logs_dir / LOG_FILENAME,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(config.LOG_LEVEL)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(config: BaseConfig) -> logging.Logger:
    """Attach console and (when ``LOG_TO_FILE``) JSON file handlers to the package logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        config: Engine configuration with DATA_DIR, DEV_MODE, LOG_LEVEL and LOG_TO_FILE

    Returns:
        The ``rhythmchain`` logger
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG if config.DEV_MODE else config.LOG_LEVEL)

    for handler in list(package_logger.handlers):
        handler.close()
    package_logger.handlers.clear()

    package_logger.addHandler(_console_handler(config))

    log_file: Optional[str] = None
    if config.LOG_TO_FILE:
        file_handler = _file_handler(config)
        package_logger.addHandler(file_handler)
        log_file = file_handler.baseFilename

    package_logger.info(
        "Logging initialized",
        extra={"dev_mode": config.DEV_MODE, "log_level": config.LOG_LEVEL, "log_file": log_file},
    )
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the package namespace, e.g. ``get_logger("services.progress")``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
