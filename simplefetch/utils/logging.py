"""Logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, TextIO

REQUEST_LOGGER = "simplefetch.requests"
METRICS_LOGGER = "simplefetch.metrics"
DEFAULT_MAX_LOG_SIZE = 10240
ACTIVITY_FORMAT = "[%(asctime)s] - %(message)s"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "asctime",
}


class JsonFormatter(logging.Formatter):
    """Render log records as compact JSON."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
        }

        extras = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS
        }
        if extras:
            data.update(extras)

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, ensure_ascii=False, default=str)


def configure_logging(
    *,
    level: int = logging.INFO,
    structured: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure root logging on stderr, optionally as JSON.

    Standard output is reserved for response bodies.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        if structured is None:
            return
        formatter: logging.Formatter
        if structured:
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(PLAIN_FORMAT)
        for handler in root.handlers:
            handler.setFormatter(formatter)
        return

    handler = logging.StreamHandler(stream or sys.stderr)
    if structured:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)


def configure_activity_logs(
    *,
    request_log: Path,
    metrics_log: Path,
    max_bytes: int = DEFAULT_MAX_LOG_SIZE,
    level: int = logging.INFO,
) -> None:
    """Route the request and metrics loggers to their own append-only files.

    Each file rotates once it reaches ``max_bytes``, keeping one predecessor
    (``<name>.1``). Calling this again replaces the previously installed
    handlers.
    """

    for name, path in ((REQUEST_LOGGER, request_log), (METRICS_LOGGER, metrics_log)):
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            if getattr(existing, "_simplefetch_activity", False):
                logger.removeHandler(existing)
                existing.close()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=1, encoding="utf-8")
        handler.setFormatter(logging.Formatter(ACTIVITY_FORMAT))
        handler._simplefetch_activity = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = [
    "JsonFormatter",
    "METRICS_LOGGER",
    "REQUEST_LOGGER",
    "configure_activity_logs",
    "configure_logging",
    "get_logger",
]
