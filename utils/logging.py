"""
Logging Utility - Leveled Console Logging

Provides centralized logging configuration for all fetch components.
Supports a human-readable text format (default) and a JSON-lines format.
Info and success records go to stdout; warnings and errors go to stderr.

Usage:
    from utils.logging import get_logger, setup_logging, success

    setup_logging(level="INFO", format_type="text")
    logger = get_logger(__name__)
    logger.info("Fetching API token...")
    success(logger, "API token retrieved successfully")
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any

import orjson

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LEVEL_MARKERS = {
    logging.DEBUG: "🔎",
    logging.INFO: "ℹ️ ",
    SUCCESS: "✅",
    logging.WARNING: "⚠️ ",
    logging.ERROR: "❌",
    logging.CRITICAL: "❌",
}

# Attributes present on every LogRecord; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def success(logger: logging.Logger, msg: str, *args: Any, **kwargs: Any) -> None:
    """Log a message at the SUCCESS level."""
    logger.log(SUCCESS, msg, *args, **kwargs)


class TextFormatter(logging.Formatter):
    """`<marker> [<logger>][HH:MM:SS] <message>`"""

    def __init__(self) -> None:
        super().__init__(fmt="%(marker)s [%(name)s][%(asctime)s] %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        record.marker = LEVEL_MARKERS.get(record.levelno, "  ")
        return super().format(record)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including any `extra=` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and key != "marker":
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


class _ConsoleHandler(logging.StreamHandler):
    """Marker class so setup_logging() can replace only its own handlers."""


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def setup_logging(level: str = "INFO", format_type: str = "text") -> None:
    """Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL)
        format_type: Log format ('text' or 'json')

    Raises:
        ValueError: If format_type is not recognised
    """
    if format_type == "text":
        formatter: logging.Formatter = TextFormatter()
    elif format_type == "json":
        formatter = JsonFormatter()
    else:
        raise ValueError(f"Unknown log format: {format_type!r}")

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, _ConsoleHandler):
            root.removeHandler(handler)

    stdout_handler = _ConsoleHandler(sys.stdout)
    stdout_handler.addFilter(_BelowWarning())
    stdout_handler.setFormatter(formatter)

    stderr_handler = _ConsoleHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)

    root.addHandler(stdout_handler)
    root.addHandler(stderr_handler)
    level_name = level.upper()
    root.setLevel(SUCCESS if level_name == "SUCCESS" else getattr(logging, level_name, logging.INFO))

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
