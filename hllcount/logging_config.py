"""Logging setup helpers for hllcount.

The library is silent by default: the ``hllcount`` logger carries only a
NullHandler. Applications opt in with one of the helpers below.

Example usage:
    import hllcount

    hllcount.enable_console_logging(level="DEBUG")
    hllcount.enable_file_logging("hll.log", max_bytes=5_000_000)
    hllcount.enable_json_logging()
    hllcount.configure_from_env()

Environment variables:
    HLL_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    HLL_LOG_FILE: Path to a rotating log file
    HLL_LOG_JSON: Set to "1" for JSON output
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal

__all__ = [
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5

LOGGER_NAME = "hllcount"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Example output:
        {"timestamp": "2026-01-15T10:30:00.123456+00:00", "level": "DEBUG",
         "logger": "hllcount.sources", "message": "Counted 120 keys, ..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def _get_level(level: str | int) -> int:
    """Convert a level name or number to a logging level constant."""
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _clear_handlers() -> None:
    """Remove and close every handler on the hllcount logger except NullHandler."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def _install(handler: logging.Handler, level: LogLevel | int) -> None:
    logger = _get_logger()
    logger.setLevel(_get_level(level))
    handler.setLevel(_get_level(level))
    logger.addHandler(handler)


def enable_console_logging(
    level: LogLevel | int = "INFO",
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> logging.StreamHandler:
    """Log hllcount records to stderr.

    Args:
        level: Log level name or number.
        format: Log message format string.
        date_format: Date format string for %(asctime)s.

    Returns:
        The created StreamHandler.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format, date_format))
    _install(handler, level)
    return handler


def enable_file_logging(
    path: str | Path,
    level: LogLevel | int = "INFO",
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    json_format: bool = False,
) -> RotatingFileHandler:
    """Log hllcount records to a size-rotated file.

    Args:
        path: Log file path. Parent directories are created automatically.
        level: Log level name or number.
        max_bytes: Size at which the file is rotated. Default 10 MB.
        backup_count: Number of rotated files to keep. Default 5.
        json_format: Write JSON lines instead of plain text.

    Returns:
        The created RotatingFileHandler.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATE_FORMAT))
    _install(handler, level)
    return handler


def enable_json_logging(level: LogLevel | int = "INFO") -> logging.StreamHandler:
    """Log hllcount records to stderr as JSON lines.

    Returns:
        The created StreamHandler with JsonFormatter.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    _install(handler, level)
    return handler


def configure_from_env() -> None:
    """Configure logging from HLL_LOGGING, HLL_LOG_FILE and HLL_LOG_JSON.

    Does nothing if neither HLL_LOGGING nor HLL_LOG_FILE is set.
    """
    level = os.environ.get("HLL_LOGGING", "").upper()
    log_file = os.environ.get("HLL_LOG_FILE", "")
    use_json = os.environ.get("HLL_LOG_JSON", "") == "1"

    if not level and not log_file:
        return

    level = level or "INFO"

    if log_file:
        enable_file_logging(log_file, level=level, json_format=use_json)
    elif use_json:
        enable_json_logging(level=level)
    else:
        enable_console_logging(level=level)


def set_level(level: LogLevel | int) -> None:
    """Set the level of the hllcount logger."""
    _get_logger().setLevel(_get_level(level))


def set_module_level(module: str, level: LogLevel | int) -> None:
    """Set the level for one submodule, e.g. ``"sketching.hyperloglog"``."""
    logging.getLogger(f"{LOGGER_NAME}.{module}").setLevel(_get_level(level))


def disable_logging() -> None:
    """Drop all handlers and silence the hllcount logger."""
    logger = _get_logger()
    _clear_handlers()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.CRITICAL + 1)
