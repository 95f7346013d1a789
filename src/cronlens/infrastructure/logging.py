"""Logging setup for cronlens.

Library modules only call ``logging.getLogger(__name__)``; nothing is
emitted until an application (the CLI, or an embedding front end) calls
``configure_logging``. Handlers are attached to the ``cronlens`` logger,
never the root logger.

Usage:
    >>> from cronlens.infrastructure.logging import configure_logging
    >>>
    >>> configure_logging(level="debug")
    >>> configure_logging(level="info", format="json")
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, TextIO

ROOT_LOGGER_NAME = "cronlens"


# =============================================================================
# Log Levels
# =============================================================================


class LogLevel(IntEnum):
    """Log severity levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_string(cls, level: str) -> "LogLevel":
        """Convert string to LogLevel."""
        mapping = {
            "debug": cls.DEBUG,
            "info": cls.INFO,
            "warning": cls.WARNING,
            "warn": cls.WARNING,
            "error": cls.ERROR,
            "critical": cls.CRITICAL,
            "fatal": cls.CRITICAL,
        }
        return mapping.get(level.lower(), cls.INFO)


# =============================================================================
# Formatters
# =============================================================================


class ConsoleFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL    [logger] message`` with optional ANSI colors."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, *, color: bool = False, timestamp_format: str = "%H:%M:%S") -> None:
        super().__init__()
        self._color = color
        self._timestamp_format = timestamp_format

    def format(self, record: logging.LogRecord) -> str:
        parts = [datetime.fromtimestamp(record.created).strftime(self._timestamp_format)]

        level = record.levelname.ljust(8)
        if self._color:
            level = f"{self.COLORS.get(record.levelno, '')}{level}{self.RESET}"
        parts.append(level)
        parts.append(f"[{record.name}]")
        parts.append(record.getMessage())

        result = " ".join(parts)
        if record.exc_info:
            result = f"{result}\n{self.formatException(record.exc_info)}"
        return result


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


# =============================================================================
# Global Configuration
# =============================================================================

_handler: logging.Handler | None = None
_lock = threading.Lock()


def configure_logging(
    *,
    level: str | LogLevel | int = LogLevel.WARNING,
    format: str = "console",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``cronlens`` logger.

    Calling this again replaces the previous handler rather than adding a
    second one.

    Args:
        level: Log level name or number.
        format: ``console`` or ``json``.
        stream: Destination; defaults to stderr.

    Returns:
        The configured ``cronlens`` logger.
    """
    global _handler

    if isinstance(level, str):
        level = LogLevel.from_string(level)
    if format not in ("console", "json"):
        raise ValueError(f"Unknown log format: {format!r}")

    target = stream or sys.stderr
    handler = logging.StreamHandler(target)
    if format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ConsoleFormatter(color=bool(getattr(target, "isatty", lambda: False)())))

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    with _lock:
        if _handler is not None:
            logger.removeHandler(_handler)
        _handler = handler
        logger.addHandler(handler)
        logger.setLevel(int(level))
        logger.propagate = False
    return logger


def reset_logging() -> None:
    """Remove the handler installed by ``configure_logging``."""
    global _handler

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    with _lock:
        if _handler is not None:
            logger.removeHandler(_handler)
        _handler = None
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
