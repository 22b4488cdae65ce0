#!/usr/bin/env python3
"""
Centralized logging configuration for the course feed builder.

Progress lines (DEBUG/INFO) go to stdout, problems (WARNING and above) to
stderr so that CI job logs flag them. Structured events carry a dict that
is rendered as sorted key=value pairs after the message.
"""

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def level_from_env(default: int = logging.INFO) -> int:
    """LOG_LEVEL=DEBUG|INFO|WARNING|ERROR, anything else gives the default."""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "").strip().upper())
    return level if isinstance(level, int) else default


DEFAULT_LOG_LEVEL = level_from_env()


def format_event_data(data: Dict[str, Any]) -> str:
    return " ".join(f"{key}={data[key]!r}" for key in sorted(data))


class StructuredFormatter(logging.Formatter):
    """Formatter that appends structured event data to log messages."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="seconds")
        line = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        event_data = getattr(record, 'event_data', None)
        if event_data:
            line = f"{line} | {format_event_data(event_data)}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class MaxLevelFilter(logging.Filter):
    """Let through records strictly below `level`."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logger(name: str, level: int = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """
    Set up a logger with a stdout handler for progress and a stderr handler for problems.

    Args:
        name: Logger name (typically __name__ from calling module)
        level: Logging level (default: LOG_LEVEL from the environment, else INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers if logger already configured
    if logger.handlers:
        return logger

    logger.setLevel(level)
    logger.propagate = False
    formatter = StructuredFormatter()

    progress = logging.StreamHandler(sys.stdout)
    progress.setLevel(level)
    progress.addFilter(MaxLevelFilter(logging.WARNING))
    progress.setFormatter(formatter)

    problems = logging.StreamHandler(sys.stderr)
    problems.setLevel(max(level, logging.WARNING))
    problems.setFormatter(formatter)

    logger.addHandler(progress)
    logger.addHandler(problems)
    return logger


def log_event(logger: logging.Logger, level: str, event_type: str, data: Optional[Dict[str, Any]] = None) -> None:
    """
    Log a structured event, e.g. log_event(logger, "info", "feed_written", {"path": ...}).

    Args:
        logger: Logger instance
        level: 'debug', 'info', 'warning', 'error' or 'critical'
        event_type: Short snake_case event name used as the message
        data: Optional dictionary of additional data
    """
    log_func = getattr(logger, level.lower())
    log_func(event_type, extra={'event_data': data or {}})


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance."""
    return setup_logger(name)
