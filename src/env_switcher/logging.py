"""Logging utilities for the environment switcher.

This module provides standardized logging functionality for registry,
storage and gesture events. Messages go to loggers in the ``env_switcher``
namespace; an optional callback can receive the same structured events.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

# Type for log callback functions
LogCallback = Callable[[int, str, Dict[str, Any]], None]

LOGGER_NAMESPACE = "env_switcher"

_log_callback: Optional[LogCallback] = None


class LogLevel(int, Enum):
    """Log levels for the environment switcher."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogEvent(str, Enum):
    """Event types for environment switcher logging."""

    ENV_REGISTRY = "env_registry"
    ENV_SWITCH = "env_switch"
    STORAGE = "storage"
    GESTURE = "gesture"
    CREDENTIALS = "credentials"
    CONFIG = "config"


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the package namespace.

    Args:
        name: Short component name, e.g. ``"registry"``

    Returns:
        Logger named ``env_switcher.<name>``
    """
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_callback(callback: Optional[LogCallback]) -> None:
    """Install (or remove, with ``None``) a callback receiving every event."""
    global _log_callback
    _log_callback = callback


def _log(
    callback: LogCallback,
    level: LogLevel,
    event: LogEvent,
    data: Dict[str, Any],
) -> None:
    """Log an event with the provided callback.

    Args:
        callback: Function to call with the log data
        level: Severity level
        event: Event type
        data: Dictionary of event data
    """
    try:
        callback(level, event.value, data)
    except Exception as e:
        # Fallback to standard logging if callback fails
        logging.getLogger(LOGGER_NAMESPACE).error(
            f"Logging callback failed with error: {e}. Original log: "
            f"level={level}, event={event.value}, data={data}"
        )


def _emit(level: LogLevel, event: LogEvent, message: str, data: Dict[str, Any]) -> None:
    logger = get_logger(event.value)
    if data:
        details = ", ".join(f"{k}={v}" for k, v in data.items())
        logger.log(level, f"{message} ({details})")
    else:
        logger.log(level, message)

    if _log_callback is not None:
        _log(_log_callback, level, event, {"message": message, **data})


def log_debug(event: LogEvent, message: str, **data: Any) -> None:
    """Log a debug-level event."""
    _emit(LogLevel.DEBUG, event, message, data)


def log_info(event: LogEvent, message: str, **data: Any) -> None:
    """Log an info-level event."""
    _emit(LogLevel.INFO, event, message, data)


def log_warning(event: LogEvent, message: str, **data: Any) -> None:
    """Log a warning-level event."""
    _emit(LogLevel.WARNING, event, message, data)


def log_error(event: LogEvent, message: str, **data: Any) -> None:
    """Log an error-level event."""
    _emit(LogLevel.ERROR, event, message, data)
