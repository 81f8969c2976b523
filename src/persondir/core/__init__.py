"""Core building blocks shared by the persondir packages."""

from __future__ import annotations

from .errors import ConfigurationError, PersonDirError, RowLayoutError
from .log_events import LogEvents, emit
from .logger import LogConfig, LogFormat, UnifiedLogger, configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "PersonDirError",
    "RowLayoutError",
    "LogEvents",
    "emit",
    "LogConfig",
    "LogFormat",
    "UnifiedLogger",
    "configure_logging",
    "get_logger",
]
