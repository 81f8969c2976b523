"""Common domain-specific exceptions for persondir."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class PersonDirError(Exception):
    """Base class for persondir domain errors."""

    pass


class ConfigurationError(PersonDirError, ValueError):
    """Raised when static attribute source configuration is invalid."""

    def __init__(self, message: str, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context: dict[str, Any] = dict(context or {})


class RowLayoutError(PersonDirError):
    """Raised when a frame does not follow the configured name/value layout."""

    def __init__(self, message: str, *, columns: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.columns: tuple[str, ...] = columns
        self.context: dict[str, object] = {"columns": list(columns)}


__all__ = ["PersonDirError", "ConfigurationError", "RowLayoutError"]
