"""Registry of structured logging event identifiers."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any

from structlog.stdlib import BoundLogger

__all__ = ["LogEvents", "emit"]


class LogEvents(str, Enum):
    """Strongly typed registry of UnifiedLogger events.

    Member names follow ``<namespace>_<action...>_<suffix>`` and are rendered
    as dotted identifiers, e.g. ``FOLDER_CONFIGURE_ATTRIBUTES`` becomes
    ``folder.configure.attributes``.
    """

    @staticmethod
    def _generate_next_value_(name: str, start: int, count: int, _last_values: list[Any]) -> str:
        parts = name.lower().split("_")
        namespace = parts[0] if parts else "event"
        suffix = parts[-1] if len(parts) > 1 else "event"
        action_parts = parts[1:-1] if len(parts) > 2 else ["event"]
        return ".".join((namespace, ".".join(action_parts), suffix))

    FOLDER_CONFIGURE_ATTRIBUTES = auto()
    FOLDER_CONFIGURE_NAMEVALUE = auto()
    FOLDER_CONFIGURE_REJECTED = auto()
    FOLDER_FOLD_FINISH = auto()
    NAMEVALUE_ROW_SKIPPED = auto()
    NAMEVALUE_BUILD_FINISH = auto()
    SOURCE_QUERY_START = auto()
    SOURCE_QUERY_FINISH = auto()
    SOURCE_QUERY_ERROR = auto()
    FRAME_LAYOUT_INVALID = auto()
    CONFIG_LOAD_FINISH = auto()
    CONFIG_LOAD_INVALID = auto()
    CONFIG_ENV_OVERRIDE = auto()
    CLI_FOLD_FINISH = auto()
    CLI_COMMAND_ERROR = auto()


def emit(logger: BoundLogger, event: str | LogEvents, **fields: Any) -> None:
    """Send an event via ``BoundLogger`` without mutating the provided fields."""

    message = event.value if isinstance(event, LogEvents) else event
    logger.info(message, **dict(fields))
