"""Interpret rows laid out as attribute name / attribute value column pairs.

Some person stores keep attributes in a narrow table::

    user_name | attr_name | attr_value
    ----------+-----------+-----------
    jdoe      | mail      | a@x.com
    jdoe      | mail      | b@x.com
    jdoe      | phone     | 555-0100

With ``{"attr_name": "attr_value"}`` as name/value column mapping each raw
row is turned into one-entry rows such as ``{"mail": "a@x.com"}``, which the
folder then accumulates like any other column-keyed row.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from persondir.core.log_events import LogEvents
from persondir.core.logger import UnifiedLogger
from persondir.core.utils import is_missing

__all__ = ["NameValueRowBuilder"]

logger = UnifiedLogger.get(__name__)


class NameValueRowBuilder:
    """Turn name/value layout rows into column-keyed rows."""

    def __init__(self, name_value_column_mappings: Mapping[str, Sequence[str]]) -> None:
        self._mappings: tuple[tuple[str, tuple[str, ...]], ...] = tuple(
            (name_column, tuple(value_columns))
            for name_column, value_columns in name_value_column_mappings.items()
        )

    @property
    def name_columns(self) -> tuple[str, ...]:
        return tuple(name_column for name_column, _ in self._mappings)

    def iter_rows(self, raw_rows: Iterable[Mapping[str, Any]]) -> Iterator[dict[str, Any]]:
        """Yield one-entry rows in raw row, name column, value column order."""

        for index, raw_row in enumerate(raw_rows):
            for name_column, value_columns in self._mappings:
                attribute_name = raw_row.get(name_column)
                if is_missing(attribute_name):
                    logger.warning(
                        LogEvents.NAMEVALUE_ROW_SKIPPED.value,
                        component="name_value",
                        operation="build_rows",
                        row_index=index,
                        column=name_column,
                        reason="missing_name",
                    )
                    continue
                key = str(attribute_name).strip()
                for value_column in value_columns:
                    if value_column not in raw_row:
                        logger.warning(
                            LogEvents.NAMEVALUE_ROW_SKIPPED.value,
                            component="name_value",
                            operation="build_rows",
                            row_index=index,
                            column=value_column,
                            reason="missing_value_column",
                        )
                        continue
                    yield {key: raw_row[value_column]}

    def build_rows(self, raw_rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        rows = list(self.iter_rows(raw_rows))
        logger.debug(
            LogEvents.NAMEVALUE_BUILD_FINISH.value,
            component="name_value",
            operation="build_rows",
            rows=len(rows),
        )
        return rows
