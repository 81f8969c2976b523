"""Fold multi-row query results into multi-valued person attributes.

A query against a person store may return several rows for one person, for
example one row per e-mail address.  :class:`AttributeRowFolder` collapses
those rows into a single mapping of exposed attribute name to the list of
values seen across all rows::

    folder = (
        AttributeRowFolder.builder()
        .with_attribute_name_mappings({"sn": "lastName", "mail": {"email", "mailAddress"}})
        .build()
    )
    folder.fold([{"sn": "Smith", "mail": "a@x.com"}, {"sn": "Smith", "mail": "b@x.com"}])

Columns without a mapping are exposed under their own name.  Columns mapped
to an empty set of attribute names are dropped.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import AbstractSet, Any

from persondir.attributes.multivalued import (
    add_result,
    flatten_collection,
    parse_attribute_to_attribute_mapping,
    parse_column_list_mapping,
)
from persondir.attributes.name_value import NameValueRowBuilder
from persondir.core.errors import ConfigurationError
from persondir.core.log_events import LogEvents
from persondir.core.logger import UnifiedLogger

__all__ = [
    "AttributeValues",
    "RawRow",
    "AttributeRowFolder",
    "AttributeRowFolderBuilder",
    "fold_rows",
]

logger = UnifiedLogger.get(__name__)

RawRow = Mapping[str, Any]
AttributeValues = dict[str, list[Any]]

_EMPTY_ATTRIBUTE_MAPPINGS: Mapping[str, frozenset[str]] = MappingProxyType({})
_EMPTY_COLUMN_MAPPINGS: Mapping[str, tuple[str, ...]] = MappingProxyType({})


def fold_rows(
    rows: Iterable[RawRow],
    attribute_name_mappings: Mapping[str, AbstractSet[str]],
) -> AttributeValues:
    """Fold ``rows`` into an attribute name to values mapping.

    Rows are visited in iteration order and each row's entries in their own
    order.  When a column maps to several attribute names the value is
    appended to each of them, in sorted attribute name order.
    """

    results: AttributeValues = {}
    for row in rows:
        for column, value in row.items():
            targets = attribute_name_mappings.get(column)
            if targets is None:
                add_result(results, column, value)
                continue
            for attribute_name in sorted(targets):
                add_result(results, attribute_name, value)
    return results


@dataclass(frozen=True, slots=True)
class AttributeRowFolder:
    """Immutable folding configuration.

    Instances are created through :class:`AttributeRowFolderBuilder`, which
    validates and normalises the loose mapping forms accepted from callers.
    """

    attribute_name_mappings: Mapping[str, frozenset[str]] = field(
        default_factory=lambda: _EMPTY_ATTRIBUTE_MAPPINGS
    )
    name_value_column_mappings: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: _EMPTY_COLUMN_MAPPINGS
    )
    possible_attribute_names: frozenset[str] = frozenset()

    @staticmethod
    def builder() -> AttributeRowFolderBuilder:
        return AttributeRowFolderBuilder()

    @property
    def uses_name_value_layout(self) -> bool:
        return bool(self.name_value_column_mappings)

    def fold(self, rows: Iterable[RawRow]) -> AttributeValues:
        """Fold already column-keyed rows into attribute values."""

        materialized = rows if isinstance(rows, (list, tuple)) else list(rows)
        results = fold_rows(materialized, self.attribute_name_mappings)
        logger.debug(
            LogEvents.FOLDER_FOLD_FINISH.value,
            component="folder",
            operation="fold",
            rows=len(materialized),
            attributes=len(results),
        )
        return results

    def fold_name_value_rows(self, raw_rows: Iterable[RawRow]) -> AttributeValues:
        """Fold rows laid out as name/value column pairs.

        Without a configured name/value mapping the rows are folded as-is.
        """

        if not self.uses_name_value_layout:
            return self.fold(raw_rows)
        builder = NameValueRowBuilder(self.name_value_column_mappings)
        return self.fold(builder.build_rows(raw_rows))


class AttributeRowFolderBuilder:
    """Collect and validate folder configuration before freezing it."""

    def __init__(self) -> None:
        self._attribute_name_mappings: dict[str, frozenset[str]] = {}
        self._possible_attribute_names: frozenset[str] = frozenset()
        self._name_value_column_mappings: dict[str, tuple[str, ...]] = {}

    def with_attribute_name_mappings(
        self, mapping: Mapping[str, Any] | None
    ) -> AttributeRowFolderBuilder:
        """Set the column to attribute name mapping.

        Raises :class:`ConfigurationError` when ``mapping`` is ``None`` or
        contains the empty string as a key.
        """

        parsed = parse_attribute_to_attribute_mapping(mapping)
        if "" in parsed:
            logger.warning(
                LogEvents.FOLDER_CONFIGURE_REJECTED.value,
                component="folder",
                operation="configure",
                reason="empty_key",
            )
            raise ConfigurationError(
                "The map from column names to attribute names must not have any empty keys.",
                context={"mapping": "attribute_name_mappings"},
            )

        self._attribute_name_mappings = parsed
        self._possible_attribute_names = frozenset(flatten_collection(parsed.values()))
        logger.debug(
            LogEvents.FOLDER_CONFIGURE_ATTRIBUTES.value,
            component="folder",
            operation="configure",
            columns=len(parsed),
            attributes=sorted(self._possible_attribute_names),
        )
        return self

    def with_name_value_column_mappings(
        self, mapping: Mapping[str, Any] | None
    ) -> AttributeRowFolderBuilder:
        """Set the name column to value columns mapping.

        Raises :class:`ConfigurationError` when ``mapping`` is ``None`` or has
        a ``None`` value anywhere.
        """

        parsed = parse_column_list_mapping(mapping)
        null_keys = sorted(
            key for key, columns in parsed.items() if columns is None or None in columns
        )
        if null_keys:
            logger.warning(
                LogEvents.FOLDER_CONFIGURE_REJECTED.value,
                component="folder",
                operation="configure",
                reason="null_value",
                keys=null_keys,
            )
            raise ConfigurationError(
                "name_value_column_mappings may not have null values",
                context={"mapping": "name_value_column_mappings", "keys": null_keys},
            )

        self._name_value_column_mappings = {
            key: tuple(column for column in columns if column is not None)
            for key, columns in parsed.items()
            if columns is not None
        }
        logger.debug(
            LogEvents.FOLDER_CONFIGURE_NAMEVALUE.value,
            component="folder",
            operation="configure",
            name_columns=list(self._name_value_column_mappings),
        )
        return self

    def build(self) -> AttributeRowFolder:
        return AttributeRowFolder(
            attribute_name_mappings=MappingProxyType(dict(self._attribute_name_mappings)),
            name_value_column_mappings=MappingProxyType(dict(self._name_value_column_mappings)),
            possible_attribute_names=self._possible_attribute_names,
        )
