"""Helpers for multi-valued person attribute mappings.

Attribute and column mappings are accepted in a loose form where each value
may be ``None``, a single string, or a collection of strings.  The parsers in
this module turn that loose form into a canonical one before it is stored:

* :func:`parse_attribute_to_attribute_mapping` produces ``frozenset`` targets
  and is used for column to attribute name mappings.
* :func:`parse_column_list_mapping` produces ordered ``tuple`` targets and is
  used for name/value column layouts where column order matters.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any

from persondir.core.errors import ConfigurationError
from persondir.core.utils import is_non_string_iterable

__all__ = [
    "parse_attribute_to_attribute_mapping",
    "parse_column_list_mapping",
    "flatten_collection",
    "add_result",
]


def _require_mapping(mapping: Mapping[Any, Any] | None, label: str) -> Mapping[Any, Any]:
    if mapping is None:
        raise ConfigurationError(f"{label} may not be None", context={"mapping": label})
    if not isinstance(mapping, Mapping):
        raise ConfigurationError(
            f"{label} must be a mapping, got {type(mapping).__name__}",
            context={"mapping": label},
        )
    return mapping


def _require_key(key: Any, label: str) -> str:
    if not isinstance(key, str):
        raise ConfigurationError(
            f"{label} keys must be strings, got {key!r}",
            context={"mapping": label, "key": repr(key)},
        )
    return key


def parse_attribute_to_attribute_mapping(
    mapping: Mapping[str, Any] | None,
    *,
    label: str = "attribute_name_mappings",
) -> dict[str, frozenset[str]]:
    """Normalise a column to attribute name mapping.

    ``None`` values map the key onto itself, strings become singleton sets and
    collections of strings become sets.  An empty collection is kept as an
    empty set.

    >>> parse_attribute_to_attribute_mapping({"sn": "lastName", "uid": None})
    {'sn': frozenset({'lastName'}), 'uid': frozenset({'uid'})}
    """

    source = _require_mapping(mapping, label)
    parsed: dict[str, frozenset[str]] = {}
    for raw_key, raw_value in source.items():
        key = _require_key(raw_key, label)
        if raw_value is None:
            parsed[key] = frozenset((key,))
        elif isinstance(raw_value, str):
            parsed[key] = frozenset((raw_value,))
        elif is_non_string_iterable(raw_value):
            members = tuple(raw_value)
            invalid = [member for member in members if not isinstance(member, str)]
            if invalid:
                raise ConfigurationError(
                    f"{label}[{key!r}] may only contain strings, got {invalid!r}",
                    context={"mapping": label, "key": key},
                )
            parsed[key] = frozenset(members)
        else:
            raise ConfigurationError(
                f"{label}[{key!r}] must be None, a string or a collection of strings",
                context={"mapping": label, "key": key, "type": type(raw_value).__name__},
            )
    return parsed


def parse_column_list_mapping(
    mapping: Mapping[str, Any] | None,
    *,
    label: str = "name_value_column_mappings",
) -> dict[str, tuple[str | None, ...] | None]:
    """Normalise a name column to value columns mapping.

    Strings become one-element tuples and collections become tuples in their
    original order.  ``None`` values and ``None`` members are preserved so
    that callers can reject them with a precise message.
    """

    source = _require_mapping(mapping, label)
    parsed: dict[str, tuple[str | None, ...] | None] = {}
    for raw_key, raw_value in source.items():
        key = _require_key(raw_key, label)
        if raw_value is None:
            parsed[key] = None
        elif isinstance(raw_value, str):
            parsed[key] = (raw_value,)
        elif is_non_string_iterable(raw_value):
            members = tuple(raw_value)
            invalid = [m for m in members if m is not None and not isinstance(m, str)]
            if invalid:
                raise ConfigurationError(
                    f"{label}[{key!r}] may only contain strings, got {invalid!r}",
                    context={"mapping": label, "key": key},
                )
            parsed[key] = members
        else:
            raise ConfigurationError(
                f"{label}[{key!r}] must be a string or a list of strings",
                context={"mapping": label, "key": key, "type": type(raw_value).__name__},
            )
    return parsed


def flatten_collection(values: Iterable[Any]) -> list[Any]:
    """Flatten one level of nesting, keeping strings intact."""

    flattened: list[Any] = []
    for value in values:
        if is_non_string_iterable(value):
            flattened.extend(value)
        else:
            flattened.append(value)
    return flattened


def add_result(results: MutableMapping[str, list[Any]], key: str, value: Any) -> None:
    """Append ``value`` to the list stored under ``key``."""

    results.setdefault(key, []).append(value)
