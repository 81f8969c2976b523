"""Unit tests for multi-valued mapping helpers."""

from __future__ import annotations

import pytest

from persondir.attributes.multivalued import (
    add_result,
    flatten_collection,
    parse_attribute_to_attribute_mapping,
    parse_column_list_mapping,
)
from persondir.core.errors import ConfigurationError


@pytest.mark.unit
def test_parse_attribute_mapping_normalises_every_value_form() -> None:
    parsed = parse_attribute_to_attribute_mapping(
        {
            "sn": "lastName",
            "mail": ["email", "mailAddress"],
            "uid": None,
            "ignored": [],
            "cn": ("commonName", "commonName"),
        }
    )

    assert parsed == {
        "sn": frozenset({"lastName"}),
        "mail": frozenset({"email", "mailAddress"}),
        "uid": frozenset({"uid"}),
        "ignored": frozenset(),
        "cn": frozenset({"commonName"}),
    }


@pytest.mark.unit
def test_parse_attribute_mapping_rejects_none() -> None:
    with pytest.raises(ConfigurationError, match="may not be None"):
        parse_attribute_to_attribute_mapping(None)


@pytest.mark.unit
@pytest.mark.parametrize(
    "mapping",
    [
        {1: "one"},
        {"sn": 42},
        {"sn": ["lastName", 7]},
    ],
)
def test_parse_attribute_mapping_rejects_non_string_entries(mapping: dict) -> None:
    with pytest.raises(ConfigurationError):
        parse_attribute_to_attribute_mapping(mapping)


@pytest.mark.unit
def test_parse_column_list_mapping_keeps_order_and_nulls() -> None:
    parsed = parse_column_list_mapping(
        {"attr_name": ["value_b", "value_a"], "other": "value", "broken": None, "partial": ["v", None]}
    )

    assert parsed == {
        "attr_name": ("value_b", "value_a"),
        "other": ("value",),
        "broken": None,
        "partial": ("v", None),
    }


@pytest.mark.unit
def test_flatten_collection_flattens_one_level() -> None:
    assert flatten_collection([{"a"}, "b", ["c", "d"], ()]) == ["a", "b", "c", "d"]


@pytest.mark.unit
def test_add_result_appends_in_order() -> None:
    results: dict[str, list[object]] = {}

    add_result(results, "mail", "a@x.com")
    add_result(results, "mail", "b@x.com")
    add_result(results, "mail", "a@x.com")

    assert results == {"mail": ["a@x.com", "b@x.com", "a@x.com"]}
