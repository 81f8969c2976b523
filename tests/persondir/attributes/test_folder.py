"""Unit tests for :mod:`persondir.attributes.folder`."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

import pytest

from persondir.attributes.folder import AttributeRowFolder, fold_rows
from persondir.core.errors import ConfigurationError


@pytest.mark.unit
def test_fold_maps_and_accumulates_person_rows(
    mail_folder: AttributeRowFolder, ldap_style_rows: list[dict[str, Any]]
) -> None:
    result = mail_folder.fold(ldap_style_rows)

    assert result == {
        "lastName": ["Smith", "Smith"],
        "email": ["a@x.com", "b@x.com"],
        "mailAddress": ["a@x.com", "b@x.com"],
    }


@pytest.mark.unit
def test_fold_passes_unmapped_columns_through(mail_folder: AttributeRowFolder) -> None:
    result = mail_folder.fold([{"uid": "jdoe", "sn": "Doe"}, {"uid": "jdoe2"}])

    assert result["uid"] == ["jdoe", "jdoe2"]
    assert result["lastName"] == ["Doe"]


@pytest.mark.unit
def test_fold_drops_columns_mapped_to_empty_set() -> None:
    folder = (
        AttributeRowFolder.builder()
        .with_attribute_name_mappings({"password_hash": [], "sn": "lastName"})
        .build()
    )

    result = folder.fold([{"password_hash": "xyz", "sn": "Doe"}])

    assert result == {"lastName": ["Doe"]}
    assert "password_hash" not in folder.possible_attribute_names


@pytest.mark.unit
def test_fold_column_mapped_to_none_keeps_its_name() -> None:
    folder = AttributeRowFolder.builder().with_attribute_name_mappings({"uid": None}).build()

    assert folder.fold([{"uid": "jdoe"}]) == {"uid": ["jdoe"]}
    assert folder.possible_attribute_names == frozenset({"uid"})


@pytest.mark.unit
def test_fold_interleaves_columns_sharing_a_target() -> None:
    folder = (
        AttributeRowFolder.builder()
        .with_attribute_name_mappings({"work_phone": "phone", "home_phone": "phone"})
        .build()
    )

    result = folder.fold(
        [
            {"work_phone": "w1", "home_phone": "h1"},
            {"home_phone": "h2", "work_phone": "w2"},
        ]
    )

    assert result == {"phone": ["w1", "h1", "h2", "w2"]}


@pytest.mark.unit
def test_fold_keeps_duplicate_and_none_values(mail_folder: AttributeRowFolder) -> None:
    result = mail_folder.fold([{"sn": None}, {"sn": None}, {"sn": "Doe"}])

    assert result == {"lastName": [None, None, "Doe"]}


@pytest.mark.unit
def test_fold_empty_rows_returns_new_empty_mapping(mail_folder: AttributeRowFolder) -> None:
    first = mail_folder.fold([])
    second = mail_folder.fold(iter(()))

    assert first == {}
    assert second == {}
    assert first is not second


@pytest.mark.unit
def test_fold_accepts_generators(mail_folder: AttributeRowFolder) -> None:
    rows = ({"sn": name} for name in ("A", "B"))

    assert mail_folder.fold(rows) == {"lastName": ["A", "B"]}


@pytest.mark.unit
def test_fold_result_is_owned_by_caller(
    mail_folder: AttributeRowFolder, ldap_style_rows: list[dict[str, Any]]
) -> None:
    first = mail_folder.fold(ldap_style_rows)
    first["lastName"].append("mutated")

    assert mail_folder.fold(ldap_style_rows)["lastName"] == ["Smith", "Smith"]


@pytest.mark.unit
def test_fold_rows_function_matches_folder(
    mail_folder: AttributeRowFolder, ldap_style_rows: list[dict[str, Any]]
) -> None:
    assert fold_rows(ldap_style_rows, mail_folder.attribute_name_mappings) == mail_folder.fold(
        ldap_style_rows
    )


@pytest.mark.unit
def test_possible_attribute_names_is_flattened_union(mail_folder: AttributeRowFolder) -> None:
    assert mail_folder.possible_attribute_names == frozenset({"lastName", "email", "mailAddress"})


@pytest.mark.unit
def test_unconfigured_folder_is_empty_pass_through() -> None:
    folder = AttributeRowFolder.builder().build()

    assert folder.possible_attribute_names == frozenset()
    assert folder.attribute_name_mappings == {}
    assert folder.fold([{"a": 1}]) == {"a": [1]}


@pytest.mark.unit
def test_empty_string_key_is_rejected() -> None:
    builder = AttributeRowFolder.builder()

    with pytest.raises(ConfigurationError, match="empty keys"):
        builder.with_attribute_name_mappings({"": "nobody", "sn": "lastName"})


@pytest.mark.unit
def test_none_attribute_mapping_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        AttributeRowFolder.builder().with_attribute_name_mappings(None)


@pytest.mark.unit
@pytest.mark.parametrize(
    "mapping",
    [
        None,
        {"attr_name": None},
        {"attr_name": ["attr_value", None]},
    ],
)
def test_null_name_value_mappings_are_rejected(mapping: Any) -> None:
    with pytest.raises(ConfigurationError):
        AttributeRowFolder.builder().with_name_value_column_mappings(mapping)


@pytest.mark.unit
def test_name_value_mappings_are_normalised_to_tuples() -> None:
    folder = (
        AttributeRowFolder.builder()
        .with_name_value_column_mappings({"attr_name": "attr_value", "key": ["v1", "v2"]})
        .build()
    )

    assert dict(folder.name_value_column_mappings) == {
        "attr_name": ("attr_value",),
        "key": ("v1", "v2"),
    }
    assert folder.uses_name_value_layout


@pytest.mark.unit
def test_built_folder_is_immutable(mail_folder: AttributeRowFolder) -> None:
    assert isinstance(mail_folder.attribute_name_mappings, MappingProxyType)
    with pytest.raises(TypeError):
        mail_folder.attribute_name_mappings["new"] = frozenset({"x"})  # type: ignore[index]
    with pytest.raises(AttributeError):
        mail_folder.possible_attribute_names = frozenset()  # type: ignore[misc]


@pytest.mark.unit
def test_builder_changes_do_not_leak_into_built_folder() -> None:
    builder = AttributeRowFolder.builder().with_attribute_name_mappings({"sn": "lastName"})
    folder = builder.build()

    builder.with_attribute_name_mappings({"sn": "surname"})

    assert folder.fold([{"sn": "Doe"}]) == {"lastName": ["Doe"]}
    assert builder.build().fold([{"sn": "Doe"}]) == {"surname": ["Doe"]}


@pytest.mark.unit
def test_fold_name_value_rows_without_layout_folds_directly(
    mail_folder: AttributeRowFolder, ldap_style_rows: list[dict[str, Any]]
) -> None:
    assert mail_folder.fold_name_value_rows(ldap_style_rows) == mail_folder.fold(ldap_style_rows)


@pytest.mark.unit
def test_fold_name_value_rows_applies_attribute_mapping() -> None:
    folder = (
        AttributeRowFolder.builder()
        .with_attribute_name_mappings({"mail": "email"})
        .with_name_value_column_mappings({"attr": "val"})
        .build()
    )

    result = folder.fold_name_value_rows(
        [
            {"attr": "mail", "val": "a@x"},
            {"attr": "phone", "val": "555"},
            {"attr": "mail", "val": "b@x"},
        ]
    )

    assert result == {"email": ["a@x", "b@x"], "phone": ["555"]}
