"""Attribute folding: mapping helpers, folder, name/value rows and sources."""

from __future__ import annotations

from .folder import (
    AttributeRowFolder,
    AttributeRowFolderBuilder,
    AttributeValues,
    RawRow,
    fold_rows,
)
from .frames import name_value_frame_schema, rows_from_frame, validate_name_value_frame
from .multivalued import (
    add_result,
    flatten_collection,
    parse_attribute_to_attribute_mapping,
    parse_column_list_mapping,
)
from .name_value import NameValueRowBuilder
from .source import MultiRowAttributeSource, QueryExecutor

__all__ = [
    "AttributeRowFolder",
    "AttributeRowFolderBuilder",
    "AttributeValues",
    "RawRow",
    "fold_rows",
    "name_value_frame_schema",
    "rows_from_frame",
    "validate_name_value_frame",
    "add_result",
    "flatten_collection",
    "parse_attribute_to_attribute_mapping",
    "parse_column_list_mapping",
    "NameValueRowBuilder",
    "MultiRowAttributeSource",
    "QueryExecutor",
]
