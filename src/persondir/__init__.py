"""Public interface for persondir attribute folding."""

from __future__ import annotations

from persondir.attributes import (
    AttributeRowFolder,
    AttributeRowFolderBuilder,
    AttributeValues,
    MultiRowAttributeSource,
    NameValueRowBuilder,
    QueryExecutor,
    RawRow,
    fold_rows,
)
from persondir.config import PersonDirConfig, build_folder, load_config
from persondir.core.errors import ConfigurationError, PersonDirError, RowLayoutError

__all__ = [
    "AttributeRowFolder",
    "AttributeRowFolderBuilder",
    "AttributeValues",
    "MultiRowAttributeSource",
    "NameValueRowBuilder",
    "QueryExecutor",
    "RawRow",
    "fold_rows",
    "PersonDirConfig",
    "build_folder",
    "load_config",
    "ConfigurationError",
    "PersonDirError",
    "RowLayoutError",
]

__version__ = "0.1.0"
