"""Configuration models for persondir attribute sources."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from persondir.core.logger import LogFormat

__all__ = ["LoggingConfig", "AttributeSourceConfig", "PersonDirConfig"]


class LoggingConfig(BaseModel):
    """Structured logging configuration."""

    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="INFO", description="Log level for UnifiedLogger.")
    format: str = Field(
        default="json",
        description="Log format (json, key_value).",
    )

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        """Normalise the level name and reject names unknown to ``logging``."""
        normalized = value.strip().upper()
        if normalized not in logging.getLevelNamesMapping():
            allowed = ", ".join(sorted(logging.getLevelNamesMapping()))
            msg = f"logging.level must be one of: {allowed}"
            raise ValueError(msg)
        return normalized

    @field_validator("format")
    @classmethod
    def _validate_format(cls, value: str) -> str:
        """Normalise the format name and reject unsupported renderers."""
        normalized = value.strip().lower()
        try:
            return LogFormat(normalized).value
        except ValueError:
            allowed = ", ".join(item.value for item in LogFormat)
            msg = f"logging.format must be one of: {allowed}"
            raise ValueError(msg) from None


class AttributeSourceConfig(BaseModel):
    """Static configuration of a multi-row attribute source."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(default="multi_row", min_length=1, description="Source identifier used in logs.")
    query: str | None = Field(
        default=None,
        description="Query handed to the executor; unused when rows are read from files.",
    )
    attribute_name_mappings: dict[str, str | list[str] | None] = Field(
        default_factory=dict,
        description=(
            "Column name to exposed attribute name(s). A null value exposes the "
            "column under its own name, an empty list drops the column."
        ),
    )
    name_value_column_mappings: dict[str, str | list[str | None] | None] = Field(
        default_factory=dict,
        description="Name column to value column(s) for name/value row layouts.",
    )


class PersonDirConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(extra="forbid")

    source: AttributeSourceConfig = Field(default_factory=AttributeSourceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
