"""Configuration loading utilities."""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import ValidationError

from persondir.attributes.folder import AttributeRowFolder
from persondir.core.errors import ConfigurationError
from persondir.core.log_events import LogEvents
from persondir.core.logger import UnifiedLogger

from .models import AttributeSourceConfig, PersonDirConfig

__all__ = ["ENV_PREFIX", "load_config", "load_raw_config", "build_folder"]

ENV_PREFIX = "PERSONDIR__"

logger = UnifiedLogger.get(__name__)


def load_raw_config(path: str | Path) -> dict[str, Any]:
    """Read a YAML document and return it as a mapping."""

    resolved = Path(path).expanduser().resolve()
    if not resolved.exists():
        raise ConfigurationError(
            f"Configuration file not found: {resolved}", context={"path": str(resolved)}
        )
    try:
        with resolved.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Configuration file is not valid YAML: {resolved}", context={"path": str(resolved)}
        ) from exc

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"Configuration root must be a mapping: {resolved}", context={"path": str(resolved)}
        )
    return dict(cast(Mapping[str, Any], data))


def load_config(
    path: str | Path,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> PersonDirConfig:
    """Load, override and validate a configuration file.

    Environment variables named ``PERSONDIR__SECTION__KEY`` override scalar
    values, e.g. ``PERSONDIR__LOGGING__LEVEL=DEBUG``.  ``overrides`` holds
    dotted keys (``logging.level``) and is applied last.
    """

    payload = load_raw_config(path)
    env_overrides = _collect_env_overrides(os.environ if env is None else env, prefix=ENV_PREFIX)
    if env_overrides:
        logger.debug(
            LogEvents.CONFIG_ENV_OVERRIDE.value,
            component="config",
            operation="load",
            keys=sorted(env_overrides),
        )
        payload = _deep_merge(payload, env_overrides)
    if overrides:
        dotted_pairs = [
            (tuple(key.split(".")), _coerce_value(value)) for key, value in overrides.items()
        ]
        payload = _deep_merge(payload, _build_tree(dotted_pairs))

    try:
        config = PersonDirConfig.model_validate(payload)
    except ValidationError as exc:
        logger.warning(
            LogEvents.CONFIG_LOAD_INVALID.value,
            component="config",
            operation="load",
            path=str(path),
            errors=exc.error_count(),
        )
        raise ConfigurationError(
            f"Invalid configuration in {path}: {exc}",
            context={"path": str(path), "errors": exc.errors(include_url=False)},
        ) from exc

    logger.debug(
        LogEvents.CONFIG_LOAD_FINISH.value,
        source=config.source.name,
        component="config",
        operation="load",
        path=str(path),
    )
    return config


def build_folder(config: AttributeSourceConfig | PersonDirConfig) -> AttributeRowFolder:
    """Build an :class:`AttributeRowFolder` from a source configuration."""

    source = config.source if isinstance(config, PersonDirConfig) else config
    return (
        AttributeRowFolder.builder()
        .with_attribute_name_mappings(source.attribute_name_mappings)
        .with_name_value_column_mappings(source.name_value_column_mappings)
        .build()
    )


def _coerce_value(value: Any) -> Any:
    """Best-effort conversion of environment override values."""
    if isinstance(value, str):
        try:
            return yaml.safe_load(value)
        except yaml.YAMLError:
            return value
    return value


def _deep_merge(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge two mapping-like objects."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(
                cast(Mapping[str, Any], merged[key]),
                cast(Mapping[str, Any], value),
            )
        else:
            merged[key] = value
    return merged


def _build_tree(pairs: Sequence[tuple[Sequence[str], Any]]) -> dict[str, Any]:
    tree: dict[str, Any] = {}
    for parts, value in pairs:
        current: MutableMapping[str, Any] = tree
        for part in parts[:-1]:
            existing = current.get(part)
            if not isinstance(existing, MutableMapping):
                existing = {}
                current[part] = existing
            current = existing
        current[parts[-1]] = value
    return tree


def _collect_env_overrides(env: Mapping[str, str], *, prefix: str) -> dict[str, Any]:
    """Collect prefixed environment variables into a nested override tree."""
    pairs: list[tuple[Sequence[str], Any]] = []
    for key, raw_value in env.items():
        if not key.startswith(prefix):
            continue
        parts = [segment.strip().lower() for segment in key[len(prefix) :].split("__") if segment.strip()]
        if parts:
            pairs.append((tuple(parts), _coerce_value(raw_value)))
    return _build_tree(pairs)
