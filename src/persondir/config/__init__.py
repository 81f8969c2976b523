"""Configuration models and loaders for persondir."""

from __future__ import annotations

from .loader import ENV_PREFIX, build_folder, load_config, load_raw_config
from .models import AttributeSourceConfig, LoggingConfig, PersonDirConfig

__all__ = [
    "ENV_PREFIX",
    "AttributeSourceConfig",
    "LoggingConfig",
    "PersonDirConfig",
    "build_folder",
    "load_config",
    "load_raw_config",
]
