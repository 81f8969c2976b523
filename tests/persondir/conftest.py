"""Shared pytest fixtures for persondir tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import yaml

from persondir.attributes.folder import AttributeRowFolder
from persondir.core.logger import LogConfig, UnifiedLogger


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None, None, None]:
    """Route structured events through stdlib logging at WARNING level."""

    UnifiedLogger.configure(LogConfig(level="WARNING"))
    UnifiedLogger.reset()
    yield
    UnifiedLogger.reset()


@pytest.fixture
def ldap_style_rows() -> list[dict[str, Any]]:
    """Two result rows for one person with two mail addresses."""

    return [
        {"sn": "Smith", "mail": "a@x.com"},
        {"sn": "Smith", "mail": "b@x.com"},
    ]


@pytest.fixture
def mail_folder() -> AttributeRowFolder:
    return (
        AttributeRowFolder.builder()
        .with_attribute_name_mappings({"sn": "lastName", "mail": {"email", "mailAddress"}})
        .build()
    )


@pytest.fixture
def write_config(tmp_path: Path) -> Any:
    """Return a helper writing a YAML configuration under ``tmp_path``."""

    def _write(payload: dict[str, Any], name: str = "persondir.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
        return path

    return _write
