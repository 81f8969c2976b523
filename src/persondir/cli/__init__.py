"""Command line interface for folding person attribute rows."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import typer

from persondir.attributes.folder import AttributeRowFolder, RawRow
from persondir.attributes.frames import rows_from_frame, validate_name_value_frame
from persondir.config import build_folder, load_config
from persondir.config.models import PersonDirConfig
from persondir.core.errors import PersonDirError
from persondir.core.log_events import LogEvents, emit
from persondir.core.logger import LogConfig, LogFormat, UnifiedLogger

__all__ = ["app", "run", "read_rows", "ExitCode"]


class ExitCode(int):
    """Exit codes for the persondir CLI."""

    OK = 0
    CONFIG_ERROR = 1
    IO_ERROR = 2


CONFIG_OPTION = typer.Option(
    ...,
    "--config",
    "-c",
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
    resolve_path=True,
    help="Path to the YAML configuration file.",
)

app = typer.Typer(
    name="persondir",
    help="Fold multi-row query results into person attributes.",
    add_completion=False,
)


def _parse_override_args(values: list[str]) -> dict[str, str]:
    assignments: dict[str, str] = {}
    for item in values:
        if "=" not in item:
            raise typer.BadParameter("Overrides must be in KEY=VALUE format")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter("Override key must not be empty")
        assignments[key] = value
    return assignments


def _load(config: Path, overrides: list[str]) -> tuple[PersonDirConfig, AttributeRowFolder]:
    UnifiedLogger.configure(LogConfig())
    try:
        config_model = load_config(config, overrides=_parse_override_args(overrides))
        folder = build_folder(config_model)
    except PersonDirError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR) from exc

    UnifiedLogger.configure(
        LogConfig(
            level=config_model.logging.level,
            format=LogFormat(config_model.logging.format),
        )
    )
    UnifiedLogger.bind(source=config_model.source.name, component="cli")
    return config_model, folder


def read_rows(path: Path) -> list[RawRow]:
    """Read a CSV, JSON or JSON lines file into a list of rows.

    JSON records are returned as they were written, so a key missing from one
    record stays missing.  CSV rows carry every column, with empty cells as
    ``None``.
    """

    suffix = path.suffix.lower()
    if suffix == ".csv":
        return rows_from_frame(pd.read_csv(path, dtype=object))
    if suffix == ".json":
        with path.open("r", encoding="utf-8") as handle:
            records = json.load(handle)
        if not isinstance(records, list):
            raise ValueError("JSON rows file must contain an array of objects")
    elif suffix in {".jsonl", ".ndjson"}:
        with path.open("r", encoding="utf-8") as handle:
            records = [json.loads(line) for line in handle if line.strip()]
    else:
        raise ValueError(f"Unsupported rows file type: {path.suffix or path.name}")

    if not all(isinstance(record, dict) for record in records):
        raise ValueError("Every JSON row must be an object")
    return records


@app.command("fold")
def fold(
    rows_path: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        help="CSV, JSON or JSON lines file with one query result row per record.",
    ),
    config: Path = CONFIG_OPTION,
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        dir_okay=False,
        resolve_path=True,
        help="Write the folded attributes here instead of stdout.",
    ),
    overrides: list[str] = typer.Option(
        [], "--set", "-s", help="Override configuration values using dotted paths (KEY=VALUE)"
    ),
) -> None:
    """Fold the rows in ROWS_PATH into an attribute name to values mapping."""

    _, folder = _load(config, overrides)
    log = UnifiedLogger.get(__name__)

    with UnifiedLogger.scoped(operation="fold"):
        try:
            rows = read_rows(rows_path)
        except (OSError, ValueError) as exc:
            log.error(LogEvents.CLI_COMMAND_ERROR.value, error=str(exc), path=str(rows_path))
            typer.echo(f"Failed to read rows: {exc}", err=True)
            raise typer.Exit(code=ExitCode.IO_ERROR) from exc

        if folder.uses_name_value_layout and rows:
            try:
                validate_name_value_frame(
                    pd.DataFrame.from_records(rows), folder.name_value_column_mappings
                )
            except PersonDirError as exc:
                typer.echo(str(exc), err=True)
                raise typer.Exit(code=ExitCode.CONFIG_ERROR) from exc

        attributes = folder.fold_name_value_rows(rows)
        payload = json.dumps(attributes, ensure_ascii=False, indent=2, default=str)

        if output is None:
            typer.echo(payload)
        else:
            try:
                output.parent.mkdir(parents=True, exist_ok=True)
                output.write_text(payload + "\n", encoding="utf-8")
            except OSError as exc:
                typer.echo(f"Failed to write outputs: {exc}", err=True)
                raise typer.Exit(code=ExitCode.IO_ERROR) from exc

        emit(
            log,
            LogEvents.CLI_FOLD_FINISH,
            rows=len(rows),
            attributes=len(attributes),
            output=str(output) if output is not None else "stdout",
        )


@app.command("attributes")
def attributes(
    config: Path = CONFIG_OPTION,
    overrides: list[str] = typer.Option(
        [], "--set", "-s", help="Override configuration values using dotted paths (KEY=VALUE)"
    ),
) -> None:
    """List the attribute names the configured mapping can produce."""

    _, folder = _load(config, overrides)
    for name in sorted(folder.possible_attribute_names):
        typer.echo(name)


def run() -> None:
    """Console script entry point."""
    app()
