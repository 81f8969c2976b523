"""pandas adapters for feeding query results into the folder."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import pandas as pd
import pandera.errors
from pandera.pandas import Column, DataFrameSchema

from persondir.core.errors import RowLayoutError
from persondir.core.log_events import LogEvents
from persondir.core.logger import UnifiedLogger

__all__ = ["rows_from_frame", "name_value_frame_schema", "validate_name_value_frame"]

logger = UnifiedLogger.get(__name__)


def rows_from_frame(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """Return ``frame`` as a list of row dictionaries.

    Row order and column order are preserved; missing cells become ``None``.
    """

    if frame.empty:
        return []
    cleaned = frame.astype(object).where(pd.notna(frame), None)
    return [
        {str(column): value for column, value in record.items()}
        for record in cleaned.to_dict(orient="records")
    ]


def name_value_frame_schema(
    name_value_column_mappings: Mapping[str, Sequence[str]],
) -> DataFrameSchema:
    """Build a schema requiring every configured name and value column."""

    columns: dict[str, Column] = {}
    for name_column, value_columns in name_value_column_mappings.items():
        columns[name_column] = Column(object, nullable=True, required=True)
        for value_column in value_columns:
            columns.setdefault(value_column, Column(object, nullable=True, required=True))
    return DataFrameSchema(
        columns,
        strict=False,
        coerce=False,
        ordered=False,
        name="NameValueRows",
    )


def validate_name_value_frame(
    frame: pd.DataFrame,
    name_value_column_mappings: Mapping[str, Sequence[str]],
) -> pd.DataFrame:
    """Validate ``frame`` against the name/value layout.

    Raises :class:`RowLayoutError` listing the columns that failed.
    """

    schema = name_value_frame_schema(name_value_column_mappings)
    try:
        return schema.validate(frame.astype(object), lazy=True)
    except pandera.errors.SchemaErrors as exc:
        failure_cases = exc.failure_cases
        failed = tuple(
            sorted({str(case) for case in failure_cases["failure_case"].tolist() if case is not None})
        )
        logger.warning(
            LogEvents.FRAME_LAYOUT_INVALID.value,
            component="frames",
            operation="validate",
            columns=list(failed),
        )
        raise RowLayoutError(
            f"Frame does not match the name/value layout: {', '.join(failed)}",
            columns=failed,
        ) from exc
