"""Multi-row person attribute source backed by an external query executor."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from persondir.attributes.folder import AttributeRowFolder, AttributeValues
from persondir.core.log_events import LogEvents, emit
from persondir.core.logger import UnifiedLogger

__all__ = ["QueryExecutor", "MultiRowAttributeSource"]

logger = UnifiedLogger.get(__name__)


@runtime_checkable
class QueryExecutor(Protocol):
    """Run a query and return its rows in result-set order."""

    def execute(
        self, query: str, parameters: Mapping[str, Any]
    ) -> Iterable[Mapping[str, Any]]:
        ...


class MultiRowAttributeSource:
    """Resolve person attributes from a query returning one or more rows.

    The executor is responsible for connections and SQL; this class only
    materialises the rows it returns and folds them with ``folder``.  Errors
    raised by the executor propagate to the caller unchanged.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        query: str,
        folder: AttributeRowFolder,
        *,
        name: str = "multi_row",
    ) -> None:
        self._executor = executor
        self._query = query
        self._folder = folder
        self.name = name

    @property
    def query(self) -> str:
        return self._query

    @property
    def folder(self) -> AttributeRowFolder:
        return self._folder

    @property
    def possible_attribute_names(self) -> frozenset[str]:
        return self._folder.possible_attribute_names

    def get_user_attributes(self, parameters: Mapping[str, Any]) -> AttributeValues:
        with UnifiedLogger.scoped(
            source=self.name, component="source", operation="get_user_attributes"
        ):
            logger.debug(LogEvents.SOURCE_QUERY_START.value, parameters=sorted(parameters))
            try:
                rows = list(self._executor.execute(self._query, parameters))
            except Exception as exc:
                logger.error(
                    LogEvents.SOURCE_QUERY_ERROR.value,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                raise

            attributes = self._folder.fold_name_value_rows(rows)
            emit(logger, LogEvents.SOURCE_QUERY_FINISH, rows=len(rows), attributes=len(attributes))
        return attributes
