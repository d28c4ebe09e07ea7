"""
Adaptation of repository query results.

The query executor is an external collaborator; this module defines the
shape of what it returns and the lazy iterators the resolver hands back
to callers:

    RowIterator           - rows as {column: python value}, forward-only
    NodeResourceIterator  - result nodes as resources
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    Iterator,
    Optional,
    Protocol,
    Sequence,
)

from .exceptions import RepositoryError, RowConversionWarning
from .resource import Resource
from .values import to_python_value

if TYPE_CHECKING:
    from ..services.resolver import ResourceResolver

logger = logging.getLogger(__name__)


class QueryRow(Protocol):
    def get_values(self) -> Sequence[Any]:
        """Values in column order. May raise RepositoryError."""
        ...


@dataclass
class QueryResult:
    """Result of a repository query."""
    column_names: Sequence[str]
    rows: Iterable[QueryRow] = field(default_factory=list)
    nodes: Iterable[Any] = field(default_factory=list)


class QueryExecutor(Protocol):
    def query(self, session: Any, query: str, language: str) -> QueryResult:
        """
        Execute a query against the session's repository.

        Raises:
            InvalidQueryError: If the query text is malformed
            RepositoryError: For any other repository failure
        """
        ...


class RowIterator:
    """
    Single-pass iterator converting query rows to plain dicts.

    Rows are converted one at a time as they are requested. A column that
    cannot be read or converted is left out of its row; the problem is
    recorded in `warnings`, logged, and passed to `on_warning` if given.
    Once exhausted, the iterator stays exhausted.
    """

    def __init__(
        self,
        column_names: Sequence[str],
        rows: Iterable[QueryRow],
        on_warning: Optional[Callable[[RowConversionWarning], None]] = None,
    ):
        self._column_names = tuple(column_names)
        self._rows: Optional[Iterator[QueryRow]] = iter(rows)
        self._on_warning = on_warning
        self._index = 0
        self.warnings: list[RowConversionWarning] = []

    @property
    def column_names(self) -> tuple[str, ...]:
        return self._column_names

    def __iter__(self) -> "RowIterator":
        return self

    def __next__(self) -> dict[str, Any]:
        if self._rows is None:
            raise StopIteration
        try:
            raw_row = next(self._rows)
        except StopIteration:
            self._rows = None
            raise

        index = self._index
        self._index += 1

        row: dict[str, Any] = {}
        try:
            values = raw_row.get_values()
        except RepositoryError as e:
            self._warn(RowConversionWarning(row_index=index, column=None, cause=e))
            return row

        for column, value in zip(self._column_names, values):
            try:
                row[column] = to_python_value(value)
            except RepositoryError as e:
                self._warn(RowConversionWarning(row_index=index, column=column, cause=e))
        return row

    def _warn(self, warning: RowConversionWarning) -> None:
        logger.warning(f"queryResources: {warning}")
        self.warnings.append(warning)
        if self._on_warning is not None:
            self._on_warning(warning)


def _node_path(node: Any) -> str:
    return node if isinstance(node, str) else node.path


class NodeResourceIterator:
    """
    Lazy iterator over the resources for a query's result nodes.

    Nodes that no provider returns a resource for are skipped.
    """

    def __init__(self, resolver: "ResourceResolver", nodes: Iterable[Any]):
        self._resolver = resolver
        self._nodes = iter(nodes)

    def __iter__(self) -> "NodeResourceIterator":
        return self

    def __next__(self) -> Resource:
        for node in self._nodes:
            path = _node_path(node)
            resource = self._resolver.get_resource(path)
            if resource is not None:
                return resource
            logger.debug(f"findResources: No resource for result node {path}")
        raise StopIteration
