"""
Exceptions for the resource resolver.

Resolution, lookup, query and configuration failures derive from
ResolverError. The context dict names the path, query, mapping or config
file involved and is appended to the message as "[key=value, ...]".

AccessDeniedError is not a ResolverError and is never wrapped.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class ResolverError(Exception):
    """
    A resolver operation failed.

    Args:
        message: What went wrong
        context: The path, query or configuration entry involved
    """

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx}]"
        return self.message


class ResolutionError(ResolverError):
    """Any failure other than access denial while resolving a path."""

    def __init__(self, message: str, path: str, cause: Optional[BaseException] = None):
        super().__init__(message, context={"path": path})
        self.path = path
        self.cause = cause


class QuerySyntaxError(ResolverError):
    """The query text was rejected by the repository as malformed."""

    def __init__(
        self,
        message: str,
        query: str,
        language: str,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, context={"query": query, "language": language})
        self.query = query
        self.language = language
        self.cause = cause


class ConfigurationError(ResolverError):
    """Resolver configuration could not be loaded or parsed."""


class RepositoryError(ResolverError):
    """Raised by the backing repository (session, query executor)."""


class InvalidQueryError(RepositoryError):
    """Raised by a query executor for syntactically invalid queries."""


class ValueConversionError(RepositoryError):
    """A repository-native value could not be converted to a Python scalar."""


class AccessDeniedError(PermissionError):
    """An item exists but is not readable by the current session."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class RowConversionWarning:
    """
    Non-fatal problem converting a single query result row.

    Recorded (and logged) by the row iterator; the row is still yielded
    with the columns that could be converted.
    """
    row_index: int
    column: Optional[str]
    cause: BaseException

    def __str__(self) -> str:
        where = f"column {self.column!r}" if self.column else "row values"
        return f"Row {self.row_index}: problem accessing {where}: {self.cause}"
