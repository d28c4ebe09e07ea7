"""
Conversion of repository-native values to plain Python scalars.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, NamedTuple, Union

from .exceptions import ValueConversionError


class PropertyType(Enum):
    """Value types stored by the repository."""
    STRING = "String"
    LONG = "Long"
    DOUBLE = "Double"
    DECIMAL = "Decimal"
    BOOLEAN = "Boolean"
    DATE = "Date"
    BINARY = "Binary"
    NAME = "Name"
    PATH = "Path"
    REFERENCE = "Reference"


class RepositoryValue(NamedTuple):
    """A typed value as stored by the repository (raw is its wire form)."""
    type: PropertyType
    raw: Union[str, bytes]


def _to_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _to_datetime(raw: str) -> datetime:
    # fromisoformat() does not accept a trailing "Z" on older interpreters
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw)


_CONVERTERS = {
    PropertyType.LONG: int,
    PropertyType.DOUBLE: float,
    PropertyType.DECIMAL: Decimal,
    PropertyType.BOOLEAN: _to_bool,
    PropertyType.DATE: _to_datetime,
}


def to_python_value(value: Any) -> Any:
    """
    Convert a RepositoryValue to a Python scalar.

    Anything that is not a RepositoryValue is returned unchanged.

    Raises:
        ValueConversionError: If the raw value does not parse as its type
    """
    if not isinstance(value, RepositoryValue):
        return value

    if value.type is PropertyType.BINARY:
        return value.raw if isinstance(value.raw, bytes) else value.raw.encode("utf-8")

    raw = value.raw
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        converter = _CONVERTERS.get(value.type)
        if converter is None:
            return raw
        return converter(raw)
    except (ValueError, InvalidOperation) as e:
        raise ValueConversionError(
            f"Cannot convert {value.type.value} value {raw!r}: {e}",
            context={"type": value.type.value},
        ) from e
