"""Scalar conversions between JSON text and record values."""

from __future__ import annotations

import re
from datetime import UTC, datetime

from avro_json_mapper.schema_management.schema_models import SchemaType

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)[fFdD]?"
)
_INT_RANGE = (-(2**31), 2**31 - 1)
_LONG_RANGE = (-(2**63), 2**63 - 1)


def coerce(schema_type: SchemaType, value: object) -> object | None:
    """Best-effort parse of ``value`` into the Python value of ``schema_type``.

    Parse failures yield ``None`` instead of raising.
    """
    text = as_text(value)
    if text is None:
        return None
    try:
        if schema_type is SchemaType.STRING:
            return text
        if schema_type is SchemaType.INT:
            return _parse_integer(text, _INT_RANGE)
        if schema_type is SchemaType.LONG:
            return _parse_integer(text, _LONG_RANGE)
        if schema_type in (SchemaType.FLOAT, SchemaType.DOUBLE):
            return value if isinstance(value, float) else _parse_decimal(text)
        if schema_type is SchemaType.BOOLEAN:
            return text.strip().lower() == "true"
    except ValueError:
        return None
    return None


def parse_long(value: object) -> int:
    """Strictly parse a signed 64-bit integer.

    Raises:
      ValueError: If the value is missing, malformed or out of range.
    """
    text = as_text(value)
    if text is None:
        raise ValueError("Cannot parse a long from a missing value.")
    return _parse_integer(text, _LONG_RANGE)


def as_text(value: object) -> str | None:
    """Return the textual form of a JSON scalar node, ``None`` for non-scalars."""
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    return str(value)


def stringify(value: object) -> str:
    """Render a record value as the string written into the JSON document."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return format_instant(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def format_instant(value: datetime) -> str:
    """Format an instant as ISO-8601 UTC, e.g. ``2021-05-01T08:00:00Z``."""
    instant = value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)
    text = instant.strftime("%Y-%m-%dT%H:%M:%S")
    if instant.microsecond:
        if instant.microsecond % 1000 == 0:
            text += f".{instant.microsecond // 1000:03d}"
        else:
            text += f".{instant.microsecond:06d}"
    return f"{text}Z"


def _parse_integer(text: str, bounds: tuple[int, int]) -> int:
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"Not an integer: {text!r}")
    number = int(text)
    lower, upper = bounds
    if number < lower or number > upper:
        raise ValueError(f"Integer out of range: {text}")
    return number


def _parse_decimal(text: str) -> float:
    # Surrounding whitespace is tolerated; underscores and "inf"/"nan" spellings are not.
    candidate = text.strip()
    if not _DECIMAL_PATTERN.fullmatch(candidate):
        raise ValueError(f"Not a decimal number: {text!r}")
    return float(candidate.rstrip("fFdD"))
