"""
Value coercion

Converts raw source values into values a destination column will accept.
Malformed input never raises: numeric garbage becomes NaN and unparseable
timestamps fall back to the epoch floor.
"""

import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqldb_migration.core.schema import ABSENT, ColumnDescriptor, ColumnType


NAN = float("nan")

TIMESTAMP_FLOOR = datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?))")
# whole-string numbers only; nan, inf and digit separators are not numbers here
_DECIMAL_LITERAL = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_HEX_LITERAL = re.compile(r"^0[xX][0-9a-fA-F]+$")


def coerce(column: ColumnDescriptor, value: Any = ABSENT) -> Any:
    """Convert a source value into a value for ``column``.

    Args:
        column: Destination column descriptor.
        value: Raw source value; ``ABSENT`` when the row has no such column.

    Returns:
        The destination-ready value.
    """
    if value is ABSENT or (value is None and not column.nullable):
        return column.default

    if value is None:
        return None

    if column.type is ColumnType.INTEGER:
        return parse_int(value)
    if column.type in (ColumnType.FLOAT, ColumnType.DECIMAL):
        return parse_float(value)
    if column.type is ColumnType.BOOLEAN:
        return to_flag(value)
    if column.type is ColumnType.NATIVE_BOOLEAN:
        return bool(to_flag(value))
    if column.type is ColumnType.TIMESTAMP:
        return to_timestamp(value)
    return value


def parse_int(value: Any):
    """Parse the leading integer of a value, or NaN when there is none."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        if not math.isfinite(value):
            return NAN
        return int(value)
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        if match:
            return int(match.group(1))
    return NAN


def parse_float(value: Any):
    """Parse the leading float literal of a value, or NaN when there is none."""
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if match:
            literal = match.group(1).replace("Infinity", "inf")
            return float(literal)
    return NAN


def _loose_number(value: Any) -> Optional[float]:
    if isinstance(value, (bool, int, float, Decimal)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if _DECIMAL_LITERAL.match(text):
            return float(text)
        if _HEX_LITERAL.match(text):
            return float(int(text, 16))
    return None


def to_flag(value: Any) -> int:
    """Normalize a boolean-like value to 1 or 0."""
    if value is True or value == "true":
        return 1
    if value is False or value == "false":
        return 0

    number = _loose_number(value)
    if number is not None and math.isnan(number):
        return 0
    if number == 1:
        return 1
    if number == 0:
        return 0
    return 1 if value else 0


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        # epoch milliseconds
        try:
            return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        # naive values are local time
        try:
            parsed = parsed.astimezone()
        except (OverflowError, OSError, ValueError):
            return None
    return parsed


def to_timestamp(value: Any) -> str:
    """Format a value as a local ``YYYY-MM-DD HH:MM:SS`` string, never before the floor."""
    parsed = _parse_datetime(value)
    if parsed is None or parsed < TIMESTAMP_FLOOR:
        parsed = TIMESTAMP_FLOOR
    return parsed.astimezone().strftime(TIMESTAMP_FORMAT)
