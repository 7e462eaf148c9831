"""
String to typed value conversion.

cgroup v2 writes the literal ``max`` where a limit is unbounded; integer and
float conversions map it to the largest value of the target type. All
conversions are strict: trailing garbage or a non-numeric token is an error,
never a silent zero.
"""

import math
import re
import sys
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional

from ..models.table import ColumnType
from ..validation import MalformedDataError

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
UINT64_MAX = 2 ** 64 - 1
FLOAT64_MAX = sys.float_info.max

MAX_SENTINEL = "max"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_SIZE_RE = re.compile(r"\s*([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)\s*([A-Za-z]*)\s*")

# pg_size_bytes() units, binary multiples, matched case-insensitively
_SIZE_UNITS: Dict[str, int] = {
    "": 1,
    "b": 1,
    "bytes": 1,
    "kb": 1024,
    "mb": 1024 ** 2,
    "gb": 1024 ** 3,
    "tb": 1024 ** 4,
    "pb": 1024 ** 5,
}


def is_max_sentinel(token: str) -> bool:
    return token.lower() == MAX_SENTINEL


def _parse_integer(token: str, low: int, high: int, type_name: str) -> int:
    if not _INTEGER_RE.fullmatch(token):
        raise MalformedDataError(f'invalid input syntax for type {type_name}: "{token}"')
    value = int(token)
    if value < low or value > high:
        raise MalformedDataError(f'value "{token}" is out of range for type {type_name}')
    return value


def to_int64(token: str) -> int:
    """
    Convert a token to a signed 64-bit integer.

    Examples:
        >>> to_int64("max") == INT64_MAX
        True
        >>> to_int64("-42")
        -42

    Raises:
        MalformedDataError: On non-numeric content, trailing garbage or overflow
    """
    if is_max_sentinel(token):
        return INT64_MAX
    return _parse_integer(token, INT64_MIN, INT64_MAX, "bigint")


def to_int32(token: str) -> int:
    return _parse_integer(token, INT32_MIN, INT32_MAX, "integer")


def to_uint64(token: str) -> int:
    """Convert an unsigned kernel counter. ``max`` maps to the uint64 maximum."""
    if is_max_sentinel(token):
        return UINT64_MAX
    return _parse_integer(token, 0, UINT64_MAX, "numeric")


def to_float64(token: str) -> float:
    """
    Convert a token to a double.

    Raises:
        MalformedDataError: On non-numeric content or a value out of range
    """
    if is_max_sentinel(token):
        return FLOAT64_MAX
    # float() accepts digit separators, the kernel never writes them
    if "_" in token:
        raise MalformedDataError(f'invalid input syntax for type double precision: "{token}"')
    try:
        value = float(token)
    except ValueError:
        raise MalformedDataError(f'invalid input syntax for type double precision: "{token}"')
    if math.isinf(value) and token.strip().lstrip("+-").lower() not in ("inf", "infinity"):
        raise MalformedDataError(f'"{token}" is out of range for type double precision')
    return value


def to_bool(token: str) -> bool:
    lowered = token.strip().lower()
    if lowered in ("1", "t", "true", "y", "yes", "on"):
        return True
    if lowered in ("0", "f", "false", "n", "no", "off"):
        return False
    raise MalformedDataError(f'invalid input syntax for type boolean: "{token}"')


def human_size_to_bytes(value: str, unit: str = "") -> int:
    """
    Convert a human readable size such as ``1024 kB`` to bytes.

    Units are binary multiples (1 kB == 1024 bytes), matched case
    insensitively; fractional results round half away from zero.

    Examples:
        >>> human_size_to_bytes("1024", "kB")
        1048576
        >>> human_size_to_bytes("1.5", "kb")
        1536

    Raises:
        MalformedDataError: On an unparsable number, an unknown unit or overflow
    """
    text = f"{value} {unit}" if unit else str(value)
    match = _SIZE_RE.fullmatch(text)
    if not match:
        raise MalformedDataError(f'invalid size: "{text}"')
    number, suffix = match.groups()
    multiplier = _SIZE_UNITS.get(suffix.lower())
    if multiplier is None:
        raise MalformedDataError(
            f'invalid size: "{text}"; valid units are "bytes", "B", "kB", "MB", "GB", "TB", and "PB"'
        )
    try:
        result = (Decimal(number) * multiplier).to_integral_value(rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise MalformedDataError(f'invalid size: "{text}"')
    if result < INT64_MIN or result > INT64_MAX:
        raise MalformedDataError(f'bigint out of range: "{text}"')
    return int(result)


def _to_text_array(token: Any) -> List[str]:
    return list(token)


def _to_bigint_array(token: Any) -> List[int]:
    return [to_int64(element) for element in token]


_COERCERS: Dict[ColumnType, Callable[[Any], Any]] = {
    ColumnType.TEXT: str,
    ColumnType.INTEGER: to_int32,
    ColumnType.BIGINT: to_int64,
    ColumnType.NUMERIC: to_uint64,
    ColumnType.FLOAT8: to_float64,
    ColumnType.BOOL: to_bool,
    ColumnType.TEXT_ARRAY: _to_text_array,
    ColumnType.BIGINT_ARRAY: _to_bigint_array,
}


def coerce_value(token: Optional[Any], column_type: ColumnType) -> Optional[Any]:
    """
    Coerce one parsed token to ``column_type``. None stays None (SQL null).

    Array column types take a sequence of string tokens.
    """
    if token is None:
        return None
    return _COERCERS[column_type](token)
