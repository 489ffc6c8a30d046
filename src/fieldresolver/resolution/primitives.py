"""Coercion of raw text into primitive kinds.

Integers are parsed in base 10 only and checked against the destination's bit
width. Unsigned widths take no sign at all, not even ``+``. Floats accept
decimal and scientific notation plus the usual infinity and NaN spellings.
Booleans accept the forms ``1 t T TRUE true True`` and ``0 f F FALSE false
False``; anything else is rejected.

Parsing is stricter than ``int()``/``float()``: surrounding whitespace,
underscores and non-ASCII digits are all invalid syntax.
"""

import math
import re
import struct
from typing import Any

from fieldresolver.resolution.exceptions import PrimitiveParseError
from fieldresolver.resolution.kinds import IntWidth, Kind

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_INT_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.ASCII | re.IGNORECASE,
)

INVALID_SYNTAX = "invalid syntax"
OUT_OF_RANGE = "out of range"


def int_bounds(width: IntWidth) -> tuple[int, int]:
    """Return the inclusive (min, max) range of an integer width.

    Examples:
        >>> int_bounds(IntWidth(8))
        (-128, 127)
        >>> int_bounds(IntWidth(8, signed=False))
        (0, 255)
    """
    if width.signed:
        return -(1 << (width.bits - 1)), (1 << (width.bits - 1)) - 1
    return 0, (1 << width.bits) - 1


def int_in_range(kind: Kind, value: int) -> bool:
    low, high = int_bounds(kind.int_width)
    return low <= value <= high


def round_float32(value: float) -> float:
    """Round a double to the nearest single precision value.

    Raises:
        OverflowError: If the value is finite but too large for single precision.
    """
    return struct.unpack("f", struct.pack("f", value))[0]


def fits_float32(value: float) -> bool:
    """Check that a double survives single precision rounding unchanged (NaN included)."""
    try:
        rounded = round_float32(value)
    except OverflowError:
        return False
    return rounded == value or rounded != rounded


def _parse_bool(text: str) -> bool:
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise PrimitiveParseError(Kind.BOOL, INVALID_SYNTAX)


def _parse_int(kind: Kind, text: str) -> int:
    signed = kind.int_width.signed
    if not _INT_PATTERN.fullmatch(text) or (not signed and text.startswith(("+", "-"))):
        raise PrimitiveParseError(kind, INVALID_SYNTAX)
    value = int(text, 10)
    if not int_in_range(kind, value):
        raise PrimitiveParseError(kind, OUT_OF_RANGE)
    return value


def _parse_float(kind: Kind, text: str) -> float:
    if not _FLOAT_PATTERN.fullmatch(text):
        raise PrimitiveParseError(kind, INVALID_SYNTAX)
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise PrimitiveParseError(kind, OUT_OF_RANGE)
    if kind is Kind.FLOAT32:
        try:
            return round_float32(value)
        except OverflowError:
            raise PrimitiveParseError(kind, OUT_OF_RANGE) from None
    return value


def coerce_scalar(kind: Kind, text: str) -> Any:
    """Convert text into a value of a primitive kind.

    Args:
        kind: The destination kind.
        text: The raw text.

    Returns:
        A bool, int, float or str, depending on the kind.

    Raises:
        PrimitiveParseError: If the text isn't valid for the kind, overflows
            the kind's width, or the kind isn't primitive.
    """
    if kind is Kind.STRING:
        return text
    if kind is Kind.BOOL:
        return _parse_bool(text)
    if kind.is_integer:
        return _parse_int(kind, text)
    if kind.is_float:
        return _parse_float(kind, text)
    raise PrimitiveParseError(kind, "unsupported kind")
