"""Built-in resolvers for timestamps and elapsed time.

``datetime`` values are parsed with a ``strptime`` layout, RFC 3339 by
default. The default also accepts fractional seconds, truncated to
microseconds. ``timedelta`` values use the duration grammar common to config files
and command lines: an optional sign followed by one or more decimal numbers,
each with a unit.

Example::

    parse_duration("2h45m")  # timedelta(seconds=9900)
    parse_duration("1.5s")  # timedelta(seconds=1, microseconds=500000)
    parse_duration("-300ms")  # timedelta(milliseconds=-300)
"""

import re
from datetime import datetime, timedelta
from fractions import Fraction
from typing import Any

from fieldresolver.resolution.exceptions import UnsupportedConversionError
from fieldresolver.resolution.registry import TypeResolver

#: strptime layout for RFC 3339 timestamps such as ``2021-10-22T11:01:00Z``
RFC3339 = "%Y-%m-%dT%H:%M:%S%z"

#: RFC 3339 with fractional seconds, tried after RFC3339 by the default resolver
RFC3339_FRACTION = "%Y-%m-%dT%H:%M:%S.%f%z"

# strptime reads at most six fractional digits
_EXTRA_DIGITS = re.compile(r"(?<=\.[0-9]{6})[0-9]+", re.ASCII)

#: Nanoseconds per unit; longer spellings come first so the regex prefers them
_UNIT_NANOSECONDS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek small letter mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 60 * 60 * 1_000_000_000,
}

_TERM_PATTERN = re.compile(
    r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(" + "|".join(map(re.escape, _UNIT_NANOSECONDS)) + ")",
    re.ASCII,
)
_DURATION_PATTERN = re.compile(rf"([+-]?)((?:{_TERM_PATTERN.pattern})+)", re.ASCII)


def parse_duration(text: str) -> timedelta:
    """Parse a duration string such as ``"5s"`` or ``"2h45m"``.

    A bare ``"0"`` (optionally signed) is accepted as zero. Precision beyond
    microseconds is rounded to the nearest microsecond.

    Args:
        text: The duration string.

    Returns:
        The parsed duration.

    Raises:
        ValueError: If the text isn't a valid duration.
    """
    if text in ("0", "+0", "-0"):
        return timedelta(0)

    match = _DURATION_PATTERN.fullmatch(text)
    if match is None:
        raise ValueError("invalid duration syntax")

    sign, terms = match.group(1, 2)
    total_ns = sum(
        (
            Fraction(number) * _UNIT_NANOSECONDS[unit]
            for number, unit in _TERM_PATTERN.findall(terms)
        ),
        Fraction(0),
    )
    if sign == "-":
        total_ns = -total_ns
    return timedelta(microseconds=round(total_ns / 1000))


def _require_text(value: Any, target_tp: type) -> str:
    if not isinstance(value, str):
        raise UnsupportedConversionError(type(value), target_tp)
    return value


class TimeTypeResolver(TypeResolver):
    """Resolves ``datetime`` destinations from text in a fixed layout.

    Attributes:
        layout: The strptime format the text must follow.
    """

    target_tp = datetime

    def __init__(self, layout: str = RFC3339) -> None:
        self.layout = layout

    def convert(self, value: Any) -> datetime:
        text = _require_text(value, datetime)
        try:
            return datetime.strptime(text, self.layout)
        except ValueError:
            if self.layout == RFC3339 and (parsed := _parse_fraction(text)) is not None:
                return parsed
            raise UnsupportedConversionError(
                str, datetime, message=f"Cannot parse str as datetime with layout {self.layout!r}"
            ) from None


def _parse_fraction(text: str) -> datetime | None:
    try:
        return datetime.strptime(_EXTRA_DIGITS.sub("", text), RFC3339_FRACTION)
    except ValueError:
        return None


class DurationTypeResolver(TypeResolver):
    """Resolves ``timedelta`` destinations from duration strings (see parse_duration)."""

    target_tp = timedelta

    def convert(self, value: Any) -> timedelta:
        text = _require_text(value, timedelta)
        try:
            return parse_duration(text)
        except (ValueError, OverflowError) as e:
            raise UnsupportedConversionError(
                str, timedelta, message="Cannot parse str as timedelta"
            ) from e
