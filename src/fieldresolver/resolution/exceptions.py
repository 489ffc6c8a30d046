"""Exceptions for the value resolution system.

Every failed resolution surfaces one of these, except for exceptions raised by
user-registered resolvers, which propagate unchanged. None of them carry the
raw value: external input can hold secrets, so only its type is reported.
"""

from enum import Enum
from typing import Any


def _type_name(tp: Any) -> str:
    if isinstance(tp, Enum):
        return tp.name.lower()
    return tp.__name__ if isinstance(tp, type) else repr(tp)


class ConversionError(Exception):
    """Base exception for value resolution failures.

    Attributes:
        source_type: The type (shape) of the raw value.
        target_type: The declared type of the destination.
        message: Human-readable description of the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        source_type: Any = None,
        target_type: Any = None,
    ) -> None:
        self.source_type = source_type
        self.target_type = target_type
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class UnsupportedConversionError(ConversionError):
    """Raised when no resolution stage can produce a value for the destination."""

    def __init__(
        self,
        source_type: Any,
        target_type: Any,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"Unsupported conversion: cannot resolve a value of type "
                f"{_type_name(source_type)} into {_type_name(target_type)}"
            )
        super().__init__(message, source_type=source_type, target_type=target_type)


class PrimitiveParseError(UnsupportedConversionError):
    """Raised when text can't be parsed into a primitive kind.

    Subclasses UnsupportedConversionError so callers handle a single family.

    Attributes:
        reason: Short description such as "invalid syntax" or "out of range".
    """

    def __init__(self, target_type: Any, reason: str) -> None:
        self.reason = reason
        super().__init__(
            str,
            target_type,
            message=f"Cannot parse str as {_type_name(target_type)}: {reason}",
        )


class DuplicateResolverError(ValueError):
    """Raised at construction when two exact-type resolvers claim the same type."""

    def __init__(self, target_type: Any) -> None:
        self.target_type = target_type
        super().__init__(f"A type resolver for {_type_name(target_type)} is already registered")
