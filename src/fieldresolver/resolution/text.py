"""Capability resolver for classes that can build themselves from text.

Any class with a ``from_text`` classmethod satisfies TextUnmarshaler and can
be resolved without registering it by type. Nothing is inferred from a class's
base: a ``bytes`` subclass without ``from_text`` is never fed raw text, which
keeps binary types from silently accepting arbitrary input.
"""

from typing import Any, Protocol, Self, get_origin, runtime_checkable

from fieldresolver.resolution.exceptions import UnsupportedConversionError
from fieldresolver.resolution.registry import ReflectResolver


@runtime_checkable
class TextUnmarshaler(Protocol):
    @classmethod
    def from_text(cls, text: str) -> Self:
        """Build an instance from its textual form.

        Raises:
            Exception: Any exception signals invalid text and reaches the caller unchanged.
        """
        ...


def text_form(value: Any) -> str:
    """Return the string form handed to ``from_text``.

    Raises:
        UnicodeDecodeError: If bytes aren't valid UTF-8.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


class TextUnmarshalerReflectResolver(ReflectResolver):
    def matches(self, target_tp: Any) -> bool:
        if get_origin(target_tp) is not None or not isinstance(target_tp, type):
            return False
        return issubclass(target_tp, TextUnmarshaler)

    def convert(self, target_tp: Any, value: Any) -> Any:
        try:
            text = text_form(value)
        except UnicodeDecodeError as e:
            raise UnsupportedConversionError(type(value), target_tp) from e
        result = target_tp.from_text(text)
        if not isinstance(result, target_tp):
            raise UnsupportedConversionError(
                type(value),
                target_tp,
                message=f"{target_tp.__name__}.from_text returned {type(result).__name__}",
            )
        return result
