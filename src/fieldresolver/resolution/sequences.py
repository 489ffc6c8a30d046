"""Resolution of sequence destinations.

A sequence value is accepted only when it already has the destination's shape:
the container class must be exactly the declared one, and every element must
already have the declared element type. Elements are never converted one by
one, so ``["1", "2"]`` does not resolve into ``list[int]`` and a ``tuple`` does
not resolve into a ``list``.

Without a declared source type, element types are checked at runtime with
``type(item)``. Width-marked element types are checked the way a scalar
destination of that width checks an already typed value, so ``[1, 2, 3]``
matches ``list[Int32]`` and ``[1, 500]`` doesn't match ``list[Int8]``.
"""

from typing import Any

from fieldresolver.resolution.kinds import FloatWidth, Kind, TypeInfo
from fieldresolver.resolution.primitives import fits_float32, int_in_range
from fieldresolver.utils.types.params import get_element_type, get_type_params_for_base

#: Container bases whose type parameters describe the elements
_ELEMENT_BASES = (list, tuple, set, frozenset)


def _element_base(container: type) -> type | None:
    return next((base for base in _ELEMENT_BASES if issubclass(container, base)), None)


def _identity(tp: Any) -> Any:
    return Any if tp is Any else TypeInfo.create(tp).identity


def _element_info(tp: Any) -> TypeInfo | None:
    return None if tp is Any else TypeInfo.create(tp)


def _element_types(tp: Any, base: type, length: int) -> list[TypeInfo | None] | None:
    """Return the expected element type of each position, or None if the length doesn't fit.

    Fixed-shape tuples (``tuple[int, str]``) have one type per position; every
    other container repeats its element type. ``Any`` positions are None.
    """
    params = get_type_params_for_base(tp, base)
    if base is tuple and params and params[-1] is not Ellipsis:
        if len(params) != length:
            return None
        return [_element_info(it) for it in params]
    return [_element_info(get_element_type(tp, base))] * length


def _holds(item: Any, info: TypeInfo | None) -> bool:
    if info is None:
        return True
    if type(item) is not info.tp:
        return False
    if info.kind.is_integer and info.width is not None:
        return int_in_range(info.kind, item)
    if isinstance(info.width, FloatWidth) and info.width.bits == 32:
        return fits_float32(item)
    return True


def _declared_elements(tp: Any, base: type) -> tuple[Any, ...]:
    return tuple(_identity(it) for it in get_type_params_for_base(tp, base))


class SequenceResolver:
    """Decides whether a value can be assigned to a sequence destination as is."""

    def matches(self, target: TypeInfo, value: Any, source_tp: Any = None) -> bool:
        """Check container and element types of a value against a sequence destination.

        Args:
            target: The destination's type information; must be of kind SEQUENCE.
            value: The raw value.
            source_tp: The declared type of the value, if known.

        Returns:
            True if the value can be assigned without any conversion.
        """
        if target.kind is not Kind.SEQUENCE:
            return False

        container = target.runtime_class
        if type(value) is not container:
            return False

        base = _element_base(container)
        if source_tp is not None:
            source = TypeInfo.create(source_tp)
            if source.runtime_class is not container:
                return False
            return base is None or _declared_elements(source.tp, base) == _declared_elements(
                target.tp, base
            )

        if base is None:
            # bytes and bytearray always hold ints
            return True

        expected = _element_types(target.tp, base, len(value))
        if expected is None:
            return False
        return all(_holds(item, info) for item, info in zip(value, expected, strict=True))
