"""Destination kinds and fixed-width numeric types.

Python's ``int`` and ``float`` have no bit width, so widths are declared with
``Annotated`` metadata: ``Int8`` is ``Annotated[int, IntWidth(8)]`` and values
stored in it are ordinary ints. A plain ``int`` destination is treated as a
64-bit signed integer and a plain ``float`` as double precision.

Each declared type is introspected once into a TypeInfo, whose ``kind`` the
resolver then switches on.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Annotated, Any, Self, get_origin

from typing_extensions import is_typeddict

from fieldresolver.utils.types.annotations import (
    TypeAnnotation,
    newtype_root,
    optional_member,
)

_INT_BITS = (8, 16, 32, 64)
_FLOAT_BITS = (32, 64)


@dataclass(frozen=True, slots=True)
class IntWidth:
    """Bit width and signedness of an integer destination."""

    bits: int
    signed: bool = True

    def __post_init__(self) -> None:
        if self.bits not in _INT_BITS:
            raise ValueError(f"Unsupported integer width: {self.bits}")


@dataclass(frozen=True, slots=True)
class FloatWidth:
    """Precision of a floating point destination."""

    bits: int

    def __post_init__(self) -> None:
        if self.bits not in _FLOAT_BITS:
            raise ValueError(f"Unsupported float width: {self.bits}")


Int8 = Annotated[int, IntWidth(8)]
Int16 = Annotated[int, IntWidth(16)]
Int32 = Annotated[int, IntWidth(32)]
Int64 = Annotated[int, IntWidth(64)]
UInt8 = Annotated[int, IntWidth(8, signed=False)]
UInt16 = Annotated[int, IntWidth(16, signed=False)]
UInt32 = Annotated[int, IntWidth(32, signed=False)]
UInt64 = Annotated[int, IntWidth(64, signed=False)]
Float32 = Annotated[float, FloatWidth(32)]
Float64 = Annotated[float, FloatWidth(64)]


class Kind(Enum):
    BOOL = auto()
    INT8 = auto()
    INT16 = auto()
    INT32 = auto()
    INT64 = auto()
    UINT8 = auto()
    UINT16 = auto()
    UINT32 = auto()
    UINT64 = auto()
    FLOAT32 = auto()
    FLOAT64 = auto()
    STRING = auto()
    POINTER = auto()
    SEQUENCE = auto()
    STRUCT = auto()
    OTHER = auto()

    @property
    def is_integer(self) -> bool:
        return self in _INT_WIDTHS

    @property
    def is_float(self) -> bool:
        return self in (Kind.FLOAT32, Kind.FLOAT64)

    @property
    def is_primitive(self) -> bool:
        return self is Kind.BOOL or self is Kind.STRING or self.is_integer or self.is_float

    @property
    def int_width(self) -> IntWidth:
        return _INT_WIDTHS[self]


_INT_WIDTHS: dict[Kind, IntWidth] = {
    Kind.INT8: IntWidth(8),
    Kind.INT16: IntWidth(16),
    Kind.INT32: IntWidth(32),
    Kind.INT64: IntWidth(64),
    Kind.UINT8: IntWidth(8, signed=False),
    Kind.UINT16: IntWidth(16, signed=False),
    Kind.UINT32: IntWidth(32, signed=False),
    Kind.UINT64: IntWidth(64, signed=False),
}
_INT_KINDS: dict[IntWidth, Kind] = {width: kind for kind, width in _INT_WIDTHS.items()}

#: Container classes whose subclasses are sequence destinations
SEQUENCE_TYPES = (list, tuple, set, frozenset, bytes, bytearray)


def _classify(tp: Any, width: IntWidth | FloatWidth | None) -> Kind:
    if optional_member(tp) is not None:
        return Kind.POINTER

    root = newtype_root(tp)
    origin = get_origin(root) or root
    if origin is Any or origin is object or not isinstance(origin, type):
        return Kind.OTHER

    if issubclass(origin, bool):
        return Kind.BOOL
    if issubclass(origin, int):
        return _INT_KINDS[width] if isinstance(width, IntWidth) else Kind.INT64
    if issubclass(origin, float):
        return Kind.FLOAT32 if width == FloatWidth(32) else Kind.FLOAT64
    if issubclass(origin, str):
        return Kind.STRING
    if is_typeddict(origin) or hasattr(origin, "_fields"):
        return Kind.STRUCT
    if issubclass(origin, SEQUENCE_TYPES):
        return Kind.SEQUENCE
    return Kind.STRUCT


@dataclass(frozen=True, slots=True)
class TypeInfo:
    """Everything the resolver needs to know about a destination's declared type.

    Attributes:
        annotation: The type as declared.
        tp: The declared type with Annotated, Mapped, Required and NotRequired removed.
        identity: The type used for exact-type lookups; ``tp`` plus its width marker.
        kind: The destination kind.
        width: The width marker of a numeric destination, if declared.
    """

    annotation: Any
    tp: Any
    identity: Any
    kind: Kind
    width: IntWidth | FloatWidth | None

    @classmethod
    def create(cls, annotation: Any) -> Self:
        unwrapped = TypeAnnotation.create(annotation)
        tp = unwrapped.tp
        width = unwrapped.find_metadata(IntWidth) or unwrapped.find_metadata(FloatWidth)
        kind = _classify(tp, width)

        if not (
            (kind.is_integer and isinstance(width, IntWidth))
            or (kind.is_float and isinstance(width, FloatWidth))
        ):
            width = None

        return cls(
            annotation=annotation,
            tp=tp,
            identity=Annotated[tp, width] if width is not None else tp,
            kind=kind,
            width=width,
        )

    @property
    def runtime_class(self) -> Any:
        """The class values of this type are instances of (NewTypes resolved)."""
        root = newtype_root(self.tp)
        return get_origin(root) or root

    @property
    def pointee(self) -> Any:
        """The annotation a POINTER destination points to."""
        member = optional_member(self.tp)
        if member is None:
            raise TypeError(f"{self.tp!r} is not an optional type")
        return member
