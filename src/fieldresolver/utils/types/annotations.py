import typing
from dataclasses import dataclass
from types import NoneType, UnionType
from typing import Any, NewType, NotRequired, Required, Self, TypeVar, get_args, get_origin

from sqlalchemy.orm import Mapped

#: Wrappers that qualify a declaration without changing the type of the stored value.
DEFAULT_QUALIFIERS = (Mapped, Required, NotRequired)

_M = TypeVar("_M")


@dataclass(frozen=True, kw_only=True, slots=True)
class TypeAnnotation:
    """A declared type split into the stored type, its qualifiers and its metadata.

    ``Annotated[Mapped[int], "doc"]`` becomes ``tp=int``, ``qualifiers=(Mapped,)``
    and ``metadata=("doc",)``.
    """

    tp: Any
    qualifiers: tuple[Any, ...]
    metadata: tuple[Any, ...]

    @classmethod
    def create(
        cls,
        annotation: Any,
        known_qualifiers: tuple[Any, ...] = DEFAULT_QUALIFIERS,
    ) -> Self:
        tp, qualifiers, metadata = cls._walk_tp(annotation, known_qualifiers)
        return cls(tp=tp, qualifiers=qualifiers, metadata=metadata)

    @classmethod
    def _walk_tp(
        cls,
        annotation: Any,
        known_qualifiers: tuple[Any, ...],
    ) -> tuple[Any, tuple[Any, ...], tuple[Any, ...]]:
        origin = get_origin(annotation)
        args = get_args(annotation)

        match origin, args:
            case typing.Annotated, (inner, *metadata):
                tp, inner_qualifiers, inner_metadata = cls._walk_tp(inner, known_qualifiers)
                return tp, inner_qualifiers, (*inner_metadata, *metadata)
            case qualifier, (inner,) if qualifier in known_qualifiers:
                tp, inner_qualifiers, inner_metadata = cls._walk_tp(inner, known_qualifiers)
                return tp, (qualifier, *inner_qualifiers), inner_metadata
            case _:
                return annotation, (), ()

    def find_metadata(self, kind: type[_M]) -> _M | None:
        """Return the innermost metadata entry of the given class, if any."""
        return next((it for it in self.metadata if isinstance(it, kind)), None)


def unwrap(tp: Any) -> Any:
    """Unwrap a type annotation, removing qualifiers like Mapped, Required, and Annotated.

    Args:
        tp: The type annotation to unwrap.

    Returns:
        The inner type with all wrappers removed.
    """
    return TypeAnnotation.create(tp).tp


def is_newtype(tp: Any) -> bool:
    return isinstance(tp, NewType)


def newtype_root(tp: Any) -> Any:
    """Follow ``NewType`` supertypes down to the first type that isn't a ``NewType``."""
    while is_newtype(tp):
        tp = unwrap(tp.__supertype__)
    return tp


def optional_member(tp: Any) -> Any | None:
    """Return ``X`` when ``tp`` is ``X | None`` (or ``Optional[X]``), otherwise None.

    Unions with more than one non-None member are not optionals.

    Examples:
        >>> optional_member(int | None)
        <class 'int'>
        >>> optional_member(int | str | None) is None
        True
    """
    origin = get_origin(tp)
    if origin is not typing.Union and origin is not UnionType:
        return None
    args = get_args(tp)
    members = [it for it in args if it is not NoneType]
    if len(members) != 1 or len(members) == len(args):
        return None
    return members[0]
