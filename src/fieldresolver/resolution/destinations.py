"""Destinations: typed storage locations the resolver writes into.

A destination pairs a declared type with somewhere to put a value of that
type. The resolver reads the type, and on success calls ``set`` exactly once;
on failure the destination is left as it was.

Example::

    @dataclass
    class Query:
        limit: Int32 = 10
        tags: list[str] | None = None

    query = Query()
    for destination in field_destinations(query):
        ...
"""

from typing import Any, Final, Protocol, runtime_checkable

from fieldresolver.utils.types.structs import annotated_field_names, field_annotation


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


#: Value of a destination that has never been written to
UNSET: Final[Any] = _Unset()


@runtime_checkable
class Destination(Protocol):
    @property
    def tp(self) -> Any:
        """The declared type of the stored value."""
        ...

    def get(self) -> Any: ...

    def set(self, value: Any) -> None: ...


class Slot(Destination):
    """A standalone storage cell with a declared type.

    Attributes:
        value: The stored value, UNSET until written.
    """

    def __init__(self, tp: Any, value: Any = UNSET) -> None:
        self._tp = tp
        self.value = value

    @property
    def tp(self) -> Any:
        return self._tp

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Slot({self._tp!r}, {self.value!r})"


class FieldDestination(Destination):
    """An annotated attribute of an object.

    Works with dataclasses, attrs classes, pydantic models, SQLAlchemy mapped
    classes (``Mapped[...]`` is unwrapped by the resolver) and plain annotated
    classes. The type is read from the annotation of the class declaring the
    attribute.

    Raises:
        AttributeError: If the owner's class doesn't annotate ``name``.
    """

    def __init__(self, owner: Any, name: str) -> None:
        self._owner = owner
        self._name = name
        self._tp = field_annotation(type(owner), name)

    @property
    def tp(self) -> Any:
        return self._tp

    @property
    def name(self) -> str:
        return self._name

    def get(self) -> Any:
        return getattr(self._owner, self._name, UNSET)

    def set(self, value: Any) -> None:
        setattr(self._owner, self._name, value)

    def __repr__(self) -> str:
        return f"FieldDestination({type(self._owner).__name__}.{self._name}: {self._tp!r})"


def field_destinations(owner: Any) -> list[FieldDestination]:
    """Return a destination for every public annotated field of an object.

    ClassVars and names starting with an underscore are skipped. Fields of
    base classes come first.
    """
    return [FieldDestination(owner, name) for name in annotated_field_names(type(owner))]
