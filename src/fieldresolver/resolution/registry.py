"""Registries of custom resolvers.

Two kinds of extension are supported:
    - TypeResolver: owns exactly one destination type, looked up by identity.
    - ReflectResolver: owns every destination type satisfying a predicate,
      e.g. "the class can build itself from text". Looked up in registration
      order, first match wins.

Both registries are assembled once and never change afterwards, so they can be
shared between threads without locking.
"""

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from fieldresolver.resolution.exceptions import DuplicateResolverError


@runtime_checkable
class TypeResolver(Protocol):
    #: The exact destination type this resolver owns.
    target_tp: Any

    def convert(self, value: Any) -> Any:
        """Convert a raw value into an instance of ``target_tp``.

        Args:
            value: The raw value.

        Returns:
            The converted value.

        Raises:
            Exception: Any exception; it reaches the caller unchanged.
        """
        ...


@runtime_checkable
class ReflectResolver(Protocol):
    def matches(self, target_tp: Any) -> bool:
        """Check if this resolver can produce values of the given destination type.

        Args:
            target_tp: The destination type, with wrappers removed.

        Returns:
            True if this resolver takes ownership of the type.
        """
        ...

    def convert(self, target_tp: Any, value: Any) -> Any:
        """Convert a raw value into an instance of ``target_tp``.

        Args:
            target_tp: The destination type, as passed to ``matches``.
            value: The raw value.

        Returns:
            The converted value.
        """
        ...


class FunctionTypeResolver(TypeResolver):
    """TypeResolver backed by a plain function.

    Example::

        resolver = FunctionTypeResolver(Decimal, Decimal)
        resolver.convert("1.10")  # Decimal('1.10')
    """

    def __init__(self, target_tp: Any, fn: Callable[[Any], Any]) -> None:
        self.target_tp = target_tp
        self._fn = fn

    def convert(self, value: Any) -> Any:
        return self._fn(value)


class FunctionReflectResolver(ReflectResolver):
    """ReflectResolver backed by a predicate and a conversion function."""

    def __init__(
        self,
        predicate: Callable[[Any], bool],
        fn: Callable[[Any, Any], Any],
    ) -> None:
        self._predicate = predicate
        self._fn = fn

    def matches(self, target_tp: Any) -> bool:
        return self._predicate(target_tp)

    def convert(self, target_tp: Any, value: Any) -> Any:
        return self._fn(target_tp, value)


class TypeResolverRegistry:
    """Identity-keyed registry of TypeResolvers.

    Attributes:
        _resolvers: Read-only mapping of destination type to resolver.

    Raises:
        DuplicateResolverError: If two resolvers own the same type.
    """

    def __init__(self, *resolvers: TypeResolver) -> None:
        resolvers_by_tp: dict[Any, TypeResolver] = {}
        for resolver in resolvers:
            if resolver.target_tp in resolvers_by_tp:
                raise DuplicateResolverError(resolver.target_tp)
            resolvers_by_tp[resolver.target_tp] = resolver
        self._resolvers: Mapping[Any, TypeResolver] = MappingProxyType(resolvers_by_tp)

    def lookup(self, target_tp: Any) -> TypeResolver | None:
        """Find the resolver registered for exactly this type.

        Subclasses, NewTypes and width variants of a registered type don't
        match; only the registered type itself does.
        """
        try:
            return self._resolvers.get(target_tp)
        except TypeError:
            # unhashable annotations can't have been registered
            return None

    def __iter__(self):
        return iter(self._resolvers.values())

    def __len__(self) -> int:
        return len(self._resolvers)


class ReflectResolverRegistry:
    """Ordered registry of ReflectResolvers.

    Attributes:
        _resolvers: Resolvers in registration order.
    """

    def __init__(self, *resolvers: ReflectResolver) -> None:
        self._resolvers = resolvers

    def lookup(self, target_tp: Any) -> ReflectResolver | None:
        """Return the first resolver whose predicate accepts the type, or None."""
        return next(
            (resolver for resolver in self._resolvers if resolver.matches(target_tp)),
            None,
        )

    def __iter__(self):
        return iter(self._resolvers)

    def __len__(self) -> int:
        return len(self._resolvers)
