"""The value resolver.

ValueResolver turns a raw value (text, a list of texts, or an already typed
fragment of a decoded payload) into a value of a destination's declared type.
Resolution tries a fixed sequence of stages and stops at the first one that
applies:

    1. the value is directly assignable to the declared type
    2. an exact-type resolver is registered for the declared type
    3. a capability resolver accepts the declared type
    4. the destination is optional (``X | None``): resolve into ``X``
    5. the destination is a sequence: the value must already match it
    6. the value is convertible (same underlying representation)
    7. the destination is a primitive and the value is text: parse it
    8. fail with UnsupportedConversionError

Stages 2 and 3 own their types outright: whatever they return or raise is the
result, with no fallback to later stages. A failure at any stage never writes
to the destination.
"""

from collections.abc import Sequence
from logging import getLogger
from types import NoneType
from typing import Any, get_origin

from typing_extensions import is_protocol, is_typeddict

from fieldresolver.resolution.destinations import Destination
from fieldresolver.resolution.exceptions import PrimitiveParseError, UnsupportedConversionError
from fieldresolver.resolution.kinds import FloatWidth, Kind, TypeInfo
from fieldresolver.resolution.primitives import coerce_scalar, fits_float32, int_in_range
from fieldresolver.resolution.registry import (
    ReflectResolver,
    ReflectResolverRegistry,
    TypeResolver,
    TypeResolverRegistry,
)
from fieldresolver.resolution.sequences import SequenceResolver
from fieldresolver.utils.types.annotations import is_newtype, newtype_root
from fieldresolver.utils.types.structs import struct_fields, struct_values

logger = getLogger(__name__)

#: Entries accepted by the ValueResolver constructor
ResolverEntry = TypeResolver | ReflectResolver


def _shape(value: Any, source_tp: Any) -> Any:
    return source_tp if source_tp is not None else type(value)


class ValueResolver:
    """Resolves raw values into typed destinations.

    Custom resolvers are passed positionally in any mix; exact-type and
    capability resolvers are split into their own registries, and capability
    resolvers keep their relative order. A ValueResolver never changes after
    construction and can be shared freely.

    Example::

        resolver = ValueResolver(DurationTypeResolver(), TextUnmarshalerReflectResolver())
        timeout = Slot(timedelta)
        resolver.resolve_value(timeout, "2h45m")

    Raises:
        TypeError: If an entry is neither a TypeResolver nor a ReflectResolver.
        DuplicateResolverError: If two TypeResolvers own the same type.
    """

    def __init__(self, *entries: ResolverEntry) -> None:
        type_resolvers: list[TypeResolver] = []
        reflect_resolvers: list[ReflectResolver] = []
        for entry in entries:
            match entry:
                case TypeResolver():
                    type_resolvers.append(entry)
                case ReflectResolver():
                    reflect_resolvers.append(entry)
                case _:
                    raise TypeError(f"Not a TypeResolver or ReflectResolver: {entry!r}")

        self._types = TypeResolverRegistry(*type_resolvers)
        self._reflect = ReflectResolverRegistry(*reflect_resolvers)
        self._sequences = SequenceResolver()

    @property
    def type_resolvers(self) -> TypeResolverRegistry:
        return self._types

    @property
    def reflect_resolvers(self) -> ReflectResolverRegistry:
        return self._reflect

    def resolve_value(self, destination: Destination, value: Any, source_tp: Any = None) -> None:
        """Resolve any raw value into a destination, consulting custom resolvers.

        Args:
            destination: Where to store the result.
            value: The raw value.
            source_tp: The declared type of the value, when the caller knows it
                (e.g. a field of a decoded payload model). Defaults to ``type(value)``.

        Raises:
            UnsupportedConversionError: If no stage can produce a value.
            Exception: Whatever a custom resolver raises, unchanged.
        """
        destination.set(self._resolve(TypeInfo.create(destination.tp), value, source_tp))

    def resolve(self, destination: Destination, value: str | Sequence[str]) -> None:
        """Resolve text, or a list of texts, without consulting custom resolvers.

        Sequence destinations accept only a sequence already matching them.
        Other destinations accept a single string, which is assigned, converted
        or parsed; optional destinations resolve into their inner type.

        Raises:
            UnsupportedConversionError: If the value doesn't fit the destination.
        """
        destination.set(self._resolve_text(TypeInfo.create(destination.tp), value))

    def _resolve(self, target: TypeInfo, value: Any, source_tp: Any) -> Any:
        if self._is_assignable(target, value, source_tp):
            logger.debug("Assigning %s directly to %r", type(value).__name__, target.annotation)
            return value

        if (type_resolver := self._types.lookup(target.identity)) is not None:
            logger.debug("Resolving %r with %r", target.annotation, type_resolver)
            return type_resolver.convert(value)

        if (reflect_resolver := self._reflect.lookup(target.tp)) is not None:
            logger.debug("Resolving %r with %r", target.annotation, reflect_resolver)
            return reflect_resolver.convert(target.tp, value)

        if target.kind is Kind.POINTER:
            return self._resolve(TypeInfo.create(target.pointee), value, source_tp)

        return self._resolve_builtin(target, value, source_tp)

    def _resolve_text(self, target: TypeInfo, value: str | Sequence[str]) -> Any:
        if target.kind is Kind.SEQUENCE:
            return self._resolve_sequence(target, value, None)
        if not isinstance(value, str):
            logger.debug("Rejecting %s for scalar %r", type(value).__name__, target.annotation)
            raise UnsupportedConversionError(type(value), target.annotation)

        if self._is_assignable(target, value, None):
            return value
        if target.kind is Kind.POINTER:
            return self._resolve_text(TypeInfo.create(target.pointee), value)
        return self._resolve_builtin(target, value, None)

    def _resolve_builtin(self, target: TypeInfo, value: Any, source_tp: Any) -> Any:
        """Stages 5 to 8, shared by both entry points."""
        if target.kind is Kind.SEQUENCE:
            return self._resolve_sequence(target, value, source_tp)

        if (converted := self._convert(target, value, source_tp)) is not _NOT_CONVERTIBLE:
            logger.debug("Converted %s to %r", type(value).__name__, target.annotation)
            return converted

        if target.kind.is_primitive and isinstance(value, str):
            return self._coerce(target, value)

        logger.debug(
            "No stage resolves %s into %r",
            _shape(value, source_tp),
            target.annotation,
        )
        raise UnsupportedConversionError(_shape(value, source_tp), target.annotation)

    def _resolve_sequence(self, target: TypeInfo, value: Any, source_tp: Any) -> Any:
        if self._sequences.matches(target, value, source_tp):
            return value
        logger.debug(
            "Sequence %s doesn't match %r",
            _shape(value, source_tp),
            target.annotation,
        )
        raise UnsupportedConversionError(_shape(value, source_tp), target.annotation)

    def _is_assignable(self, target: TypeInfo, value: Any, source_tp: Any) -> bool:
        """Stage 1: can the value be stored as is?"""
        if target.kind is Kind.SEQUENCE:
            return self._sequences.matches(target, value, source_tp)

        tp = target.tp
        if tp is Any or tp is object:
            return True
        if source_tp is not None and TypeInfo.create(source_tp).identity == target.identity:
            return True
        if target.kind is Kind.POINTER:
            return value is None and source_tp in (None, NoneType)
        if is_newtype(tp) or is_typeddict(tp) or get_origin(tp) is not None:
            return False
        if not isinstance(tp, type):
            # TypeVars, forward references and other non-class annotations
            return False
        if is_protocol(tp):
            try:
                return isinstance(value, tp)
            except TypeError:
                # not runtime checkable
                return False
        if source_tp is not None and source_tp is not type(value):
            # a declared source type decides on its own
            return False
        if not isinstance(value, tp):
            return False
        if isinstance(value, bool) and not issubclass(tp, bool):
            return False
        if target.kind.is_integer and target.width is not None:
            return int_in_range(target.kind, value)
        if isinstance(target.width, FloatWidth) and target.width.bits == 32:
            return fits_float32(value)
        return True

    def _convert(self, target: TypeInfo, value: Any, source_tp: Any) -> Any:
        """Stage 6: convert between types sharing an underlying representation."""
        source = TypeInfo.create(source_tp if source_tp is not None else type(value))
        if target.kind in (Kind.POINTER, Kind.OTHER) or source.kind in (Kind.POINTER, Kind.OTHER):
            return _NOT_CONVERTIBLE
        if _underlying(source) != _underlying(target):
            return _NOT_CONVERTIBLE

        if target.kind.is_integer and not int_in_range(target.kind, value):
            raise UnsupportedConversionError(
                source.tp,
                target.annotation,
                message=f"Value out of range for {target.annotation!r}",
            )
        if is_newtype(target.tp):
            return value

        cls = target.runtime_class
        if target.kind is Kind.STRUCT:
            return _construct(target, cls, value, **struct_values(value))
        return _construct(target, cls, value, value)

    def _coerce(self, target: TypeInfo, text: str) -> Any:
        """Stage 7: parse text into a primitive."""
        try:
            parsed = coerce_scalar(target.kind, text)
        except PrimitiveParseError as e:
            logger.debug("Cannot parse str as %r: %s", target.annotation, e.reason)
            raise PrimitiveParseError(target.annotation, e.reason) from e
        if is_newtype(target.tp):
            return parsed
        return _construct(target, target.runtime_class, parsed, parsed)


_NOT_CONVERTIBLE: Any = object()


def _underlying(info: TypeInfo) -> Any:
    """The representation two types must share to be convertible into each other.

    Primitive kinds are represented by the kind itself (so ``class Name(str)``
    and ``str`` share one), structs by their ordered field declarations, and
    anything else by its class.
    """
    if info.kind.is_primitive:
        return info.kind
    if info.kind is Kind.STRUCT:
        fields = struct_fields(newtype_root(info.tp))
        if fields is not None:
            return fields
    return newtype_root(info.tp)


def _construct(target: TypeInfo, cls: type, value: Any, *args: Any, **kwargs: Any) -> Any:
    """Build an instance of the destination's own class from a converted value.

    Enum lookups and validating constructors (pydantic models) can reject the
    value; that surfaces as an unsupported conversion.
    """
    if type(value) is cls:
        return value
    try:
        return cls(*args, **kwargs)
    except (TypeError, ValueError) as e:
        raise UnsupportedConversionError(
            type(value),
            target.annotation,
            message=f"Cannot construct {target.annotation!r} from {type(value).__name__}",
        ) from e
