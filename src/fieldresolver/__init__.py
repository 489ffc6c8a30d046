from fieldresolver.resolution import default_resolver
from fieldresolver.resolution.destinations import (
    UNSET,
    Destination,
    FieldDestination,
    Slot,
    field_destinations,
)
from fieldresolver.resolution.exceptions import (
    ConversionError,
    DuplicateResolverError,
    PrimitiveParseError,
    UnsupportedConversionError,
)
from fieldresolver.resolution.kinds import (
    Float32,
    Float64,
    FloatWidth,
    Int8,
    Int16,
    Int32,
    Int64,
    IntWidth,
    Kind,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from fieldresolver.resolution.registry import (
    FunctionReflectResolver,
    FunctionTypeResolver,
    ReflectResolver,
    TypeResolver,
)
from fieldresolver.resolution.resolver import ValueResolver
from fieldresolver.resolution.text import TextUnmarshaler, TextUnmarshalerReflectResolver
from fieldresolver.resolution.times import (
    RFC3339,
    DurationTypeResolver,
    TimeTypeResolver,
    parse_duration,
)
from fieldresolver._version import __version__

__all__ = [
    "ValueResolver",
    "default_resolver",
    "Destination",
    "Slot",
    "FieldDestination",
    "field_destinations",
    "UNSET",
    "TypeResolver",
    "ReflectResolver",
    "FunctionTypeResolver",
    "FunctionReflectResolver",
    "TimeTypeResolver",
    "DurationTypeResolver",
    "TextUnmarshaler",
    "TextUnmarshalerReflectResolver",
    "RFC3339",
    "parse_duration",
    "Kind",
    "IntWidth",
    "FloatWidth",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
    "ConversionError",
    "UnsupportedConversionError",
    "PrimitiveParseError",
    "DuplicateResolverError",
    "__version__",
]
