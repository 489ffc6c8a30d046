from fieldresolver.resolution.resolver import ValueResolver
from fieldresolver.resolution.text import TextUnmarshalerReflectResolver
from fieldresolver.resolution.times import DurationTypeResolver, TimeTypeResolver

default_resolver = ValueResolver(
    TimeTypeResolver(),
    DurationTypeResolver(),
    TextUnmarshalerReflectResolver(),
)
