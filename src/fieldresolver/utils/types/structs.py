"""Field introspection for struct-like classes.

Dataclasses, attrs classes and pydantic models each describe their fields
differently. The helpers here give one view over all three, which is what
struct convertibility and field destinations are built on.
"""

import dataclasses
from typing import Any, ClassVar, get_origin, get_type_hints

import attr
from pydantic import BaseModel
from typing_extensions import get_annotations

#: Ordered ``(name, annotation)`` pairs describing a struct's fields.
StructFields = tuple[tuple[str, Any], ...]


def struct_fields(tp: Any) -> StructFields | None:
    """Return the declared fields of a dataclass, attrs class or pydantic model.

    Args:
        tp: The class to inspect.

    Returns:
        The fields in declaration order, or None if tp isn't one of the
        supported struct flavours.
    """
    if not isinstance(tp, type):
        return None
    if dataclasses.is_dataclass(tp):
        hints = get_type_hints(tp, include_extras=True)
        return tuple((f.name, hints.get(f.name, f.type)) for f in dataclasses.fields(tp))
    if attr.has(tp):
        attr.resolve_types(tp)
        return tuple((a.name, a.type) for a in attr.fields(tp))
    if issubclass(tp, BaseModel):
        return tuple((name, info.annotation) for name, info in tp.model_fields.items())
    return None


def struct_values(value: Any) -> dict[str, Any]:
    """Read the field values of a struct instance into a dict keyed by field name."""
    fields = struct_fields(type(value)) or ()
    return {name: getattr(value, name) for name, _ in fields}


def _is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _declaring_class(cls: type, name: str) -> type | None:
    return next(
        (klass for klass in cls.__mro__ if name in get_annotations(klass)),
        None,
    )


def annotated_field_names(cls: type) -> list[str]:
    """List the public, non-ClassVar annotated attributes of a class, base classes first."""
    names: dict[str, None] = {}
    for klass in reversed(cls.__mro__):
        for name, annotation in get_annotations(klass).items():
            if name.startswith("_") or _is_classvar(annotation):
                continue
            names[name] = None
    return list(names)


def field_annotation(cls: type, name: str) -> Any:
    """Resolve the annotation of one attribute of a class.

    Only the class declaring the attribute has its annotations evaluated, so
    unresolvable annotations elsewhere in the hierarchy don't get in the way.

    Raises:
        AttributeError: If no class in the MRO annotates ``name``.
    """
    klass = _declaring_class(cls, name)
    if klass is None:
        raise AttributeError(f"{cls.__name__} has no annotated field {name!r}")
    return get_annotations(klass, eval_str=True)[name]
