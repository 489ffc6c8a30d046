from typing import Any, get_args, get_origin


def _get_type_params_for_base(tp: Any, base: type) -> tuple[Any, ...] | None:
    """Internal implementation of get_type_params_for_base."""
    origin = get_origin(tp) or tp
    args = get_args(tp) or ()

    if origin is base:
        return args

    params = getattr(origin, "__parameters__", ())
    substitutions = dict(zip(params, args, strict=True)) if args else {}

    for orig_base in getattr(origin, "__orig_bases__", ()):
        base_origin = get_origin(orig_base) or orig_base
        base_args = get_args(orig_base)
        resolved_base_args = tuple(substitutions.get(arg, arg) for arg in base_args)
        resolved_base = base_origin[resolved_base_args] if resolved_base_args else base_origin
        base_resolution = _get_type_params_for_base(resolved_base, base)
        if base_resolution is not None:
            return base_resolution

    return None


def get_type_params_for_base(tp: Any, base: type) -> tuple[Any, ...]:
    """Extract type parameters for a base type from a parameterized type.

    Args:
        tp: A potentially parameterized type (e.g., list[int], IntList).
        base: The base type to extract parameters for (e.g., list, set).

    Returns:
        A tuple of type parameters for the base type. Empty when the base
        appears unparameterized, or only through a plain subclass.

    Raises:
        TypeError: If tp is not a subclass of base.

    Examples:
        >>> get_type_params_for_base(list[int], list)
        (<class 'int'>,)

        >>> class IntList(list[int]): ...
        >>> get_type_params_for_base(IntList, list)
        (<class 'int'>,)
    """
    result = _get_type_params_for_base(tp, base)
    if result is not None:
        return result
    origin = get_origin(tp) or tp
    if isinstance(origin, type) and issubclass(origin, base):
        return ()
    raise TypeError(f"Type {tp} is not a subclass of {base}")


def get_element_type(tp: Any, base: type) -> Any:
    """Return the element type of a homogeneous container type, or Any if unknown.

    ``tuple[int, ...]`` has element type ``int``; a fixed-shape tuple such as
    ``tuple[int, str]`` has no single element type and yields Any.
    """
    params = get_type_params_for_base(tp, base)
    match params:
        case (element,):
            return element
        case (element, ellipsis) if ellipsis is Ellipsis:
            return element
        case _:
            return Any
