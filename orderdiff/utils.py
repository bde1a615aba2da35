"""Utility functions for orderdiff."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


_MISSING = object()


def is_numeric(value: Any) -> bool:
    """Check if a value is numeric (int or float)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def get_field(obj: Any, name: str, default: Any = _MISSING) -> Any:
    """
    Read a field from a mapping or an attribute from an object.

    Args:
        obj: The item to read from
        name: Key (for mappings) or attribute name
        default: Returned when the field is missing; when omitted a
            KeyError is raised instead

    Returns:
        The field value
    """
    if isinstance(obj, Mapping):
        if name in obj:
            return obj[name]
    else:
        value = getattr(obj, name, _MISSING)
        if value is not _MISSING:
            return value

    if default is _MISSING:
        raise KeyError(name)
    return default


def extract_key_value(obj: Any, key_spec: str | list[str]) -> tuple | None:
    """
    Extract key value(s) from an item based on key specification.

    Args:
        obj: The item to extract key from
        key_spec: Single field name or list of field names for composite key

    Returns:
        Tuple of key values or None if any field is missing
    """
    if isinstance(key_spec, str):
        key_spec = [key_spec]

    values = []
    for name in key_spec:
        try:
            values.append(get_field(obj, name))
        except KeyError:
            return None

    return tuple(values)


def values_equal(old: Any, new: Any) -> bool:
    """Check if two values are equal (handles type coercion for numbers)."""
    if type(old) == type(new):
        return old == new

    # Handle numeric comparison (int vs float)
    if is_numeric(old) and is_numeric(new):
        return float(old) == float(new)

    return old == new


def without_fields(obj: Mapping, names: set[str]) -> dict:
    """Shallow copy of a mapping without the given top-level fields."""
    return {k: v for k, v in obj.items() if k not in names}
