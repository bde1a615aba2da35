"""Key selector builders."""

from __future__ import annotations

from typing import Any

from .exceptions import KeyExtractionError
from .jsonpath_utils import JSONPathMatcher
from .models import KeySelector
from .utils import extract_key_value


def identity_key(item: Any) -> Any:
    """The item is its own key."""
    return item


def field_key(*names: str) -> KeySelector:
    """
    Build a selector reading one or more fields of each item.

    Works on mappings (by key) and plain objects (by attribute). A single
    field yields the bare value; several fields yield a composite tuple.

    Example:
        field_key("sku")                 # item["sku"]
        field_key("region", "account")   # (item["region"], item["account"])
    """
    if not names:
        raise ValueError("field_key() requires at least one field name")
    key_spec = list(names)

    def select(item: Any) -> Any:
        values = extract_key_value(item, key_spec)
        if values is None:
            raise KeyExtractionError(key_spec, item, "missing field")
        return values[0] if len(values) == 1 else values

    return select


def jsonpath_key(*paths: str) -> KeySelector:
    """
    Build a selector evaluating one or more JSONPath expressions.

    Each expression contributes its first match. A single path yields the
    bare value; several yield a composite tuple.
    """
    if not paths:
        raise ValueError("jsonpath_key() requires at least one path")
    # Fail on malformed expressions now rather than mid-scan
    for path in paths:
        JSONPathMatcher.compile(path)

    def select(item: Any) -> Any:
        values = []
        for path in paths:
            found = JSONPathMatcher.find_values(item, path)
            if not found:
                raise KeyExtractionError(path, item, "no match")
            values.append(found[0])
        return values[0] if len(values) == 1 else tuple(values)

    return select
