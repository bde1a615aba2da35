"""JSONPath utilities for orderdiff."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError


# Cache for compiled JSONPath expressions
@lru_cache(maxsize=256)
def _compile_path(path: str):
    """Compile and cache a JSONPath expression."""
    try:
        return jsonpath_parse(normalize_path(path))
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise ValueError(f"Invalid JSONPath expression '{path}': {e}")


class JSONPathMatcher:
    """Utility class for JSONPath lookups."""

    @classmethod
    def compile(cls, path: str):
        """Compile and cache a JSONPath expression."""
        return _compile_path(path)

    @classmethod
    def find_values(cls, data: Any, path: str) -> list[Any]:
        """Find all values matching a JSONPath expression."""
        expr = cls.compile(path)
        return [m.value for m in expr.find(data)]


def normalize_path(path: str) -> str:
    """Normalize a JSONPath expression."""
    if not path:
        return "$"
    if not path.startswith("$"):
        path = "$." + path
    return path
