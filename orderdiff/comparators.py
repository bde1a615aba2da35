"""Full-equivalence predicates and value comparison functions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Optional

from .jsonpath_utils import JSONPathMatcher
from .models import Equivalence, ValueRules
from .utils import get_field, is_numeric, values_equal, without_fields


_MISSING = object()


def compare_numbers(
    old: float,
    new: float,
    precision: Optional[float] = None
) -> tuple[bool, str]:
    """
    Compare two numbers, allowing a difference of up to ``precision``.

    Returns:
        Tuple of (is_match, message)
    """
    diff = abs(old - new)
    if precision is None:
        if diff == 0:
            return True, ""
        return False, f"Values differ: {old} != {new}"

    if diff <= precision:
        return True, ""
    return False, f"Value difference ({diff}) exceeds precision tolerance ({precision})"


def compare_strings(
    old: str,
    new: str,
    rules: ValueRules
) -> tuple[bool, str]:
    """
    Compare two string values, optionally ignoring case and outer whitespace.

    Returns:
        Tuple of (is_match, message)
    """
    old_str = str(old) if old is not None else ""
    new_str = str(new) if new is not None else ""

    if rules.trim_whitespace:
        old_str = old_str.strip()
        new_str = new_str.strip()

    if rules.case_insensitive:
        old_str = old_str.casefold()
        new_str = new_str.casefold()

    if old_str == new_str:
        return True, ""

    return False, f"Values differ: '{old}' != '{new}'"


def compare_with_rules(
    old: Any,
    new: Any,
    rules: ValueRules
) -> tuple[bool, str]:
    """
    Compare two values using the value rules.

    Returns:
        Tuple of (is_match, message)
    """
    if old is None and new is None:
        return True, ""
    if old is None:
        return False, f"Left value is null, right value is '{new}'"
    if new is None:
        return False, f"Left value is '{old}', right value is null"

    if rules.precision is not None and is_numeric(old) and is_numeric(new):
        return compare_numbers(old, new, rules.precision)

    if isinstance(old, str) and isinstance(new, str):
        return compare_strings(old, new, rules)

    if values_equal(old, new):
        return True, ""

    return False, f"Values differ: {old!r} != {new!r}"


def field_differences(
    left: Any,
    right: Any,
    names: Iterable[str],
    rules: ValueRules = ValueRules()
) -> list[str]:
    """
    List the differences between two items over the given fields.

    Returns:
        One message per differing field, empty when the items agree
    """
    messages = []
    for name in names:
        old = get_field(left, name, _MISSING)
        new = get_field(right, name, _MISSING)

        if old is _MISSING and new is _MISSING:
            continue
        if old is _MISSING:
            messages.append(f"{name}: missing on left")
            continue
        if new is _MISSING:
            messages.append(f"{name}: missing on right")
            continue

        is_match, message = compare_with_rules(old, new, rules)
        if not is_match:
            messages.append(f"{name}: {message}")
    return messages


def fields_equal(
    *names: str,
    precision: Optional[float] = None,
    case_insensitive: bool = False,
    trim_whitespace: bool = False
) -> Equivalence:
    """
    Build a predicate comparing only the listed fields of two items.

    Example:
        fields_equal("quantity", "unit_price", precision=0.001)
    """
    if not names:
        raise ValueError("fields_equal() requires at least one field name")
    rules = ValueRules(
        precision=precision,
        case_insensitive=case_insensitive,
        trim_whitespace=trim_whitespace
    )

    def equivalent(left: Any, right: Any) -> bool:
        return not field_differences(left, right, names, rules)

    return equivalent


def ignoring_fields(*names: str, rules: ValueRules = ValueRules()) -> Equivalence:
    """
    Build a predicate comparing whole mappings except the listed fields.

    Useful for volatile fields such as timestamps or revision counters.
    """
    ignored = set(names)

    def equivalent(left: Mapping, right: Mapping) -> bool:
        old = without_fields(left, ignored)
        new = without_fields(right, ignored)
        if rules == ValueRules():
            return old == new
        fields = list(old) + [k for k in new if k not in old]
        return not field_differences(old, new, fields, rules)

    return equivalent


def jsonpath_equal(*paths: str) -> Equivalence:
    """Build a predicate comparing all matches of the given JSONPaths."""
    if not paths:
        raise ValueError("jsonpath_equal() requires at least one path")
    for path in paths:
        JSONPathMatcher.compile(path)

    def equivalent(left: Any, right: Any) -> bool:
        for path in paths:
            if JSONPathMatcher.find_values(left, path) != JSONPathMatcher.find_values(right, path):
                return False
        return True

    return equivalent
