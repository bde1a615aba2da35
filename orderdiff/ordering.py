"""Key orderings for the orderdiff comparer.

Every ordering is a function ``(a, b) -> int`` following the ``cmp``
convention understood by :func:`functools.cmp_to_key`: negative when ``a``
sorts before ``b``, zero when they are equal, positive otherwise.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from .exceptions import KeyOrderingError
from .models import KeyOrdering


# Types that define rich comparisons but do not order their instances
# (or only partially order them, as subset comparison does for sets).
_UNORDERABLE_TYPES = (dict, set, frozenset, complex, type(None))


def natural_ordering(a: Any, b: Any) -> int:
    """Order two keys by their own ``<`` operator."""
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def is_naturally_orderable(tp: Any) -> bool:
    """
    Check whether instances of ``tp`` carry their own total ordering.

    Args:
        tp: A class, typically the key type asserted by the caller

    Returns:
        True when the class defines ``__lt__`` itself (or inherits it from a
        class other than ``object``) and is not a known unorderable type
    """
    if not isinstance(tp, type):
        return False
    if issubclass(tp, _UNORDERABLE_TYPES):
        return False
    return getattr(tp, "__lt__", object.__lt__) is not object.__lt__


def ordering_for_type(tp: Any) -> Optional[KeyOrdering]:
    """Return the natural ordering for ``tp``, or None if it has none."""
    if is_naturally_orderable(tp):
        return natural_ordering
    return None


def reverse_ordering(ordering: KeyOrdering = natural_ordering) -> KeyOrdering:
    """Invert an ordering (descending keys)."""
    def reversed_cmp(a: Any, b: Any) -> int:
        return ordering(b, a)
    return reversed_cmp


def by(projection: Callable[[Any], Any], ordering: KeyOrdering = natural_ordering) -> KeyOrdering:
    """Order keys by a projection of each key."""
    def projected_cmp(a: Any, b: Any) -> int:
        return ordering(projection(a), projection(b))
    return projected_cmp


def casefold_ordering(a: str, b: str) -> int:
    """Case-insensitive ordering for string keys."""
    return natural_ordering(a.casefold(), b.casefold())


def chain_orderings(*orderings: KeyOrdering) -> KeyOrdering:
    """
    Combine orderings lexicographically.

    Each ordering is applied to the same pair of keys until one of them
    reports a difference.
    """
    if not orderings:
        raise ValueError("chain_orderings() requires at least one ordering")

    def chained_cmp(a: Any, b: Any) -> int:
        for ordering in orderings:
            result = ordering(a, b)
            if result:
                return result
        return 0
    return chained_cmp


def tuple_ordering(*orderings: KeyOrdering) -> KeyOrdering:
    """
    Order composite (tuple) keys element by element.

    The n-th ordering compares the n-th elements; elements beyond the given
    orderings use the natural ordering. A key that is a prefix of a longer
    one sorts first.
    """
    def tuple_cmp(a: tuple, b: tuple) -> int:
        for i, (left, right) in enumerate(zip(a, b)):
            ordering = orderings[i] if i < len(orderings) else natural_ordering
            result = ordering(left, right)
            if result:
                return result
        return natural_ordering(len(a), len(b))
    return tuple_cmp


def nulls_first(ordering: KeyOrdering = natural_ordering) -> KeyOrdering:
    """Wrap an ordering so that None keys sort before every other key."""
    def cmp(a: Any, b: Any) -> int:
        if a is None or b is None:
            return (a is not None) - (b is not None)
        return ordering(a, b)
    return cmp


def nulls_last(ordering: KeyOrdering = natural_ordering) -> KeyOrdering:
    """Wrap an ordering so that None keys sort after every other key."""
    def cmp(a: Any, b: Any) -> int:
        if a is None or b is None:
            return (a is None) - (b is None)
        return ordering(a, b)
    return cmp


def checked_ordering(ordering: KeyOrdering = natural_ordering) -> KeyOrdering:
    """
    Wrap an ordering so that incomparable keys raise KeyOrderingError.

    Keys of unrelated types (``1`` against ``"a"``) make ``<`` raise
    TypeError; the wrapper reports them with both keys attached.
    """
    def cmp(a: Any, b: Any) -> int:
        try:
            return ordering(a, b)
        except TypeError as e:
            raise KeyOrderingError(a, b, str(e)) from e
    return cmp
