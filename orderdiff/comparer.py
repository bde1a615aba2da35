"""Ordered merge comparison of two collections."""

from __future__ import annotations

import logging
from functools import cmp_to_key
from typing import Any, Iterable, Optional

from .exceptions import ConfigurationError
from .models import (
    ComparerConfig,
    Equivalence,
    ItemCallback,
    KeyOrdering,
    KeySelector,
    PairCallback,
    always_equal,
    ignore_item,
    ignore_pair,
)
from .ordering import ordering_for_type

logger = logging.getLogger(__name__)


def _config_field(name: str, doc: str = None) -> property:
    """Expose a ComparerConfig field as a settable comparer attribute."""
    def getter(self):
        return getattr(self._config, name)

    def setter(self, value):
        self._set(**{name: value})

    return property(getter, setter, doc=doc)


class OrderedDiffComparer:
    """
    Compares two collections by key using sort-then-merge.

    Both inputs are stably sorted by key, then walked side by side:

    1. An item whose key is missing on the other side goes to
       ``on_left_only`` / ``on_right_only``
    2. A same-key pair failing ``full_equivalence`` goes to ``on_mismatch``
    3. A same-key pair passing it is silently consumed

    Duplicate keys pair up in input order: the first left duplicate with
    the first right duplicate, and so on. Leftovers of a run are one-sided.

    Example:
        comparer = OrderedDiffComparer(lambda p: p["name"], key_type=str)
        comparer.on_left_only = removed.append
        comparer.on_right_only = added.append
        comparer.compare(before, after)
    """

    def __init__(
        self,
        key_selector: KeySelector,
        key_ordering: Optional[KeyOrdering] = None,
        *,
        key_type: Optional[type] = None,
        full_equivalence: Equivalence = always_equal,
        on_left_only: ItemCallback = ignore_item,
        on_right_only: ItemCallback = ignore_item,
        on_mismatch: PairCallback = ignore_pair
    ):
        """
        Initialize the comparer.

        Args:
            key_selector: Function extracting the key of an item
            key_ordering: cmp-style ordering of keys; may be omitted when
                ``key_type`` is a naturally orderable type
            key_type: Type of the keys, asserting natural ordering
            full_equivalence: Decides whether a same-key pair is equal
            on_left_only: Called for each left item without right counterpart
            on_right_only: Called for each right item without left counterpart
            on_mismatch: Called with (left, right) for each unequal pair

        Raises:
            ConfigurationError: If no key ordering can be determined
        """
        if key_ordering is None:
            if key_type is None:
                raise ConfigurationError(
                    "key_ordering is required unless key_type is naturally orderable",
                    field="key_ordering"
                )
            key_ordering = ordering_for_type(key_type)
            if key_ordering is None:
                raise ConfigurationError(
                    f"Key type {getattr(key_type, '__name__', key_type)!r} has no natural ordering; "
                    "supply key_ordering explicitly",
                    field="key_ordering"
                )

        config = ComparerConfig(
            key_selector=key_selector,
            key_ordering=key_ordering,
            full_equivalence=full_equivalence,
            on_left_only=on_left_only,
            on_right_only=on_right_only,
            on_mismatch=on_mismatch
        )
        _validate_config(config)
        self._config = config

    @classmethod
    def from_config(cls, config: ComparerConfig) -> OrderedDiffComparer:
        """Create a comparer from a prepared configuration struct."""
        _validate_config(config)
        comparer = cls.__new__(cls)
        comparer._config = config
        return comparer

    @property
    def config(self) -> ComparerConfig:
        """Current configuration snapshot."""
        return self._config

    def with_config(self, **changes) -> OrderedDiffComparer:
        """Return a new comparer with some configuration fields replaced."""
        return self.from_config(self._config.replace(**changes))

    def _set(self, **changes):
        self._config = self._config.replace(**changes)

    key_selector = _config_field("key_selector", "Function extracting the key of an item.")
    key_ordering = _config_field("key_ordering", "cmp-style ordering used for both sorting and merging.")
    full_equivalence = _config_field("full_equivalence", "Predicate deciding whether a same-key pair is equal.")
    on_left_only = _config_field("on_left_only")
    on_right_only = _config_field("on_right_only")
    on_mismatch = _config_field("on_mismatch")

    def compare(
        self,
        left: Iterable[Any],
        right: Iterable[Any],
        config: Optional[ComparerConfig] = None
    ) -> None:
        """
        Compare two collections, reporting outcomes through the callbacks.

        Args:
            left: The left (baseline) items; never modified
            right: The right (candidate) items; never modified
            config: Configuration for this call only (defaults to the
                comparer's own configuration)

        Raises:
            ConfigurationError: If the configuration is unusable. Raised
                before any key is extracted or callback invoked.

        Exceptions raised by the key selector, ordering, equivalence
        predicate or a callback propagate unchanged. Callbacks already
        delivered at that point stand.
        """
        if config is None:
            config = self._config
        _validate_config(config)

        ordering = config.key_ordering
        full_equivalence = config.full_equivalence
        on_left_only = config.on_left_only
        on_right_only = config.on_right_only
        on_mismatch = config.on_mismatch

        lhs = _pre_sort(left, config.key_selector, ordering)
        rhs = _pre_sort(right, config.key_selector, ordering)
        logger.debug("Comparing %d left item(s) with %d right item(s)", len(lhs), len(rhs))

        li = ri = 0
        mismatches = 0
        while li < len(lhs) and ri < len(rhs):
            left_key, left_item = lhs[li]
            right_key, right_item = rhs[ri]
            cp = ordering(left_key, right_key)

            if cp < 0:
                on_left_only(left_item)
                li += 1
            elif cp > 0:
                on_right_only(right_item)
                ri += 1
            else:
                if not full_equivalence(left_item, right_item):
                    mismatches += 1
                    on_mismatch(left_item, right_item)
                li += 1
                ri += 1

        # At most one side has leftovers
        for _, left_item in lhs[li:]:
            on_left_only(left_item)
        for _, right_item in rhs[ri:]:
            on_right_only(right_item)

        logger.debug("Comparison finished with %d mismatch(es)", mismatches)


def _validate_config(config: ComparerConfig):
    """Check that every configured function is callable."""
    if config.key_ordering is None:
        raise ConfigurationError("key_ordering is not set", field="key_ordering")

    for name in (
        "key_selector",
        "key_ordering",
        "full_equivalence",
        "on_left_only",
        "on_right_only",
        "on_mismatch",
    ):
        if not callable(getattr(config, name)):
            raise ConfigurationError(f"{name} must be callable", field=name)


def _pre_sort(
    items: Iterable[Any],
    key_selector: KeySelector,
    ordering: KeyOrdering
) -> list[tuple[Any, Any]]:
    """
    Pair each item with its key and sort the pairs by key.

    ``sorted`` is stable, so items sharing a key keep their input order.
    That order decides which duplicates pair up during the merge.
    """
    sort_key = cmp_to_key(ordering)
    keyed = [(key_selector(item), item) for item in items]
    return sorted(keyed, key=lambda pair: sort_key(pair[0]))


def compare(
    left: Iterable[Any],
    right: Iterable[Any],
    config: ComparerConfig
) -> None:
    """
    Convenience function to run a single ordered comparison.

    Args:
        left: The left items
        right: The right items
        config: Full comparison configuration
    """
    OrderedDiffComparer.from_config(config).compare(left, right)
