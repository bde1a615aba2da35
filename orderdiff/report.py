"""Collecting comparer callbacks into a DiffReport."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from .comparer import OrderedDiffComparer
from .models import (
    ComparerConfig,
    DiffEntry,
    DiffReport,
    DiffType,
    Equivalence,
    ExecutionInfo,
    KeyOrdering,
    KeySelector,
    Summary,
    always_equal,
)


class DiffCollector:
    """
    Records comparer outcomes as DiffEntry objects.

    The collector exposes the three callbacks expected by
    OrderedDiffComparer; ``attach`` wires them into a configuration.

    Usage:
        collector = DiffCollector(key_selector=field_key("id"))
        comparer.compare(left, right, collector.attach(comparer.config))
        report = collector.report(len(left), len(right))
    """

    def __init__(
        self,
        key_selector: KeySelector,
        describe: Optional[Callable[[Any, Any], str]] = None
    ):
        """
        Args:
            key_selector: Used to label each entry with its key
            describe: Optional function producing a message for a mismatch
        """
        self.key_selector = key_selector
        self.describe = describe
        self.diffs: list[DiffEntry] = []

    def on_left_only(self, item: Any):
        self.diffs.append(DiffEntry(
            type=DiffType.LEFT_ONLY,
            key=self.key_selector(item),
            left=item,
            message="Item only present on left"
        ))

    def on_right_only(self, item: Any):
        self.diffs.append(DiffEntry(
            type=DiffType.RIGHT_ONLY,
            key=self.key_selector(item),
            right=item,
            message="Item only present on right"
        ))

    def on_mismatch(self, left: Any, right: Any):
        message = self.describe(left, right) if self.describe else "Items differ"
        self.diffs.append(DiffEntry(
            type=DiffType.MISMATCH,
            key=self.key_selector(left),
            left=left,
            right=right,
            message=message
        ))

    def attach(self, config: ComparerConfig) -> ComparerConfig:
        """Return ``config`` with this collector's callbacks wired in."""
        return config.replace(
            on_left_only=self.on_left_only,
            on_right_only=self.on_right_only,
            on_mismatch=self.on_mismatch
        )

    def clear(self):
        self.diffs = []

    def report(
        self,
        left_count: int,
        right_count: int,
        execution: Optional[ExecutionInfo] = None
    ) -> DiffReport:
        """Build a report from the entries recorded so far."""
        summary = Summary(
            left_count=left_count,
            right_count=right_count,
            left_only=sum(1 for d in self.diffs if d.type == DiffType.LEFT_ONLY),
            right_only=sum(1 for d in self.diffs if d.type == DiffType.RIGHT_ONLY),
            mismatches=sum(1 for d in self.diffs if d.type == DiffType.MISMATCH)
        )
        return DiffReport(
            is_match=not self.diffs,
            summary=summary,
            execution=execution,
            diffs=list(self.diffs)
        )


def diff(
    left: Iterable[Any],
    right: Iterable[Any],
    key_selector: KeySelector,
    key_ordering: Optional[KeyOrdering] = None,
    *,
    key_type: Optional[type] = None,
    full_equivalence: Equivalence = always_equal,
    describe: Optional[Callable[[Any, Any], str]] = None
) -> DiffReport:
    """
    Convenience function to compare two collections into a DiffReport.

    Args:
        left: The left (baseline) items
        right: The right (candidate) items
        key_selector: Function extracting the key of an item
        key_ordering: cmp-style key ordering (or pass ``key_type``)
        key_type: Naturally orderable key type
        full_equivalence: Decides whether a same-key pair is equal
        describe: Optional mismatch message builder

    Returns:
        DiffReport with one entry per reported outcome, in key order
    """
    start_time = time.time()
    left = list(left)
    right = list(right)

    comparer = OrderedDiffComparer(
        key_selector,
        key_ordering,
        key_type=key_type,
        full_equivalence=full_equivalence
    )
    collector = DiffCollector(key_selector, describe)
    comparer.compare(left, right, collector.attach(comparer.config))

    execution = ExecutionInfo(
        duration_ms=int((time.time() - start_time) * 1000),
        timestamp=datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
    )
    return collector.report(len(left), len(right), execution)
