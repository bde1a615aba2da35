"""Data models for the orderdiff comparer."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


VERSION = "1.0.0"

KeySelector = Callable[[Any], Any]
KeyOrdering = Callable[[Any, Any], int]
Equivalence = Callable[[Any, Any], bool]
ItemCallback = Callable[[Any], None]
PairCallback = Callable[[Any, Any], None]


def always_equal(left: Any, right: Any) -> bool:
    """Equivalence predicate that accepts every same-key pair."""
    return True


def ignore_item(item: Any) -> None:
    """Callback that discards a one-sided item."""
    return None


def ignore_pair(left: Any, right: Any) -> None:
    """Callback that discards a mismatched pair."""
    return None


class DiffType(Enum):
    LEFT_ONLY = "LEFT_ONLY"
    RIGHT_ONLY = "RIGHT_ONLY"
    MISMATCH = "MISMATCH"


@dataclass(frozen=True)
class ComparerConfig:
    """
    Configuration for a single ordered comparison.

    The struct is immutable: a comparison takes one snapshot of it when it
    starts and keeps that snapshot until the scan finishes.
    """
    key_selector: KeySelector
    key_ordering: Optional[KeyOrdering] = None
    full_equivalence: Equivalence = always_equal
    on_left_only: ItemCallback = ignore_item
    on_right_only: ItemCallback = ignore_item
    on_mismatch: PairCallback = ignore_pair

    def replace(self, **changes) -> ComparerConfig:
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)


@dataclass
class DiffEntry:
    """A single outcome reported by the comparer."""
    type: DiffType
    key: Any
    left: Any = None
    right: Any = None
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "key": self.key,
            "left": self.left,
            "right": self.right,
            "message": self.message,
        }


@dataclass
class ExecutionInfo:
    """Execution metadata."""
    duration_ms: int
    timestamp: str
    version: str = VERSION

    def to_dict(self) -> dict:
        return {
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp,
            "version": self.version,
        }


@dataclass
class Summary:
    """Summary statistics of a comparison."""
    left_count: int = 0
    right_count: int = 0
    left_only: int = 0
    right_only: int = 0
    mismatches: int = 0

    @property
    def matched(self) -> int:
        """Number of same-key pairs that passed the equivalence check."""
        return self.left_count - self.left_only - self.mismatches

    def to_dict(self) -> dict:
        return {
            "left_count": self.left_count,
            "right_count": self.right_count,
            "left_only": self.left_only,
            "right_only": self.right_only,
            "mismatches": self.mismatches,
            "matched": self.matched,
        }


@dataclass
class DiffReport:
    """Complete comparison report."""
    is_match: bool
    summary: Summary
    execution: Optional[ExecutionInfo] = None
    diffs: list[DiffEntry] = field(default_factory=list)

    def by_type(self, diff_type: DiffType) -> list[DiffEntry]:
        return [d for d in self.diffs if d.type == diff_type]

    def to_dict(self) -> dict:
        result = {
            "is_match": self.is_match,
            "summary": self.summary.to_dict(),
            "diffs": [d.to_dict() for d in self.diffs],
        }
        if self.execution:
            result["execution"] = self.execution.to_dict()
        return result


@dataclass(frozen=True)
class ValueRules:
    """Rules applied when comparing two field values."""
    precision: Optional[float] = None
    case_insensitive: bool = False
    trim_whitespace: bool = False
