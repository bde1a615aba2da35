"""Tests for the ordered merge comparer."""

from dataclasses import FrozenInstanceError, dataclass

import pytest
from orderdiff import (
    OrderedDiffComparer,
    ComparerConfig,
    ConfigurationError,
    compare,
    natural_ordering,
    reverse_ordering,
    field_key,
    identity_key,
)


class Recorder:
    """Collects callback invocations in call order."""

    def __init__(self):
        self.calls = []

    def left_only(self, item):
        self.calls.append(("left", item))

    def right_only(self, item):
        self.calls.append(("right", item))

    def mismatch(self, left, right):
        self.calls.append(("mismatch", left, right))

    def wire(self, comparer):
        comparer.on_left_only = self.left_only
        comparer.on_right_only = self.right_only
        comparer.on_mismatch = self.mismatch
        return comparer


def value_equal(left, right):
    return left["v"] == right["v"]


class TestBasicComparison:
    """Test the merge-join scan outcomes."""

    def setup_method(self):
        self.recorder = Recorder()
        self.comparer = self.recorder.wire(
            OrderedDiffComparer(identity_key, key_type=int)
        )

    def test_disjoint_sets(self):
        """Test that disjoint keys are all reported one-sided, in order."""
        self.comparer.compare([1, 3, 5], [2, 4, 6])

        assert self.recorder.calls == [
            ("left", 1),
            ("right", 2),
            ("left", 3),
            ("right", 4),
            ("left", 5),
            ("right", 6),
        ]

    def test_unsorted_inputs_are_sorted(self):
        """Test that input order is irrelevant."""
        self.comparer.compare([5, 1, 3], [6, 2, 4])

        lefts = [c[1] for c in self.recorder.calls if c[0] == "left"]
        rights = [c[1] for c in self.recorder.calls if c[0] == "right"]
        assert lefts == [1, 3, 5]
        assert rights == [2, 4, 6]

    def test_both_empty(self):
        """Test that two empty inputs produce no callbacks."""
        self.comparer.compare([], [])
        assert self.recorder.calls == []

    def test_left_empty(self):
        """Test that every right item is right-only when left is empty."""
        self.comparer.compare([], [3, 1, 2])
        assert self.recorder.calls == [("right", 1), ("right", 2), ("right", 3)]

    def test_right_empty(self):
        """Test that every left item is left-only when right is empty."""
        self.comparer.compare([2, 1], [])
        assert self.recorder.calls == [("left", 1), ("left", 2)]

    def test_trailing_items_after_other_side_exhausts(self):
        """Test leftovers after one side runs out."""
        self.comparer.compare([1, 2, 7, 8], [1, 2])
        assert self.recorder.calls == [("left", 7), ("left", 8)]

    def test_generators_accepted(self):
        """Test that any finite iterable can be compared."""
        self.comparer.compare((x for x in [1, 2]), iter([2, 3]))
        assert self.recorder.calls == [("left", 1), ("right", 3)]


class TestFullEquivalence:
    """Test same-key pairs and the equivalence predicate."""

    def setup_method(self):
        self.recorder = Recorder()
        self.comparer = self.recorder.wire(
            OrderedDiffComparer(
                field_key("id"),
                natural_ordering,
                full_equivalence=value_equal
            )
        )

    def test_full_match(self):
        """Test that equal pairs trigger no callback."""
        self.comparer.compare([{"id": 1, "v": "x"}], [{"id": 1, "v": "x"}])
        assert self.recorder.calls == []

    def test_mismatch_argument_order(self):
        """Test that a mismatch fires once with (left, right)."""
        left = {"id": 1, "v": "x"}
        right = {"id": 1, "v": "y"}

        self.comparer.compare([left], [right])

        assert self.recorder.calls == [("mismatch", left, right)]
        assert self.recorder.calls[0][1] is left
        assert self.recorder.calls[0][2] is right

    def test_default_equivalence_accepts_everything(self):
        """Test that without a predicate same-key pairs always match."""
        comparer = self.recorder.wire(OrderedDiffComparer(field_key("id"), key_type=int))
        comparer.compare([{"id": 1, "v": "x"}], [{"id": 1, "v": "y"}])
        assert self.recorder.calls == []

    def test_mixed_outcomes_in_key_order(self):
        """Test that callbacks fire in non-decreasing key order."""
        left = [{"id": 4, "v": "a"}, {"id": 1, "v": "a"}, {"id": 2, "v": "a"}]
        right = [{"id": 2, "v": "b"}, {"id": 3, "v": "a"}, {"id": 4, "v": "a"}]

        self.comparer.compare(left, right)

        assert self.recorder.calls == [
            ("left", {"id": 1, "v": "a"}),
            ("mismatch", {"id": 2, "v": "a"}, {"id": 2, "v": "b"}),
            ("right", {"id": 3, "v": "a"}),
        ]


class TestDuplicateKeys:
    """Test pairing of duplicate keys."""

    def setup_method(self):
        self.recorder = Recorder()
        self.comparer = self.recorder.wire(
            OrderedDiffComparer(
                lambda item: item[0],
                key_type=int,
                full_equivalence=lambda a, b: a == b
            )
        )

    def test_leftmost_pairs_with_leftmost(self):
        """Test that the first left duplicate pairs with the first right one."""
        self.comparer.compare([(1, "a"), (1, "b")], [(1, "a")])
        assert self.recorder.calls == [("left", (1, "b"))]

    def test_excess_right_duplicates(self):
        """Test that unpaired right duplicates are right-only."""
        self.comparer.compare([(1, "a")], [(1, "a"), (1, "c"), (1, "d")])
        assert self.recorder.calls == [("right", (1, "c")), ("right", (1, "d"))]

    def test_duplicates_keep_input_order(self):
        """Test that stable sorting preserves relative order of duplicates."""
        self.comparer.compare(
            [(2, "z"), (1, "b"), (2, "y"), (1, "a")],
            [(1, "a"), (1, "b"), (2, "y"), (2, "z")]
        )
        assert self.recorder.calls == [
            ("mismatch", (1, "b"), (1, "a")),
            ("mismatch", (1, "a"), (1, "b")),
            ("mismatch", (2, "z"), (2, "y")),
            ("mismatch", (2, "y"), (2, "z")),
        ]

    def test_duplicate_run_then_new_key(self):
        """Test that a longer duplicate run spills before the next key."""
        self.comparer.compare([(1, "a"), (1, "b"), (2, "c")], [(1, "a"), (2, "c")])
        assert self.recorder.calls == [("left", (1, "b"))]


class TestCompleteness:
    """Test that every item is accounted for exactly once."""

    def test_each_item_reported_at_most_once(self):
        left = [(k % 7, i) for i, k in enumerate(range(0, 40, 3))]
        right = [(k % 5, i) for i, k in enumerate(range(0, 30, 2))]
        lefts, rights, pairs = [], [], []

        comparer = OrderedDiffComparer(
            lambda item: item[0],
            key_type=int,
            full_equivalence=lambda a, b: False,
            on_left_only=lefts.append,
            on_right_only=rights.append,
            on_mismatch=lambda a, b: pairs.append((a, b))
        )
        comparer.compare(left, right)

        seen_left = lefts + [a for a, _ in pairs]
        seen_right = rights + [b for _, b in pairs]
        assert sorted(seen_left) == sorted(left)
        assert sorted(seen_right) == sorted(right)
        assert all(a[0] == b[0] for a, b in pairs)

    def test_inputs_not_mutated(self):
        left = [3, 1, 2]
        right = (2, 5)
        OrderedDiffComparer(identity_key, key_type=int).compare(left, right)
        assert left == [3, 1, 2]
        assert right == (2, 5)

    def test_idempotent(self):
        """Test that repeated runs give identical callback sequences."""
        recorder = Recorder()
        comparer = recorder.wire(
            OrderedDiffComparer(field_key("id"), key_type=int, full_equivalence=value_equal)
        )
        left = [{"id": 2, "v": "x"}, {"id": 1, "v": "x"}]
        right = [{"id": 2, "v": "y"}, {"id": 3, "v": "x"}]

        comparer.compare(left, right)
        first = list(recorder.calls)
        recorder.calls.clear()
        comparer.compare(left, right)

        assert recorder.calls == first
        assert len(first) == 3


class TestOrderingConfiguration:
    """Test key ordering selection."""

    def test_missing_ordering_fails_at_construction(self):
        with pytest.raises(ConfigurationError) as exc_info:
            OrderedDiffComparer(identity_key)
        assert exc_info.value.field == "key_ordering"

    def test_unorderable_key_type_fails_at_construction(self):
        with pytest.raises(ConfigurationError):
            OrderedDiffComparer(identity_key, key_type=dict)

    def test_plain_class_is_not_orderable(self):
        class Token:
            pass

        with pytest.raises(ConfigurationError):
            OrderedDiffComparer(identity_key, key_type=Token)

    def test_ordered_dataclass_is_orderable(self):
        @dataclass(order=True, frozen=True)
        class Version:
            major: int
            minor: int

        calls = []
        comparer = OrderedDiffComparer(
            identity_key,
            key_type=Version,
            on_left_only=calls.append
        )
        comparer.compare([Version(2, 0), Version(1, 5)], [])
        assert calls == [Version(1, 5), Version(2, 0)]

    def test_explicit_ordering_overrides_natural(self):
        calls = []
        comparer = OrderedDiffComparer(
            identity_key,
            reverse_ordering(),
            on_left_only=calls.append
        )
        comparer.compare([1, 3, 2], [])
        assert calls == [3, 2, 1]

    def test_unset_ordering_fails_before_callbacks(self):
        """Test that clearing the ordering is caught before any callback."""
        recorder = Recorder()
        comparer = recorder.wire(OrderedDiffComparer(identity_key, key_type=int))
        comparer.key_ordering = None

        with pytest.raises(ConfigurationError):
            comparer.compare([1, 2], [3])
        assert recorder.calls == []

    def test_non_callable_callback_rejected(self):
        comparer = OrderedDiffComparer(identity_key, key_type=int)
        comparer.on_mismatch = "not callable"

        with pytest.raises(ConfigurationError) as exc_info:
            comparer.compare([1], [1])
        assert exc_info.value.field == "on_mismatch"

    def test_key_selector_must_be_callable(self):
        with pytest.raises(ConfigurationError):
            OrderedDiffComparer("id", key_type=int)


class TestErrorPropagation:
    """Test that user function failures propagate unchanged."""

    def test_key_selector_error_propagates(self):
        def broken(item):
            raise LookupError("no key")

        comparer = OrderedDiffComparer(broken, key_type=int)
        with pytest.raises(LookupError, match="no key"):
            comparer.compare([1], [])

    def test_callback_error_keeps_delivered_calls(self):
        """Test that callbacks fired before a failure are not undone."""
        delivered = []

        def on_left_only(item):
            if item == 3:
                raise RuntimeError("sink full")
            delivered.append(item)

        comparer = OrderedDiffComparer(identity_key, key_type=int, on_left_only=on_left_only)
        with pytest.raises(RuntimeError, match="sink full"):
            comparer.compare([1, 2, 3, 4], [])
        assert delivered == [1, 2]

    def test_equivalence_error_propagates(self):
        def explode(a, b):
            raise ValueError("bad pair")

        comparer = OrderedDiffComparer(identity_key, key_type=int, full_equivalence=explode)
        with pytest.raises(ValueError, match="bad pair"):
            comparer.compare([1], [1])


class TestConfigStruct:
    """Test the immutable configuration struct."""

    def test_compare_with_call_config(self):
        """Test that a per-call config overrides the comparer's own."""
        calls = []
        comparer = OrderedDiffComparer(identity_key, key_type=int)
        config = comparer.config.replace(on_right_only=calls.append)

        comparer.compare([], [2, 1], config)

        assert calls == [1, 2]
        assert comparer.on_right_only is not calls.append

    def test_with_config_returns_new_comparer(self):
        calls = []
        base = OrderedDiffComparer(identity_key, key_type=int)
        wired = base.with_config(on_left_only=calls.append)

        base.compare([1], [])
        assert calls == []
        wired.compare([1], [])
        assert calls == [1]

    def test_config_is_frozen(self):
        config = ComparerConfig(key_selector=identity_key, key_ordering=natural_ordering)
        with pytest.raises(FrozenInstanceError):
            config.key_ordering = None

    def test_module_compare_function(self):
        calls = []
        compare(
            ["b", "a"],
            ["c"],
            ComparerConfig(
                key_selector=identity_key,
                key_ordering=natural_ordering,
                on_left_only=calls.append,
                on_right_only=calls.append
            )
        )
        assert calls == ["a", "b", "c"]

    def test_from_config_without_ordering(self):
        with pytest.raises(ConfigurationError):
            OrderedDiffComparer.from_config(ComparerConfig(key_selector=identity_key))

    def test_callback_mutating_config_does_not_affect_running_scan(self):
        """Test that a scan keeps the configuration it started with."""
        calls = []
        comparer = OrderedDiffComparer(identity_key, key_type=int)

        def on_left_only(item):
            calls.append(("first", item))
            comparer.on_left_only = lambda i: calls.append(("second", i))

        comparer.on_left_only = on_left_only
        comparer.compare([1, 2], [])
        assert calls == [("first", 1), ("first", 2)]

        comparer.compare([3], [])
        assert calls[-1] == ("second", 3)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
