"""
orderdiff - Ordered merge comparison of keyed collections

Sorts two collections by a caller-supplied key and walks them side by side,
reporting items present on one side only and same-key pairs whose content
differs through caller-supplied callbacks.
"""

from .comparer import OrderedDiffComparer, compare
from .models import (
    VERSION,
    ComparerConfig,
    DiffReport,
    DiffEntry,
    DiffType,
    Summary,
    ValueRules,
    always_equal,
    ignore_item,
    ignore_pair,
)
from .exceptions import (
    OrderDiffError,
    ConfigurationError,
    KeyExtractionError,
    DefinitionError,
    DefinitionParseError,
    KeyOrderingError,
)
from .ordering import (
    natural_ordering,
    reverse_ordering,
    chain_orderings,
    tuple_ordering,
    casefold_ordering,
    nulls_first,
    nulls_last,
    by,
    is_naturally_orderable,
    checked_ordering,
)
from .selectors import identity_key, field_key, jsonpath_key
from .comparators import fields_equal, ignoring_fields, jsonpath_equal
from .report import DiffCollector, diff
from .runner import (
    ComparisonDefinition,
    DatasetRunner,
    ScenarioResult,
    GlobalReport,
    run_datasets,
)

__version__ = VERSION
__all__ = [
    # Comparer
    "OrderedDiffComparer",
    "ComparerConfig",
    "compare",
    "always_equal",
    "ignore_item",
    "ignore_pair",
    # Errors
    "OrderDiffError",
    "ConfigurationError",
    "KeyExtractionError",
    "DefinitionError",
    "DefinitionParseError",
    "KeyOrderingError",
    # Orderings
    "natural_ordering",
    "reverse_ordering",
    "chain_orderings",
    "tuple_ordering",
    "casefold_ordering",
    "nulls_first",
    "nulls_last",
    "by",
    "is_naturally_orderable",
    "checked_ordering",
    # Selectors and predicates
    "identity_key",
    "field_key",
    "jsonpath_key",
    "fields_equal",
    "ignoring_fields",
    "jsonpath_equal",
    "ValueRules",
    # Reports
    "DiffCollector",
    "DiffReport",
    "DiffEntry",
    "DiffType",
    "Summary",
    "diff",
    # Dataset runner
    "ComparisonDefinition",
    "DatasetRunner",
    "ScenarioResult",
    "GlobalReport",
    "run_datasets",
]
