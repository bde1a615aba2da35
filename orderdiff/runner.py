"""Dataset runner driven by a YAML comparison definition."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from .comparators import field_differences, fields_equal, ignoring_fields
from .comparer import OrderedDiffComparer
from .exceptions import DefinitionError, DefinitionParseError, KeyOrderingError, OrderDiffError
from .models import DiffType, Equivalence, KeyOrdering, KeySelector, ValueRules, always_equal
from .ordering import (
    by,
    checked_ordering,
    natural_ordering,
    nulls_first,
    nulls_last,
    reverse_ordering,
    tuple_ordering,
)
from .report import DiffCollector
from .selectors import field_key, jsonpath_key

logger = logging.getLogger(__name__)


def _as_list(data: dict, name: str) -> list[str]:
    value = data.get(name)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise DefinitionError(
        f"'{name}' must be a string or a list of strings",
        {"field": name, "value": value}
    )


def _as_flag(data: dict, name: str) -> bool:
    value = data.get(name, False)
    if not isinstance(value, bool):
        raise DefinitionError(
            f"'{name}' must be true or false",
            {"field": name, "value": value}
        )
    return value


def _as_precision(data: dict) -> Optional[float]:
    value = data.get("precision")
    if value is None:
        return None
    # bool is an int subclass but never a tolerance
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DefinitionError(
            "'precision' must be a number",
            {"field": "precision", "value": value}
        )
    return value


def _casefold(value: Any) -> Any:
    if isinstance(value, str):
        return value.casefold()
    if isinstance(value, tuple):
        return tuple(_casefold(v) for v in value)
    return value


@dataclass
class ComparisonDefinition:
    """
    Describes how two lists of records are keyed and compared.

    Example YAML:

        key: [region, sku]
        compare_fields: [quantity, unit_price]
        precision: 0.001
        case_insensitive_keys: true
        nulls: last
    """
    key: list[str] = field(default_factory=list)
    key_paths: list[str] = field(default_factory=list)
    compare_fields: list[str] = field(default_factory=list)
    ignore_fields: list[str] = field(default_factory=list)
    precision: Optional[float] = None
    case_insensitive: bool = False
    trim_whitespace: bool = False
    case_insensitive_keys: bool = False
    descending: bool = False
    nulls: Optional[str] = None

    def __post_init__(self):
        if bool(self.key) == bool(self.key_paths):
            raise DefinitionError(
                "Exactly one of 'key' or 'key_paths' must be given",
                {"key": self.key, "key_paths": self.key_paths}
            )
        if self.compare_fields and self.ignore_fields:
            raise DefinitionError(
                "'compare_fields' and 'ignore_fields' are mutually exclusive",
                {"compare_fields": self.compare_fields, "ignore_fields": self.ignore_fields}
            )
        if self.nulls not in (None, "first", "last"):
            raise DefinitionError(
                f"Invalid 'nulls' value: {self.nulls!r}",
                {"allowed": ["first", "last"]}
            )
        if self.precision is not None and self.precision < 0:
            raise DefinitionError(
                "'precision' must not be negative",
                {"precision": self.precision}
            )

    @classmethod
    def from_dict(cls, data: dict) -> ComparisonDefinition:
        """Build a definition from a parsed YAML/JSON mapping."""
        if not isinstance(data, dict):
            raise DefinitionError(
                "Definition must be an object",
                {"type": type(data).__name__}
            )

        known = set(cls.__dataclass_fields__)
        unknown = sorted(str(k) for k in set(data) - known)
        if unknown:
            raise DefinitionError(
                f"Unknown definition field(s): {', '.join(unknown)}",
                {"unknown": unknown}
            )

        return cls(
            key=_as_list(data, "key"),
            key_paths=_as_list(data, "key_paths"),
            compare_fields=_as_list(data, "compare_fields"),
            ignore_fields=_as_list(data, "ignore_fields"),
            precision=_as_precision(data),
            case_insensitive=_as_flag(data, "case_insensitive"),
            trim_whitespace=_as_flag(data, "trim_whitespace"),
            case_insensitive_keys=_as_flag(data, "case_insensitive_keys"),
            descending=_as_flag(data, "descending"),
            nulls=data.get("nulls")
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> ComparisonDefinition:
        """Load a definition from a YAML (or JSON) file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Definition file not found: {path}")

        with open(path, 'r') as f:
            content = f.read()

        # JSON is valid YAML, so one parser covers both
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DefinitionParseError(str(path), str(e))

        return cls.from_dict(data)

    @property
    def value_rules(self) -> ValueRules:
        return ValueRules(
            precision=self.precision,
            case_insensitive=self.case_insensitive,
            trim_whitespace=self.trim_whitespace
        )

    def key_selector(self) -> KeySelector:
        if self.key:
            return field_key(*self.key)
        return jsonpath_key(*self.key_paths)

    def key_ordering(self) -> KeyOrdering:
        arity = len(self.key or self.key_paths)

        ordering = natural_ordering
        if self.nulls == "first":
            ordering = nulls_first(ordering)
        elif self.nulls == "last":
            ordering = nulls_last(ordering)

        if arity > 1:
            ordering = tuple_ordering(*[ordering] * arity)
        if self.case_insensitive_keys:
            ordering = by(_casefold, ordering)
        if self.descending:
            ordering = reverse_ordering(ordering)
        return checked_ordering(ordering)

    def full_equivalence(self) -> Equivalence:
        rules = self.value_rules
        if self.compare_fields:
            return fields_equal(
                *self.compare_fields,
                precision=rules.precision,
                case_insensitive=rules.case_insensitive,
                trim_whitespace=rules.trim_whitespace
            )
        if self.ignore_fields:
            return ignoring_fields(*self.ignore_fields, rules=rules)
        return always_equal

    def describe(self, left: Any, right: Any) -> str:
        """Summarize which fields differ between a mismatched pair."""
        if self.compare_fields:
            names = self.compare_fields
        else:
            ignored = set(self.ignore_fields)
            names = [k for k in list(left) + list(right) if k not in ignored]
            names = list(dict.fromkeys(names))
        return "; ".join(field_differences(left, right, names, self.value_rules))

    def build_comparer(self) -> OrderedDiffComparer:
        return OrderedDiffComparer(
            self.key_selector(),
            self.key_ordering(),
            full_equivalence=self.full_equivalence()
        )


@dataclass
class ScenarioResult:
    """Result of a single dataset."""
    name: str
    dataset_path: str
    passed: bool
    expected_match: bool = True
    diff_report: Optional[dict] = None
    error: Optional[dict] = None

    def to_dict(self) -> dict:
        result = {
            "name": self.name,
            "dataset_path": self.dataset_path,
            "passed": self.passed,
            "expected_match": self.expected_match,
        }
        if self.diff_report:
            result["diff_report"] = self.diff_report
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class GlobalReport:
    """Global report across all datasets."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    scenarios: list[ScenarioResult] = field(default_factory=list)
    breakdown: dict[str, list[str]] = field(default_factory=dict)
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
        if not self.breakdown:
            self.breakdown = {
                "no_changes": [],
                "with_changes": [],
                "left_only": [],
                "right_only": [],
                "mismatched": [],
                "errors": []
            }

    @property
    def pass_rate(self) -> str:
        return f"{(self.passed / self.total * 100):.1f}%" if self.total > 0 else "0.0%"

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "summary": {
                "total_scenarios": self.total,
                "passed": self.passed,
                "failed": self.failed,
                "pass_rate": self.pass_rate
            },
            "breakdown": self.breakdown,
            "scenarios": [s.to_dict() for s in self.scenarios]
        }

    def log_summary(self):
        logger.info("Results: %d/%d passed (%s)", self.passed, self.total, self.pass_rate)
        for category, names in self.breakdown.items():
            if names:
                logger.info("  %s: %d dataset(s)", category, len(names))


class DatasetRunner:
    """Runs datasets of left/right records against a comparison definition."""

    def __init__(self, definition: ComparisonDefinition):
        self.definition = definition
        self.comparer = definition.build_comparer()
        self.key_selector = self.comparer.key_selector

    @classmethod
    def from_yaml(cls, path: str | Path) -> DatasetRunner:
        return cls(ComparisonDefinition.from_yaml(path))

    def run_dataset(self, dataset: Any, name: str, dataset_path: str = "") -> ScenarioResult:
        """
        Compare the ``left`` and ``right`` lists of a dataset.

        The dataset passes when the comparison outcome (no differences or
        some differences) agrees with its ``expected_match`` flag, which
        defaults to true.
        """
        if not isinstance(dataset, dict):
            return self._invalid_result(
                name, dataset_path, "Dataset must be an object",
                {"type": type(dataset).__name__}
            )

        expected = dataset.get("expected_match", True)
        if not isinstance(expected, bool):
            return self._invalid_result(
                name, dataset_path, "'expected_match' must be true or false",
                {"field": "expected_match", "value": expected}
            )

        left = dataset.get("left")
        right = dataset.get("right")
        if not isinstance(left, list) or not isinstance(right, list):
            return self._invalid_result(
                name, dataset_path, "Dataset must contain 'left' and 'right' lists",
                {}, expected
            )

        collector = DiffCollector(self.key_selector, self.definition.describe)
        try:
            self.comparer.compare(left, right, collector.attach(self.comparer.config))
        except KeyOrderingError as e:
            return self._error_result(name, dataset_path, expected, "ORDERING_ERROR", e)
        except OrderDiffError as e:
            return self._error_result(name, dataset_path, expected, "COMPARISON_ERROR", e)

        report = collector.report(len(left), len(right))
        logger.debug(
            "Dataset %s: %d left-only, %d right-only, %d mismatch(es)",
            name,
            report.summary.left_only,
            report.summary.right_only,
            report.summary.mismatches
        )
        return ScenarioResult(
            name=name,
            dataset_path=dataset_path,
            passed=report.is_match == expected,
            expected_match=expected,
            diff_report=report.to_dict()
        )

    def _invalid_result(
        self,
        name: str,
        dataset_path: str,
        message: str,
        details: dict,
        expected: bool = True
    ) -> ScenarioResult:
        logger.warning("Dataset %s is invalid: %s", name, message)
        return ScenarioResult(
            name=name,
            dataset_path=dataset_path,
            passed=False,
            expected_match=expected,
            error={
                "code": "INVALID_DATASET",
                "message": message,
                "details": details
            }
        )

    def _error_result(
        self,
        name: str,
        dataset_path: str,
        expected: bool,
        code: str,
        error: Exception
    ) -> ScenarioResult:
        logger.warning("Dataset %s failed: %s", name, error)
        return ScenarioResult(
            name=name,
            dataset_path=dataset_path,
            passed=False,
            expected_match=expected,
            error={
                "code": code,
                "message": str(error),
                "details": {"type": type(error).__name__}
            }
        )

    def run_folder(self, folder: str | Path) -> GlobalReport:
        """Run all ``*.json`` dataset files in a folder, in name order."""
        folder_path = Path(folder)
        if not folder_path.exists():
            raise FileNotFoundError(f"Dataset folder not found: {folder_path}")

        report = GlobalReport()
        for dataset_file in sorted(folder_path.glob("*.json")):
            with open(dataset_file) as f:
                dataset = json.load(f)

            name = dataset_file.stem
            if isinstance(dataset, dict):
                name = dataset.get("name", name)
            result = self.run_dataset(dataset, name, str(dataset_file))

            report.scenarios.append(result)
            report.total += 1
            if result.passed:
                report.passed += 1
                logger.info("PASS: %s", name)
            else:
                report.failed += 1
                logger.info("FAIL: %s", name)

            self._categorize(report, result)

        report.log_summary()
        return report

    def _categorize(self, report: GlobalReport, result: ScenarioResult):
        if result.error:
            report.breakdown["errors"].append(result.name)
            return

        diffs = result.diff_report.get("diffs", [])
        if not diffs:
            report.breakdown["no_changes"].append(result.name)
            return

        report.breakdown["with_changes"].append(result.name)
        types = {d["type"] for d in diffs}
        if DiffType.LEFT_ONLY.value in types:
            report.breakdown["left_only"].append(result.name)
        if DiffType.RIGHT_ONLY.value in types:
            report.breakdown["right_only"].append(result.name)
        if DiffType.MISMATCH.value in types:
            report.breakdown["mismatched"].append(result.name)


def run_datasets(definition_path: str | Path, dataset_folder: str | Path) -> GlobalReport:
    """
    Run every dataset in a folder against a YAML definition.

        from orderdiff.runner import run_datasets
        report = run_datasets("definition.yaml", "datasets/")
    """
    return DatasetRunner.from_yaml(definition_path).run_folder(dataset_folder)
