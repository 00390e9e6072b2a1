"""Data validation for the story datasets.

Issues come from two places: the transform (malformed cells, dropped rows,
unsorted input) and the record checks run afterwards through a
ValidationRegistry. Both end up in one ValidationResult that the export CLI
logs and the API serves at /api/v1/validation.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

SEVERITIES = ("error", "warning", "info")

Check = Callable[[str, Sequence[Any]], List["ValidationIssue"]]


@dataclass
class ValidationIssue:
    """One problem in one dataset.

    Attributes:
        check_name: Check or transform stage that found it ("malformed_cell")
        severity: "error", "warning" or "info"
        detail: Human-readable description
        sample: The offending value, if there is one
        count: Number of rows affected
        dataset: "budget", "crime" or "clearance"
    """

    check_name: str
    severity: str
    detail: str
    sample: Optional[Any] = None
    count: int = 1
    dataset: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "check": self.check_name,
            "dataset": self.dataset,
            "severity": self.severity,
            "detail": self.detail,
            "sample": None if self.sample is None else str(self.sample),
            "count": self.count,
        }


class ValidationResult:
    """Issues plus the names of the checks that passed or failed."""

    def __init__(self):
        self.issues: List[ValidationIssue] = []
        self.passed_checks: List[str] = []
        self.failed_checks: List[str] = []

    def add_issue(self, check_name: str, severity: str, detail: str,
                  sample: Optional[Any] = None, count: int = 1,
                  dataset: str = "") -> ValidationIssue:
        issue = ValidationIssue(check_name, severity, detail, sample, count, dataset)
        self.issues.append(issue)
        return issue

    def extend(self, other: "ValidationResult") -> None:
        self.issues.extend(other.issues)
        self.passed_checks.extend(other.passed_checks)
        self.failed_checks.extend(other.failed_checks)

    def record_check(self, name: str, issues: Iterable[ValidationIssue]) -> None:
        """Store the outcome of one check; no issues means it passed."""
        found = list(issues)
        self.issues.extend(found)
        (self.failed_checks if found else self.passed_checks).append(name)

    def get_issues_for(self, check_name: str) -> List[ValidationIssue]:
        return [i for i in self.issues if i.check_name == check_name]

    def severity_counts(self) -> Dict[str, int]:
        counts = Counter(i.severity for i in self.issues)
        return {sev: counts.get(sev, 0) for sev in SEVERITIES}

    def error_count(self) -> int:
        return self.severity_counts()["error"]

    def is_valid(self) -> bool:
        """True when nothing of severity "error" was found."""
        return self.error_count() == 0

    def summary_text(self) -> str:
        counts = self.severity_counts()
        return (
            f"Validation: {len(self.passed_checks)} checks passed, "
            f"{len(self.failed_checks)} failed; {len(self.issues)} issues "
            f"({counts['error']} errors, {counts['warning']} warnings, "
            f"{counts['info']} info)"
        )

    def to_dict(self) -> Dict[str, Any]:
        counts = self.severity_counts()
        return {
            "passed_checks": list(self.passed_checks),
            "failed_checks": list(self.failed_checks),
            "issues": [i.to_dict() for i in self.issues],
            "summary": {
                "total_checks": len(self.passed_checks) + len(self.failed_checks),
                "passed": len(self.passed_checks),
                "failed": len(self.failed_checks),
                "issues": len(self.issues),
                "errors": counts["error"],
                "warnings": counts["warning"],
                "info": counts["info"],
            },
        }


class ValidationRegistry:
    """Named record checks, run in registration order.

    A check takes (dataset_name, records) and returns the issues it found.
    Outcomes are recorded as "<dataset>:<check>", e.g. "crime:unique_years".
    """

    def __init__(self):
        self.checks: Dict[str, Check] = {}

    def register(self, name: str, check_fn: Check) -> None:
        self.checks[name] = check_fn

    def run_all(self, dataset: str, records: Sequence[Any],
                skip_checks: Optional[List[str]] = None) -> ValidationResult:
        result = ValidationResult()
        for name, check_fn in self.checks.items():
            if name in (skip_checks or ()):
                continue
            result.record_check(f"{dataset}:{name}", check_fn(dataset, records))
        return result


def check_years_ascending(dataset: str, records: Sequence[Any]) -> List[ValidationIssue]:
    """Records must be non-decreasing in year."""
    return [
        ValidationIssue("years_ascending", "error", f"year {cur.year} follows {prev.year}",
                        sample=cur.year, dataset=dataset)
        for prev, cur in zip(records, records[1:])
        if cur.year < prev.year
    ]


def check_unique_years(dataset: str, records: Sequence[Any]) -> List[ValidationIssue]:
    """Each year should appear once; a duplicate draws as a vertical jump."""
    seen = Counter(rec.year for rec in records)
    return [
        ValidationIssue("unique_years", "warning", f"year {year} appears {n} times",
                        sample=year, count=n, dataset=dataset)
        for year, n in sorted(seen.items()) if n > 1
    ]


def check_has_records(dataset: str, records: Sequence[Any]) -> List[ValidationIssue]:
    if records:
        return []
    return [ValidationIssue("has_records", "error", "dataset has no rows", dataset=dataset)]


def default_registry() -> ValidationRegistry:
    """The checks every dataset goes through after the transform."""
    registry = ValidationRegistry()
    registry.register("has_records", check_has_records)
    registry.register("years_ascending", check_years_ascending)
    registry.register("unique_years", check_unique_years)
    return registry


def is_valid_opacity(value: float) -> bool:
    """A usable opacity: a real number (not a bool) in [0, 1]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return 0.0 <= value <= 1.0
