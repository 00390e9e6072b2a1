"""
Typed records for the three story datasets.

Records are frozen dataclasses ordered by year. ``None`` in a value field
means "no data for that year" and is rendered as a gap, never interpolated.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from utils.validation import ValidationResult


@dataclass(frozen=True)
class BudgetRecord:
    """Police budget for one year, in millions of euros."""

    year: int
    budgeted: float | None = None
    actual: float | None = None
    inflation_adjusted: float | None = None  # 2015 budget indexed for inflation

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CrimeRecord:
    """Registered crimes for one year."""

    year: int
    total: int | None = None
    violent: int | None = None
    property: int | None = None
    vandalism: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ClearanceRecord:
    """Clearance rates (percent of registered crimes solved) for one year."""

    year: int
    total: float | None = None
    property: float | None = None
    violent: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Datasets:
    """The joined result of loading and transforming all three CSV files."""

    budget: list[BudgetRecord] = field(default_factory=list)
    crime: list[CrimeRecord] = field(default_factory=list)
    clearance: list[ClearanceRecord] = field(default_factory=list)
    validation: ValidationResult = field(default_factory=ValidationResult)

    NAMES = ("budget", "crime", "clearance")

    def get(self, name: str) -> list:
        """Return the record list for a dataset name.

        Raises:
            KeyError: If the name is not one of NAMES
        """
        if name not in self.NAMES:
            raise KeyError(name)
        return getattr(self, name)

    def row_counts(self) -> dict[str, int]:
        return {name: len(self.get(name)) for name in self.NAMES}
