"""
Data transform — raw CSV row mappings to typed, year-ordered records.

Each dataset has a parser per field (euro amounts, percentages, integer
counts). Headers are resolved through ``ColumnMapping`` so both the Dutch
export headers and English aliases are accepted.

Malformed cells follow an explicit parse policy:

    lenient  the cell becomes None (a gap in the chart line), a warning is
             recorded in the ValidationResult and logged
    strict   MalformedCellError is raised for the first bad cell

A row whose year cannot be read is dropped in lenient mode (error-level
issue) and raises in strict mode. Records are returned sorted by year; the
input order is reported when it was not already ascending.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Sequence

from pipeline.records import BudgetRecord, ClearanceRecord, CrimeRecord, Datasets
from utils.config import ColumnMapping
from utils.errors import MalformedCellError, MalformedNumberError, MissingColumnError
from utils.strings import parse_count, parse_euro, parse_percent, parse_year
from utils.validation import ValidationResult, default_registry

logger = logging.getLogger(__name__)

LENIENT = "lenient"
STRICT = "strict"
PARSE_POLICIES = (LENIENT, STRICT)

Row = Mapping[str, Any]

_BUDGET_PARSERS: dict[str, Callable[[Any], Any]] = {
    "budgeted": parse_euro,
    "actual": parse_euro,
    "inflation_adjusted": parse_euro,
}

_CRIME_PARSERS: dict[str, Callable[[Any], Any]] = {
    "total": parse_count,
    "violent": parse_count,
    "property": parse_count,
    "vandalism": parse_count,
}

_CLEARANCE_PARSERS: dict[str, Callable[[Any], Any]] = {
    "total": parse_percent,
    "property": parse_percent,
    "violent": parse_percent,
}


def _check_policy(policy: str) -> None:
    if policy not in PARSE_POLICIES:
        raise ValueError(f"Unknown parse policy {policy!r}; expected one of {PARSE_POLICIES}")


def _transform(
    dataset: str,
    rows: Sequence[Row],
    parsers: dict[str, Callable[[Any], Any]],
    record_cls: type,
    policy: str,
    result: ValidationResult,
    headers: Iterable[str] | None = None,
) -> list:
    _check_policy(policy)
    if headers is None:
        headers = list(rows[0].keys()) if rows else []
    headers = list(headers)
    if not headers and not rows:
        return []

    columns = ColumnMapping.resolve(dataset, headers)
    mapping = ColumnMapping.get_mapping(dataset)
    for fld, header in columns.items():
        if header is None:
            raise MissingColumnError(dataset, fld, list(mapping[fld]))

    records = []
    # Line numbers count the header as line 1 so they match a spreadsheet view.
    for line_no, row in enumerate(rows, start=2):
        year_text = row.get(columns["year"])
        try:
            year = parse_year(year_text)
        except MalformedNumberError:
            if policy == STRICT:
                raise MalformedCellError(dataset, line_no, columns["year"], str(year_text))
            result.add_issue(
                "dropped_row", "error",
                f"row {line_no}: unreadable year, row skipped",
                sample=year_text, dataset=dataset,
            )
            logger.warning("%s: dropped row %d with year %r", dataset, line_no, year_text)
            continue

        values: dict[str, Any] = {"year": year}
        for fld, parse in parsers.items():
            text = row.get(columns[fld])
            try:
                values[fld] = parse(text)
            except MalformedNumberError:
                if policy == STRICT:
                    raise MalformedCellError(dataset, line_no, columns[fld], str(text))
                values[fld] = None
                result.add_issue(
                    "malformed_cell", "warning",
                    f"row {line_no} ({year}), column {columns[fld]!r}: treated as missing",
                    sample=text, dataset=dataset,
                )
                logger.warning(
                    "%s: malformed %s value %r in %d, treated as missing",
                    dataset, fld, text, year,
                )
        records.append(record_cls(**values))

    years = [r.year for r in records]
    if years != sorted(years):
        result.add_issue(
            "unsorted_input", "info",
            "rows were not in ascending year order and have been sorted",
            dataset=dataset,
        )
        records.sort(key=lambda r: r.year)

    logger.debug("%s: %d records from %d rows", dataset, len(records), len(rows))
    return records


def transform_budget_rows(
    rows: Sequence[Row],
    policy: str = LENIENT,
    result: ValidationResult | None = None,
    headers: Iterable[str] | None = None,
) -> list[BudgetRecord]:
    """Convert Begroting.csv rows into BudgetRecords."""
    result = result if result is not None else ValidationResult()
    return _transform("budget", rows, _BUDGET_PARSERS, BudgetRecord, policy, result, headers)


def transform_crime_rows(
    rows: Sequence[Row],
    policy: str = LENIENT,
    result: ValidationResult | None = None,
    headers: Iterable[str] | None = None,
) -> list[CrimeRecord]:
    """Convert Misdrijven.csv rows into CrimeRecords."""
    result = result if result is not None else ValidationResult()
    return _transform("crime", rows, _CRIME_PARSERS, CrimeRecord, policy, result, headers)


def transform_clearance_rows(
    rows: Sequence[Row],
    policy: str = LENIENT,
    result: ValidationResult | None = None,
    headers: Iterable[str] | None = None,
) -> list[ClearanceRecord]:
    """Convert Ophelderingspercentage.csv rows into ClearanceRecords."""
    result = result if result is not None else ValidationResult()
    return _transform("clearance", rows, _CLEARANCE_PARSERS, ClearanceRecord, policy, result,
                      headers)


_TRANSFORMS = {
    "budget": transform_budget_rows,
    "crime": transform_crime_rows,
    "clearance": transform_clearance_rows,
}


def transform_all(
    raw: Mapping[str, Sequence[Row]],
    policy: str = LENIENT,
    headers: Mapping[str, Iterable[str]] | None = None,
) -> Datasets:
    """Transform the raw rows of all three datasets and run the record checks.

    Args:
        raw: Dataset name -> list of row mappings
        policy: "lenient" or "strict"
        headers: Optional dataset name -> header row (needed for empty files)

    Returns:
        Datasets with the typed records and every issue collected on the way
    """
    _check_policy(policy)
    headers = headers or {}
    validation = ValidationResult()
    registry = default_registry()
    out: dict[str, list] = {}
    for name in Datasets.NAMES:
        records = _TRANSFORMS[name](raw.get(name, []), policy, validation, headers.get(name))
        validation.extend(registry.run_all(name, records))
        out[name] = records
    return Datasets(validation=validation, **out)
