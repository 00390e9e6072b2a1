"""
Pipeline package -- loading and transforming the story datasets.

Re-exports key entry points so callers can do::

    from pipeline import load_datasets, transform_all
"""

from pipeline.records import BudgetRecord, ClearanceRecord, CrimeRecord, Datasets
from pipeline.transform import (
    LENIENT,
    STRICT,
    transform_all,
    transform_budget_rows,
    transform_clearance_rows,
    transform_crime_rows,
)
from pipeline.loader import load_datasets, parse_csv_text, read_all_sources

__all__ = [
    "BudgetRecord",
    "ClearanceRecord",
    "CrimeRecord",
    "Datasets",
    "LENIENT",
    "STRICT",
    "transform_all",
    "transform_budget_rows",
    "transform_clearance_rows",
    "transform_crime_rows",
    "load_datasets",
    "parse_csv_text",
    "read_all_sources",
]
