"""
Dataset loader — the "data ready" join of the three CSV sources.

The three files are read concurrently on a small thread pool. The join only
succeeds when every load succeeds; any failure aborts with a DataLoadError
that names every source that failed, so the caller can show one message
instead of a half-drawn article.

Sources are local paths or http(s) URLs (see ``DataSources.location``).
Remote files go through a retrying ``requests`` session.
"""

from __future__ import annotations

import csv
import io
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

import requests

from pipeline.records import Datasets
from pipeline.transform import LENIENT, transform_all
from utils.config import DataSources
from utils.errors import DataLoadError
from utils.http import RetryStrategy, SessionManager, fetch_text, is_remote

logger = logging.getLogger(__name__)


@dataclass
class RawTable:
    """One CSV file as read from disk or the network."""

    name: str
    location: str
    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)


def parse_csv_text(text: str, delimiter: str = ",") -> tuple[list[str], list[dict[str, str]]]:
    """Split CSV text into its header row and a list of row mappings.

    Rows that are entirely empty (trailing blank lines in exports) are dropped.
    """
    reader = csv.DictReader(io.StringIO(text), delimiter=delimiter)
    headers = [h.strip() if h else h for h in (reader.fieldnames or [])]
    reader.fieldnames = headers
    rows = [
        row for row in reader
        if any((v or "").strip() for k, v in row.items() if k is not None)
    ]
    return headers, rows


def read_source(name: str, sources: DataSources,
                session: requests.Session | None = None) -> RawTable:
    """Read one dataset from its configured location.

    Raises:
        OSError: If a local file cannot be read
        requests.RequestException: If a remote file cannot be fetched
    """
    location = sources.location(name)
    if is_remote(location):
        if session is None:
            raise ValueError(f"{name}: remote source {location} needs a session")
        text = fetch_text(session, location,
                          timeout=sources.timeout_seconds, encoding=sources.encoding)
    else:
        text = Path(location).read_text(encoding=sources.encoding)
    headers, rows = parse_csv_text(text, sources.delimiter)
    logger.info("Loaded %s: %d rows from %s", name, len(rows), location)
    return RawTable(name=name, location=location, headers=headers, rows=rows)


def read_all_sources(sources: DataSources) -> dict[str, RawTable]:
    """Read all three datasets concurrently.

    Raises:
        DataLoadError: If any of the reads failed (all failures are listed)
    """
    tables: dict[str, RawTable] = {}
    failures: dict[str, str] = {}
    retry = RetryStrategy(max_retries=sources.max_retries,
                          backoff_factor=sources.backoff_factor)
    remote = any(is_remote(sources.location(name)) for name in Datasets.NAMES)
    with SessionManager(retry_strategy=retry) as sm:
        session = sm.session if remote else None
        with ThreadPoolExecutor(max_workers=len(Datasets.NAMES),
                                thread_name_prefix="csv-load") as pool:
            futures = {
                pool.submit(read_source, name, sources, session): name
                for name in Datasets.NAMES
            }
            for future in as_completed(futures):
                name = futures[future]
                try:
                    tables[name] = future.result()
                except Exception as exc:
                    logger.error("Failed to load %s from %s: %s",
                                 name, sources.location(name), exc)
                    failures[name] = str(exc) or exc.__class__.__name__
    if failures:
        raise DataLoadError(failures)
    return tables


def load_datasets(sources: DataSources | None = None, policy: str = LENIENT) -> Datasets:
    """Load, join and transform the three datasets.

    Args:
        sources: Where to read from (default: ``data/`` next to the cwd)
        policy: Parse policy for malformed cells ("lenient" or "strict")

    Returns:
        Datasets ready for the chart builders

    Raises:
        DataLoadError: If any source could not be read
        MalformedCellError: In strict mode, on the first malformed cell
        MissingColumnError: If a required column is absent
    """
    sources = sources or DataSources()
    tables = read_all_sources(sources)
    datasets = transform_all(
        {name: t.rows for name, t in tables.items()},
        policy=policy,
        headers={name: t.headers for name, t in tables.items()},
    )
    logger.info("Datasets ready: %s", datasets.row_counts())
    if datasets.validation.issues:
        logger.info(datasets.validation.summary_text())
    return datasets
