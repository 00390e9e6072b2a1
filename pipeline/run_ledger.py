"""
Export run ledger.

``build_story.py`` appends one compact JSON line per run, successful or not,
to ``<logs_root>/ledger.jsonl``. Inspect recent runs with::

    tail -3 logs/build/ledger.jsonl | python -m json.tool
"""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pipeline.logging import PipelineLogger, StepReport


def _step_entry(report: StepReport) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "status": report.status,
        "elapsed": round(report.elapsed_seconds, 1),
        "processed": report.items_processed,
        "skipped": report.items_skipped,
        "errored": report.items_errored,
    }
    by_category = report.skip_counts_by_category()
    if by_category:
        entry["skip_categories"] = by_category
    return entry


def append_to_ledger(
    pl: PipelineLogger,
    exit_code: int,
    ledger_path: Path | None = None,
    outputs: dict[str, Any] | None = None,
) -> Path:
    """Append this run's record and return the ledger path.

    *outputs* describes what the render step wrote (file paths, page size);
    it is left out when the run stopped earlier.
    """
    path = ledger_path or pl.logs_root / "ledger.jsonl"
    record: dict[str, Any] = {
        "run_id": pl.run_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "total_seconds": round(time.monotonic() - pl.pipeline_start, 1),
        "exit_code": exit_code,
        "args": pl.args_dict,
        "steps": {name: _step_entry(rpt) for name, rpt in pl.get_reports().items()},
    }
    if outputs:
        record["outputs"] = outputs

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(record, separators=(",", ":"), default=str) + "\n")
    return path
