"""
Build logging for the static export.

``build_story.py`` runs three steps (load, build, render). Each step gets its
own log file inside a per-run directory and a StepReport that counts what the
step handled and what it had to leave out:

    logs/build/<run-id>/
        load.log
        build.log
        render.log
        summary.json

Usage::

    pl = PipelineLogger("logs/build")
    report = pl.start_step("load")      # root logger now also writes load.log
    report.add_validation(datasets.validation)
    pl.finish_step("load", report)      # appends a summary block, detaches
    pl.write_summary()

Skip categories:
    malformed_cell   a numeric cell was unreadable and is drawn as a gap
    dropped_row      a row without a readable year was left out
"""

from __future__ import annotations

import json
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from utils.validation import ValidationResult

# Checks whose issues change what ends up on the charts
SKIP_CATEGORIES = ("malformed_cell", "dropped_row")

_STEP_LOG_FORMAT = "%(asctime)s  %(levelname)-7s  %(name)s  %(message)s"
_RULE = "-" * 60


@dataclass
class SkipRecord:
    category: str
    detail: str
    item: str = ""     # dataset or chart name

    def to_dict(self) -> dict[str, str]:
        out = {"category": self.category, "detail": self.detail}
        if self.item:
            out["item"] = self.item
        return out


@dataclass
class StepReport:
    """What one build step handled, skipped and failed on."""

    step_name: str
    status: str = "not_started"   # started | completed | failed
    items_processed: int = 0
    elapsed_seconds: float = 0.0
    metrics: dict[str, Any] = field(default_factory=dict)
    skips: list[SkipRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    detail: str = ""

    @property
    def items_skipped(self) -> int:
        return len(self.skips)

    @property
    def items_errored(self) -> int:
        return len(self.errors)

    def add_skip(self, category: str, detail: str, item: str = "") -> None:
        self.skips.append(SkipRecord(category, detail, item))

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_validation(self, validation: ValidationResult) -> None:
        """Record the data issues that left a gap or a missing row."""
        for issue in validation.issues:
            if issue.check_name in SKIP_CATEGORIES:
                self.add_skip(issue.check_name, issue.detail, issue.dataset)

    def skip_counts_by_category(self) -> dict[str, int]:
        return dict(Counter(s.category for s in self.skips))

    def console_summary(self) -> str:
        parts = []
        if self.items_processed:
            parts.append(f"{self.items_processed:,} processed")
        if self.skips:
            by_cat = ", ".join(
                f"{n} {cat.replace('_', ' ')}"
                for cat, n in sorted(self.skip_counts_by_category().items())
            )
            parts.append(f"{self.items_skipped:,} skipped ({by_cat})")
        if self.errors:
            parts.append(f"{self.items_errored:,} errors")
        if self.detail:
            parts.append(self.detail)
        return " | ".join(parts) or "no activity"

    def summary_lines(self) -> list[str]:
        """Plain-text block appended to the step's log file."""
        lines = [
            f"STEP SUMMARY: {self.step_name}",
            f"  status     {self.status}",
            f"  elapsed    {self.elapsed_seconds:.1f}s",
            f"  processed  {self.items_processed}",
            f"  skipped    {self.items_skipped}",
            f"  errors     {self.items_errored}",
        ]
        for cat, n in sorted(self.skip_counts_by_category().items()):
            lines.append(f"    {cat}: {n}")
        lines.extend(f"    ! {err}" for err in self.errors[:20])
        return lines

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "step_name": self.step_name,
            "status": self.status,
            "elapsed_seconds": round(self.elapsed_seconds, 2),
            "items_processed": self.items_processed,
            "items_skipped": self.items_skipped,
            "items_errored": self.items_errored,
            "metrics": self.metrics,
        }
        optional = {
            "detail": self.detail,
            "skips": [s.to_dict() for s in self.skips],
            "errors": list(self.errors),
        }
        out.update({k: v for k, v in optional.items() if v})
        return out


def _step_handler(path: Path) -> logging.FileHandler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_STEP_LOG_FORMAT, datefmt="%H:%M:%S"))
    return handler


class PipelineLogger:
    """One directory per export run, one log file per step."""

    def __init__(self, logs_dir: Path | str = "logs/build") -> None:
        self.logs_root = Path(logs_dir)
        self.run_id = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
        self.run_dir = self.logs_root / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.pipeline_start = time.monotonic()
        self.args_dict: dict[str, Any] = {}
        # step name -> (handler, start time)
        self._open: dict[str, tuple[logging.FileHandler, float]] = {}
        self._reports: dict[str, StepReport] = {}

    def start_step(self, step_name: str) -> StepReport:
        """Attach ``<step_name>.log`` to the root logger and return a fresh report."""
        handler = _step_handler(self.run_dir / f"{step_name}.log")
        logging.getLogger().addHandler(handler)
        self._open[step_name] = (handler, time.monotonic())
        report = self._reports[step_name] = StepReport(step_name, status="started")
        return report

    def finish_step(self, step_name: str, report: StepReport | None = None) -> None:
        """Stamp the elapsed time, write the summary block and detach the log file."""
        handler, started = self._open.pop(step_name, (None, self.pipeline_start))
        report = report or self._reports.get(step_name) or StepReport(step_name)
        report.elapsed_seconds = time.monotonic() - started
        if report.status == "started":
            report.status = "completed"
        self._reports[step_name] = report

        if report.skips or report.errors:
            print(f"  [{step_name}] {report.console_summary()}", flush=True)

        if handler is not None:
            block = [_RULE, *report.summary_lines(), _RULE]
            handler.stream.write("\n" + "\n".join(block) + "\n")
            logging.getLogger().removeHandler(handler)
            handler.close()

    def get_reports(self) -> dict[str, StepReport]:
        return dict(self._reports)

    @property
    def summary_path(self) -> Path:
        return self.run_dir / "summary.json"

    def write_summary(self) -> Path:
        """Write ``summary.json`` for the whole run."""
        summary = {
            "run_id": self.run_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "total_elapsed_seconds": round(time.monotonic() - self.pipeline_start, 2),
            "args": self.args_dict,
            "steps": {name: rpt.to_dict() for name, rpt in self._reports.items()},
        }
        self.summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
        return self.summary_path
