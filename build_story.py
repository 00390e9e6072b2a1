#!/usr/bin/env python3
"""
Static export -- renders the article to a directory that any web server can host.

Steps (in order):
  1. load    -- read and transform the three CSV files (concurrent join)
  2. build   -- build the three charts and their reveal tables
  3. render  -- write index.html and reveal.json, copy static/

Features:
  - Per-step log files under logs/build/<run-id>/ with skip accounting
    (malformed cells drawn as gaps, dropped rows)
  - Append-only JSONL ledger for cross-run history
  - --step chart=K renders a chart at step K (useful for screenshots)

Usage:
    python build_story.py                          # data/ -> site/
    python build_story.py --data-dir csv --out public
    python build_story.py --strict                 # malformed cells are errors
    python build_story.py --step budget=6 --step clearance=2
"""

from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
import time
from pathlib import Path
from typing import Any, Callable

from jinja2 import TemplateError

from pipeline.logging import PipelineLogger
from pipeline.loader import load_datasets
from pipeline.run_ledger import append_to_ledger
from pipeline.transform import LENIENT, STRICT
from story.article import build_story
from story.render import STATIC_DIR, render_page
from utils.config import AppConfig
from utils.errors import StoryError
from utils.patterns import STEP_OVERRIDE

logger = logging.getLogger("build_story")


def _step_override(text: str) -> tuple[str, int]:
    """argparse type for --step: "chart=K"."""
    m = STEP_OVERRIDE.match(text.strip())
    if not m:
        raise argparse.ArgumentTypeError(f"expected chart=STEP, got {text!r}")
    return m.group("chart"), int(m.group("step"))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    cfg = AppConfig.from_env()
    p = argparse.ArgumentParser(
        description="Render the police budget story to a static site: load -> build -> render",
    )
    p.add_argument(
        "--data-dir", type=Path, default=cfg.data_dir,
        help="Directory with the CSV files (default: data or STORY_DATA_DIR)",
    )
    p.add_argument(
        "--data-url", default=cfg.data_url,
        help="Base URL to fetch the CSV files from instead (default: STORY_DATA_URL)",
    )
    p.add_argument(
        "--out", type=Path, default=Path("site"),
        help="Output directory (default: site)",
    )
    p.add_argument(
        "--width", type=int, default=cfg.chart_width,
        help="Outer chart width in pixels (default: 900)",
    )
    p.add_argument(
        "--height", type=int, default=cfg.chart_height,
        help="Outer chart height in pixels (default: 500)",
    )
    p.add_argument(
        "--strict", action="store_true", default=cfg.strict_parse,
        help="Fail on malformed cells instead of drawing them as gaps",
    )
    p.add_argument(
        "--step", type=_step_override, action="append", default=[], metavar="CHART=K",
        help="Render CHART at step K instead of hidden (repeatable)",
    )
    p.add_argument(
        "--logs-dir", default="logs/build",
        help="Directory for per-run logs and the ledger (default: logs/build)",
    )
    return p.parse_args(argv)


def _run_step(label: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> tuple[bool, Any]:
    """Run a build step with timing and error reporting."""
    print(f"\n== {label} ==", flush=True)
    t0 = time.monotonic()
    try:
        result = fn(*args, **kwargs)
    except (StoryError, OSError, TemplateError) as e:
        elapsed = time.monotonic() - t0
        logger.error("%s failed: %s", label, e)
        print(f"[{label}] FAILED -- {elapsed:.1f}s: {e}", flush=True)
        return False, e
    elapsed = time.monotonic() - t0
    print(f"[{label}] OK -- {elapsed:.1f}s", flush=True)
    return True, result


def _write_site(story, out_dir: Path, steps: dict[str, int]) -> dict[str, Any]:
    out_dir.mkdir(parents=True, exist_ok=True)
    html = render_page(story, steps)
    index = out_dir / "index.html"
    index.write_text(html, encoding="utf-8")

    reveal = out_dir / "reveal.json"
    with open(reveal, "w", encoding="utf-8") as f:
        json.dump(story.reveal_config(), f, indent=2, ensure_ascii=False)

    if STATIC_DIR.exists():
        shutil.copytree(STATIC_DIR, out_dir / "static", dirs_exist_ok=True)
    return {"index": str(index), "reveal": str(reveal), "bytes": len(html.encode("utf-8"))}


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s", force=True)

    pl = PipelineLogger(logs_dir=args.logs_dir)
    pl.args_dict = {
        k: str(v) if isinstance(v, Path) else v
        for k, v in vars(args).items()
        if v is not None and v is not False and v != []
    }

    cfg = AppConfig.from_env()
    cfg.data_dir = args.data_dir
    cfg.data_url = args.data_url
    cfg.chart_width = args.width
    cfg.chart_height = args.height
    steps = dict(args.step)
    policy = STRICT if args.strict else LENIENT

    print("\nPolice Budget Story")
    print(f"  Data   : {cfg.data_url or cfg.data_dir}")
    print(f"  Output : {args.out}")
    print(f"  Charts : {cfg.chart_width}x{cfg.chart_height}")
    print(f"  Parse  : {policy}")
    if steps:
        print(f"  Steps  : {', '.join(f'{k}={v}' for k, v in sorted(steps.items()))}")
    print(f"  Logs   : {pl.run_dir}")

    # ── Step 1: Load ─────────────────────────────────────────────────────
    load_report = pl.start_step("load")
    ok, datasets = _run_step("Step 1 / 3 -- Load datasets", load_datasets,
                             cfg.data_sources(), policy=policy)
    if not ok:
        load_report.status = "failed"
        load_report.add_error(str(datasets))
        pl.finish_step("load", load_report)
        print("\nBuild aborted: the datasets could not be loaded.", flush=True)
        _finalize(pl, 1)
        return 1
    load_report.items_processed = sum(datasets.row_counts().values())
    load_report.metrics = datasets.row_counts()
    load_report.add_validation(datasets.validation)
    load_report.status = "completed"
    pl.finish_step("load", load_report)

    # ── Step 2: Build ────────────────────────────────────────────────────
    build_report = pl.start_step("build")
    ok, story = _run_step("Step 2 / 3 -- Build charts", build_story,
                          datasets, cfg.chart_config())
    if not ok:
        build_report.status = "failed"
        build_report.add_error(str(story))
        pl.finish_step("build", build_report)
        print("\nBuild aborted: a chart could not be built.", flush=True)
        _finalize(pl, 1)
        return 1
    build_report.items_processed = len(story.sections)
    build_report.metrics = {name: len(sec.handle.layers) for name, sec in story.sections.items()}
    build_report.status = "completed"
    pl.finish_step("build", build_report)

    # ── Step 3: Render ───────────────────────────────────────────────────
    render_report = pl.start_step("render")
    try:
        ok, outputs = _run_step("Step 3 / 3 -- Render site", _write_site,
                                story, args.out, steps)
    except KeyError as e:
        ok, outputs = False, e.args[0]
    if not ok:
        render_report.status = "failed"
        render_report.add_error(str(outputs))
        pl.finish_step("render", render_report)
        print(f"\nBuild aborted: {outputs}", flush=True)
        _finalize(pl, 1)
        return 1
    render_report.items_processed = 1
    render_report.metrics = outputs
    render_report.status = "completed"
    pl.finish_step("render", render_report)

    print(f"\nWrote {outputs['index']}", flush=True)
    _finalize(pl, 0, outputs)
    return 0


def _finalize(pl: PipelineLogger, exit_code: int, outputs: dict[str, Any] | None = None) -> None:
    """Write run summary JSON and append to the cross-run ledger."""
    summary_path = pl.write_summary()
    ledger_path = append_to_ledger(pl, exit_code, outputs=outputs)

    print(f"\n  Run logs : {pl.run_dir}", flush=True)
    print(f"  Summary  : {summary_path}", flush=True)
    print(f"  Ledger   : {ledger_path}", flush=True)


if __name__ == "__main__":
    sys.exit(main())
