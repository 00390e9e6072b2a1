"""
Tests for pipeline/logging.py and pipeline/run_ledger.py
"""
import json
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pipeline.logging import PipelineLogger, SkipRecord, StepReport
from pipeline.run_ledger import append_to_ledger
from utils.validation import ValidationResult


@pytest.fixture()
def pl(tmp_path):
    return PipelineLogger(logs_dir=tmp_path / "logs")


class TestStepReport:
    def test_add_skip_and_error(self):
        rpt = StepReport("load")
        rpt.add_skip("malformed_cell", "Totaal row 3", "crime")
        rpt.add_skip("malformed_cell", "Gewelds- row 6", "clearance")
        rpt.add_skip("dropped_row", "no year")
        rpt.add_error("boom")
        assert rpt.items_skipped == 3
        assert rpt.items_errored == 1
        assert rpt.skip_counts_by_category() == {"malformed_cell": 2, "dropped_row": 1}

    def test_add_validation_keeps_drawing_issues_only(self):
        validation = ValidationResult()
        validation.add_issue("malformed_cell", "warning", "unreadable", sample="n.b.",
                             dataset="clearance")
        validation.add_issue("dropped_row", "warning", "no year", dataset="budget")
        validation.add_issue("ascending_years", "info", "re-sorted", dataset="crime")
        rpt = StepReport("load")
        rpt.add_validation(validation)
        assert [s.category for s in rpt.skips] == ["malformed_cell", "dropped_row"]
        assert rpt.skips[0].item == "clearance"

    def test_console_summary(self):
        rpt = StepReport("load", items_processed=1200)
        rpt.add_skip("malformed_cell", "x")
        assert rpt.console_summary() == "1,200 processed | 1 skipped (1 malformed cell)"
        assert StepReport("build").console_summary() == "no activity"

    def test_to_dict_omits_empty_sections(self):
        d = StepReport("render", status="completed").to_dict()
        assert "skips" not in d
        assert "errors" not in d
        assert d["status"] == "completed"


def test_skip_record_to_dict():
    assert SkipRecord("dropped_row", "no year").to_dict() == {
        "category": "dropped_row", "detail": "no year",
    }
    assert SkipRecord("malformed_cell", "x", "crime").to_dict()["item"] == "crime"


class TestPipelineLogger:
    def test_step_log_file(self, pl):
        report = pl.start_step("load")
        logging.getLogger("pipeline.loader").warning("cell unreadable")
        pl.finish_step("load", report)
        text = (pl.run_dir / "load.log").read_text(encoding="utf-8")
        assert "cell unreadable" in text
        assert "STEP SUMMARY: load" in text
        assert report.status == "completed"

    def test_handler_detached(self, pl):
        before = len(logging.getLogger().handlers)
        pl.finish_step("load", pl.start_step("load"))
        assert len(logging.getLogger().handlers) == before

    def test_failed_status_is_kept(self, pl):
        report = pl.start_step("build")
        report.status = "failed"
        pl.finish_step("build", report)
        assert pl.get_reports()["build"].status == "failed"

    def test_write_summary(self, pl):
        pl.args_dict = {"out": "site"}
        pl.finish_step("load", pl.start_step("load"))
        path = pl.write_summary()
        assert path == pl.summary_path
        summary = json.loads(path.read_text())
        assert summary["run_id"] == pl.run_id
        assert summary["args"] == {"out": "site"}
        assert summary["steps"]["load"]["status"] == "completed"


class TestLedger:
    def test_appends_one_line_per_run(self, pl):
        report = pl.start_step("load")
        report.add_skip("malformed_cell", "x", "crime")
        pl.finish_step("load", report)
        path = append_to_ledger(pl, 0, outputs={"index": "site/index.html"})
        append_to_ledger(pl, 1)
        lines = path.read_text().splitlines()
        assert path == pl.logs_root / "ledger.jsonl"
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["exit_code"] == 0
        assert first["steps"]["load"]["skip_categories"] == {"malformed_cell": 1}
        assert first["outputs"] == {"index": "site/index.html"}
        assert "outputs" not in json.loads(lines[1])

    def test_custom_path(self, pl, tmp_path):
        path = append_to_ledger(pl, 0, ledger_path=tmp_path / "elsewhere" / "runs.jsonl")
        assert path.exists()
