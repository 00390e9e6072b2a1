"""
Tests for pipeline/loader.py — the concurrent "data ready" join

Reads the fixture CSV files from a temporary directory, checks that a
failure in any source aborts the join with every failure listed, and fakes
the HTTP fetch for remote sources.
"""
import sys
from pathlib import Path

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pipeline import loader
from pipeline.loader import load_datasets, parse_csv_text, read_all_sources
from pipeline.transform import STRICT
from utils.config import DataSources
from utils.errors import DataLoadError, MalformedCellError


# ── parse_csv_text ────────────────────────────────────────────────────────────

def test_parse_csv_text_headers_and_rows(csv_text):
    headers, rows = parse_csv_text(csv_text["clearance"])
    assert headers == ["Perioden", "Totaal", "Vermogens-", "Gewelds-"]
    assert len(rows) == 5
    assert rows[0]["Totaal"] == "25,9"
    assert rows[3]["Vermogens-"] == ""


def test_parse_csv_text_drops_blank_lines():
    headers, rows = parse_csv_text("Perioden,Totaal\n2020,1\n,\n\n")
    assert headers == ["Perioden", "Totaal"]
    assert rows == [{"Perioden": "2020", "Totaal": "1"}]


def test_parse_csv_text_strips_header_padding():
    headers, rows = parse_csv_text(" Jaar , Begroting\n2015,1\n")
    assert headers == ["Jaar", "Begroting"]
    assert rows[0]["Begroting"] == "1"


def test_parse_csv_text_quoted_amounts_keep_commas(csv_text):
    _, rows = parse_csv_text(csv_text["budget"])
    assert rows[0]["Begroting"] == "€5.100,0"
    assert rows[-1]["Realisatie"] == ""


# ── local join ────────────────────────────────────────────────────────────────

class TestLoadLocal:
    def test_loads_all_three(self, sources):
        datasets = load_datasets(sources)
        assert datasets.row_counts() == {"budget": 12, "crime": 5, "clearance": 5}
        assert datasets.budget[-1].actual is None
        assert datasets.clearance[3].property is None

    def test_read_all_sources_keeps_locations(self, sources, data_dir):
        tables = read_all_sources(sources)
        assert set(tables) == {"budget", "crime", "clearance"}
        assert tables["crime"].location == str(data_dir / "Misdrijven.csv")
        assert tables["crime"].headers[0] == "Perioden"

    def test_one_missing_file_fails_the_join(self, make_data_dir):
        s = DataSources()
        s.data_dir = make_data_dir(crime=None)
        with pytest.raises(DataLoadError) as exc_info:
            load_datasets(s)
        assert set(exc_info.value.failures) == {"crime"}
        assert "crime" in str(exc_info.value)

    def test_every_failure_is_listed(self, make_data_dir):
        s = DataSources()
        s.data_dir = make_data_dir(budget=None, clearance=None)
        with pytest.raises(DataLoadError) as exc_info:
            load_datasets(s)
        assert set(exc_info.value.failures) == {"budget", "clearance"}
        assert "2 dataset(s)" in str(exc_info.value)

    def test_missing_directory(self, tmp_path):
        s = DataSources()
        s.data_dir = tmp_path / "nowhere"
        with pytest.raises(DataLoadError) as exc_info:
            load_datasets(s)
        assert len(exc_info.value.failures) == 3

    def test_strict_policy_raises_on_malformed_cell(self, make_data_dir, csv_text):
        bad = csv_text["crime"].replace("816130", "816.130")
        s = DataSources()
        s.data_dir = make_data_dir(crime=bad)
        with pytest.raises(MalformedCellError):
            load_datasets(s, policy=STRICT)

    def test_lenient_policy_reports_malformed_cell(self, make_data_dir, csv_text):
        bad = csv_text["crime"].replace("816130", "816.130")
        s = DataSources()
        s.data_dir = make_data_dir(crime=bad)
        datasets = load_datasets(s)
        assert datasets.crime[1].total is None
        assert len(datasets.validation.get_issues_for("malformed_cell")) == 1

    def test_byte_order_mark_is_ignored(self, make_data_dir, csv_text):
        s = DataSources()
        s.data_dir = make_data_dir(budget="\ufeff" + csv_text["budget"])
        datasets = load_datasets(s)
        assert datasets.budget[0].year == 2015


# ── remote sources ────────────────────────────────────────────────────────────

class TestLoadRemote:
    def _sources(self):
        s = DataSources()
        s.base_url = "https://example.org/story/"
        return s

    def test_location_joins_base_url(self):
        assert self._sources().location("budget") == "https://example.org/story/Begroting.csv"

    def test_fetches_each_file(self, monkeypatch, csv_text):
        bodies = {
            "https://example.org/story/Begroting.csv": csv_text["budget"],
            "https://example.org/story/Misdrijven.csv": csv_text["crime"],
            "https://example.org/story/Ophelderingspercentage.csv": csv_text["clearance"],
        }
        fetched = []

        def fake_fetch(session, url, timeout=30, encoding="utf-8-sig"):
            fetched.append(url)
            return bodies[url]

        monkeypatch.setattr(loader, "fetch_text", fake_fetch)
        datasets = load_datasets(self._sources())
        assert sorted(fetched) == sorted(bodies)
        assert datasets.row_counts()["budget"] == 12

    def test_loads_share_one_session(self, monkeypatch, csv_text):
        bodies = {"Begroting": csv_text["budget"], "Misdrijven": csv_text["crime"],
                  "Ophelderingspercentage": csv_text["clearance"]}
        sessions = []

        def fake_fetch(session, url, timeout=30, encoding="utf-8-sig"):
            sessions.append(session)
            return bodies[url.rsplit("/", 1)[-1][:-len(".csv")]]

        monkeypatch.setattr(loader, "fetch_text", fake_fetch)
        load_datasets(self._sources())
        assert len(sessions) == 3
        assert len({id(s) for s in sessions}) == 1
        assert isinstance(sessions[0], requests.Session)

    def test_http_error_fails_the_join(self, monkeypatch, csv_text):
        def fake_fetch(session, url, timeout=30, encoding="utf-8-sig"):
            if url.endswith("Misdrijven.csv"):
                raise requests.HTTPError("404 Client Error: Not Found")
            return csv_text["budget"] if "Begroting" in url else csv_text["clearance"]

        monkeypatch.setattr(loader, "fetch_text", fake_fetch)
        with pytest.raises(DataLoadError) as exc_info:
            load_datasets(self._sources())
        assert list(exc_info.value.failures) == ["crime"]
        assert "404" in exc_info.value.failures["crime"]
