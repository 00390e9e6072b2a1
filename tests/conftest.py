"""
Pytest fixtures for the police budget story tests.

Provides the three CSV datasets as they appear in the published exports
(Dutch headers, euro amounts with thousands dots and decimal commas,
percentages with decimal commas), written to a temporary data directory,
plus already-transformed Datasets and a built Story.

The budget fixture runs 2015-2026 with the 2026 realisation still missing,
which is the shape the charts are designed around.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pipeline.records import BudgetRecord, ClearanceRecord, CrimeRecord  # noqa: E402
from pipeline.transform import transform_all  # noqa: E402
from utils.config import AppConfig, ChartConfig, DataSources, Palette  # noqa: E402


BUDGET_CSV = """Jaar,Begroting,Realisatie,Inflatie * Begroting2015
2015,"€5.100,0","€5.180,3","€5.100,0"
2016,"€5.298,4","€5.352,1","€5.116,3"
2017,"€5.466,2","€5.540,8","€5.133,7"
2018,"€5.612,9","€5.701,4","€5.198,2"
2019,"€5.789,5","€5.902,6","€5.332,1"
2020,"€6.011,3","€6.150,2","€5.402,5"
2021,"€6.248,7","€6.371,9","€5.544,0"
2022,"€6.630,4","€6.812,5","€6.113,8"
2023,"€7.120,6","€7.305,3","€6.359,4"
2024,"€7.592,3","€7.790,1","€6.566,1"
2025,"€7.980,1","€8.126,4","€6.808,2"
2026,"€8.310,5",,"€7.030,2"
"""

CRIME_CSV = """Perioden,Totaal,Geweldsmisdrijven,Vermogensmisdrijven,Vernielingen
2019,845820,92780,478350,117930
2020,816130,91420,446570,121060
2021,790250,90810,421740,118880
2022,816300,93640,437260,120150
2023,807410,94980,428190,116730
"""

CLEARANCE_CSV = """Perioden,Totaal,Vermogens-,Gewelds-
2019,"25,9","9,7","55,8"
2020,"24,8","9,1","54,0"
2021,"25,6","9,4","55,2"
2022,"25,1",,"54,6"
2023,"24,6","8,8",
"""


def write_data_dir(path: Path, budget: str = BUDGET_CSV, crime: str = CRIME_CSV,
                   clearance: str = CLEARANCE_CSV) -> Path:
    """Write the three CSV files into *path*; pass None to leave one out."""
    path.mkdir(parents=True, exist_ok=True)
    files = DataSources().files
    for name, text in (("budget", budget), ("crime", crime), ("clearance", clearance)):
        if text is not None:
            (path / files[name]).write_text(text, encoding="utf-8")
    return path


@pytest.fixture()
def csv_text():
    """The fixture CSV text by dataset name."""
    return {"budget": BUDGET_CSV, "crime": CRIME_CSV, "clearance": CLEARANCE_CSV}


@pytest.fixture()
def make_data_dir(tmp_path):
    """Factory: make_data_dir(crime=None) writes a directory with overrides."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        texts = {"budget": BUDGET_CSV, "crime": CRIME_CSV, "clearance": CLEARANCE_CSV}
        texts.update(overrides)
        return write_data_dir(tmp_path / f"data-{counter['n']}", **texts)

    return _make


@pytest.fixture()
def data_dir(tmp_path):
    """A directory with all three well-formed CSV files."""
    return write_data_dir(tmp_path / "data")


@pytest.fixture()
def sources(data_dir):
    s = DataSources()
    s.data_dir = data_dir
    return s


@pytest.fixture()
def app_config(data_dir, monkeypatch):
    """AppConfig pointing at the temporary data directory."""
    monkeypatch.delenv("STORY_DATA_URL", raising=False)
    monkeypatch.delenv("STORY_STRICT_PARSE", raising=False)
    monkeypatch.setenv("STORY_DATA_DIR", str(data_dir))
    return AppConfig.from_env()


@pytest.fixture()
def budget_records():
    return [
        BudgetRecord(2015, 5100.0, 5180.3, 5100.0),
        BudgetRecord(2016, 5298.4, 5352.1, 5116.3),
        BudgetRecord(2017, 5466.2, 5540.8, 5133.7),
        BudgetRecord(2018, 5612.9, 5701.4, 5198.2),
        BudgetRecord(2019, 5789.5, 5902.6, 5332.1),
        BudgetRecord(2020, 6011.3, 6150.2, 5402.5),
        BudgetRecord(2021, 6248.7, 6371.9, 5544.0),
        BudgetRecord(2022, 6630.4, 6812.5, 6113.8),
        BudgetRecord(2023, 7120.6, 7305.3, 6359.4),
        BudgetRecord(2024, 7592.3, 7790.1, 6566.1),
        BudgetRecord(2025, 7980.1, 8126.4, 6808.2),
        BudgetRecord(2026, 8310.5, None, 7030.2),
    ]


@pytest.fixture()
def crime_records():
    return [
        CrimeRecord(2019, 845820, 92780, 478350, 117930),
        CrimeRecord(2020, 816130, 91420, 446570, 121060),
        CrimeRecord(2021, 790250, 90810, 421740, 118880),
        CrimeRecord(2022, 816300, 93640, 437260, 120150),
        CrimeRecord(2023, 807410, 94980, 428190, 116730),
    ]


@pytest.fixture()
def clearance_records():
    return [
        ClearanceRecord(2019, 25.9, 9.7, 55.8),
        ClearanceRecord(2020, 24.8, 9.1, 54.0),
        ClearanceRecord(2021, 25.6, 9.4, 55.2),
        ClearanceRecord(2022, 25.1, None, 54.6),
        ClearanceRecord(2023, 24.6, 8.8, None),
    ]


@pytest.fixture()
def chart_config():
    return ChartConfig()


@pytest.fixture()
def palette():
    return Palette()


@pytest.fixture()
def datasets():
    """Transformed Datasets built straight from the CSV fixture text."""
    from pipeline.loader import parse_csv_text

    raw, headers = {}, {}
    for name, text in (("budget", BUDGET_CSV), ("crime", CRIME_CSV),
                       ("clearance", CLEARANCE_CSV)):
        headers[name], raw[name] = parse_csv_text(text)
    return transform_all(raw, headers=headers)


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def story(datasets, clock):
    from story.article import build_story

    return build_story(datasets, clock=clock)
