"""
Tests for charts/scales.py and charts/curves.py

Tick generation, linear scales (including the degenerate domain), gap
segmentation and the monotone curve path output.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from charts.curves import area_path, defined_runs, line_path, series_runs
from charts.scales import LinearScale, extent, max_of, ticks
from pipeline.records import ClearanceRecord


# ── ticks ─────────────────────────────────────────────────────────────────────

class TestTicks:
    def test_year_domain_gives_every_year(self):
        assert ticks(2015, 2026, 10) == [float(y) for y in range(2015, 2027)]

    def test_budget_domain_steps_of_500(self):
        assert ticks(5000, 8532.72, 10) == [5000, 5500, 6000, 6500, 7000, 7500, 8000, 8500]

    def test_fractional_step(self):
        assert ticks(0, 1, 5) == [0.0, 0.2, 0.4, 0.6, 0.8, 1.0]

    def test_reversed_domain(self):
        assert ticks(10, 0, 5) == [10, 8, 6, 4, 2, 0]

    def test_single_value_domain(self):
        assert ticks(3, 3, 10) == [3]

    def test_zero_count(self):
        assert ticks(0, 10, 0) == []


# ── extent / max_of ───────────────────────────────────────────────────────────

def test_extent_skips_missing_values():
    assert extent([None, 3, 1, float("nan")]) == (1, 3)


def test_extent_of_nothing_is_none():
    assert extent([None, None]) is None


def test_max_of_over_several_accessors(clearance_records):
    assert max_of(clearance_records, lambda r: r.total, lambda r: r.violent) == 55.8


def test_max_of_all_missing():
    records = [ClearanceRecord(2020), ClearanceRecord(2021)]
    assert max_of(records, lambda r: r.total) is None


# ── LinearScale ───────────────────────────────────────────────────────────────

class TestLinearScale:
    def test_maps_linearly(self):
        scale = LinearScale((0, 10), (0, 100))
        assert scale(5) == 50
        assert scale(10) == 100

    def test_inverted_pixel_range(self):
        scale = LinearScale((0, 10), (400, 0))
        assert scale(0) == 400
        assert scale(10) == 0
        assert scale.invert(200) == 5

    def test_degenerate_domain_maps_to_middle(self):
        scale = LinearScale((2020, 2020), (0, 700))
        assert scale.is_degenerate
        assert scale(2020) == 350
        assert scale(1999) == 350

    def test_ticks_use_domain(self):
        assert LinearScale((0, 100), (0, 1)).ticks(5) == [0, 20, 40, 60, 80, 100]


# ── curves ────────────────────────────────────────────────────────────────────

class TestDefinedRuns:
    def test_split_at_missing(self):
        assert defined_runs([1, None, 2, 3, None], lambda v: v is not None) == [[1], [2, 3]]

    def test_all_missing(self):
        assert defined_runs([None, None], lambda v: v is not None) == []


class TestLinePath:
    def test_two_points_are_a_straight_line(self):
        assert line_path([[(0, 0), (10, 10)]]) == "M0,0L10,10"

    def test_straight_series_stays_straight(self):
        assert line_path([[(0, 0), (1, 1), (2, 2)]]) == (
            "M0,0C0.333,0.333,0.667,0.667,1,1C1.333,1.333,1.667,1.667,2,2"
        )

    def test_peak_is_not_overshot(self):
        # the tangent at a local extremum is flat, so no control point passes it
        assert line_path([[(0, 0), (1, 10), (2, 0)]]) == (
            "M0,0C0.333,5,0.667,10,1,10C1.333,10,1.667,5,2,0"
        )

    def test_gap_starts_a_new_subpath(self):
        path = line_path([[(0, 0), (10, 10)], [(30, 5), (40, 5)]])
        assert path == "M0,0L10,10M30,5L40,5"
        assert path.count("M") == 2

    def test_isolated_point_is_closed(self):
        assert line_path([[(5, 7)]]) == "M5,7Z"

    def test_no_runs_is_empty(self):
        assert line_path([]) == ""


class TestAreaPath:
    def test_top_forward_bottom_reversed_closed(self):
        assert area_path([[(0, 10, 20), (10, 5, 20)]]) == "M0,10L10,5L10,20L0,20Z"

    def test_single_point_area(self):
        assert area_path([[(0, 10, 20)]]) == "M0,10L0,20Z"

    def test_each_run_is_closed(self):
        path = area_path([[(0, 1, 2), (1, 1, 2)], [(3, 1, 2), (4, 1, 2)]])
        assert path.count("Z") == 2
        assert path.count("M") == 2


def test_series_runs_projects_and_splits(clearance_records):
    runs = series_runs(clearance_records, lambda r: r.property,
                       x=lambda year: year - 2019, y=lambda v: v * 10)
    assert runs == [
        [(0, pytest.approx(97.0)), (1, pytest.approx(91.0)), (2, pytest.approx(94.0))],
        [(4, pytest.approx(88.0))],
    ]
