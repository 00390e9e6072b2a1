"""
Charts package -- SVG geometry for the three story charts.

Each builder takes records, a ChartConfig and a Palette and returns a
ChartHandle whose layers all start hidden::

    from charts import build_budget_chart
    handle = build_budget_chart(datasets.budget, ChartConfig(), Palette())
"""

from charts.handle import ChartHandle, Layer, SvgElement
from charts.scales import LinearScale, ticks
from charts.budget import build_budget_chart
from charts.crime import build_crime_chart
from charts.clearance import build_clearance_chart

BUILDERS = {
    "budget": build_budget_chart,
    "crime": build_crime_chart,
    "clearance": build_clearance_chart,
}

__all__ = [
    "BUILDERS",
    "ChartHandle",
    "Layer",
    "LinearScale",
    "SvgElement",
    "build_budget_chart",
    "build_clearance_chart",
    "build_crime_chart",
    "ticks",
]
