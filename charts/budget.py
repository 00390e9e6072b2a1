"""
Budget chart -- police budget, realisation and the inflation-only path.

Layers:
    grid, x-axis, y-axis             axes scaffolding (hidden until step 2)
    line-budgeted, line-actual,
    line-inflation                   one monotone line each, with end label
    shaded-area                      region between budgeted and inflation
    annotation                       "€9,5 mrd extra" at 2020
    legend-budgeted, legend-actual,
    legend-inflation                 one legend entry each

The y axis starts at €5 mrd (5,000 million) rather than zero so the gap
between the budget and the inflation-only path stays readable.
"""

from __future__ import annotations

import logging
from typing import Sequence

from charts.base import (
    Series,
    add_legend_layers,
    add_line_layer,
    axis_elements,
    end_label,
    last_defined,
    new_handle,
)
from charts.curves import area_path, defined_runs
from charts.handle import ChartHandle, Layer, SvgElement
from charts.scales import max_of
from pipeline.records import BudgetRecord
from utils.config import ChartConfig, Palette
from utils.formatting import format_billions

logger = logging.getLogger(__name__)

NAME = "budget"

Y_FLOOR = 5000
Y_HEADROOM = 1.05

ANNOTATION_YEAR = 2020
ANNOTATION_TEXT = "€9,5 mrd extra"
AREA_OPACITY = 0.2
INFLATION_DASH = "5,5"

LAYERS = (
    "grid", "x-axis", "y-axis",
    "line-budgeted", "line-actual", "line-inflation",
    "shaded-area", "annotation",
    "legend-budgeted", "legend-actual", "legend-inflation",
)


def budget_series(palette: Palette) -> tuple[Series, Series, Series]:
    """Budgeted, actual and inflation-adjusted series, in legend order."""
    return (
        Series("budgeted", "Begroting", lambda r: r.budgeted, palette.primary),
        Series("actual", "Realisatie", lambda r: r.actual, palette.secondary),
        Series("inflation", "Inflatie (2015)", lambda r: r.inflation_adjusted,
               palette.tertiary, dash=INFLATION_DASH),
    )


def label_anchor(records: Sequence[BudgetRecord]) -> BudgetRecord:
    """Record the budgeted and inflation labels sit on.

    The last year is a draft budget, so the labels mark the year before it.
    """
    return records[-2] if len(records) >= 2 else records[-1]


def _shaded_area(handle: ChartHandle, records: Sequence[BudgetRecord],
                 palette: Palette) -> SvgElement:
    runs = defined_runs(
        records, lambda r: r.budgeted is not None and r.inflation_adjusted is not None
    )
    triples = [
        [(handle.x(r.year), handle.y(r.budgeted), handle.y(r.inflation_adjusted)) for r in run]
        for run in runs
    ]
    return SvgElement("path", {
        "class": "shaded-area",
        "d": area_path(triples),
        "fill": palette.primary,
        "opacity": AREA_OPACITY,
    })


def _annotation(handle: ChartHandle, records: Sequence[BudgetRecord],
                palette: Palette) -> SvgElement | None:
    anchor = next((r for r in records if r.year == ANNOTATION_YEAR), None)
    if anchor is None or anchor.budgeted is None or anchor.inflation_adjusted is None:
        logger.info("budget: annotation omitted, no complete data for %d", ANNOTATION_YEAR)
        return None
    mid_y = (handle.y(anchor.budgeted) + handle.y(anchor.inflation_adjusted)) / 2
    return SvgElement(
        "text",
        {
            "class": "area-annotation",
            "x": f"{handle.x(ANNOTATION_YEAR):.3f}",
            "y": f"{mid_y:.3f}",
            "text-anchor": "middle",
            "font-size": "18px",
            "font-weight": "bold",
            "fill": palette.primary,
        },
        ANNOTATION_TEXT,
    )


def build_budget_chart(records: Sequence[BudgetRecord], config: ChartConfig,
                       palette: Palette) -> ChartHandle:
    """Build the budget chart.

    Args:
        records: Budget records ascending by year.
        config: Drawing surface and styling.
        palette: Brand colours.

    Returns:
        A ChartHandle with every layer at opacity 0.

    Raises:
        ChartBuildError: If *records* is empty.
    """
    upper = max_of(records, lambda r: r.budgeted, lambda r: r.actual)
    handle = new_handle(NAME, records, config, Y_FLOOR,
                        upper * Y_HEADROOM if upper is not None else None)

    grid, x_axis, y_axis = axis_elements(handle, format_billions, config)
    handle.add_layer(Layer("grid", "grid", [grid]))
    handle.add_layer(Layer("x-axis", "axis", [x_axis]))
    handle.add_layer(Layer("y-axis", "axis", [y_axis]))

    handle.add_layer(Layer("shaded-area", "area", [_shaded_area(handle, records, palette)]))
    note = _annotation(handle, records, palette)
    handle.add_layer(Layer("annotation", "annotation", [note] if note else []))

    budgeted, actual, inflation = budget_series(palette)
    anchor = label_anchor(records)
    add_line_layer(handle, inflation, records, config,
                   end_label(anchor, inflation, handle, config, format_billions))
    add_line_layer(handle, budgeted, records, config,
                   end_label(anchor, budgeted, handle, config, format_billions))
    add_line_layer(handle, actual, records, config,
                   end_label(last_defined(records, actual.value), actual, handle,
                             config, format_billions))

    add_legend_layers(handle, (budgeted, actual, inflation), config)
    logger.info("budget: built %d layers over %d records", len(handle.layers), len(records))
    return handle
