"""
Clearance chart -- share of registered crimes that were solved, per category.

Missing years (the statistics office publishes some categories late) are
drawn as gaps. Grid and axes are static scaffolding.
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
from charts.handle import ChartHandle
from charts.scales import max_of
from pipeline.records import ClearanceRecord
from utils.config import ChartConfig, Palette
from utils.formatting import format_percent

logger = logging.getLogger(__name__)

NAME = "clearance"
Y_HEADROOM = 1.2

LAYERS = (
    "line-total", "line-property", "line-violent",
    "legend-total", "legend-property", "legend-violent",
)


def clearance_series(palette: Palette) -> tuple[Series, Series, Series]:
    # Legend colours follow the lines; the total line is drawn in black.
    return (
        Series("total", "Totaal", lambda r: r.total, palette.dark),
        Series("property", "Vermogen", lambda r: r.property, palette.primary),
        Series("violent", "Geweld", lambda r: r.violent, palette.tertiary),
    )


def _axis_percent(value: float) -> str:
    return format_percent(value, precision=0)


def build_clearance_chart(records: Sequence[ClearanceRecord], config: ChartConfig,
                          palette: Palette) -> ChartHandle:
    """Build the clearance chart; y runs from 0 to 120% of the highest rate."""
    upper = max_of(records, lambda r: r.total, lambda r: r.property, lambda r: r.violent)
    handle = new_handle(NAME, records, config, 0,
                        upper * Y_HEADROOM if upper is not None else None)
    handle.static.extend(axis_elements(handle, _axis_percent, config))

    series = clearance_series(palette)
    for s in series:
        label = end_label(last_defined(records, s.value), s, handle, config, format_percent)
        add_line_layer(handle, s, records, config, label)
    add_legend_layers(handle, series, config)
    logger.info("clearance: built %d layers over %d records", len(handle.layers), len(records))
    return handle
