"""
Crime chart -- registered crimes: total, violent and property.

Grid and axes are static scaffolding and stay visible; only the lines and
their legend entries are layers. Vandalism is loaded but not drawn.
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
from pipeline.records import CrimeRecord
from utils.config import ChartConfig, Palette
from utils.formatting import format_thousands

logger = logging.getLogger(__name__)

NAME = "crime"
Y_HEADROOM = 1.1

LAYERS = (
    "line-total", "line-violent", "line-property",
    "legend-total", "legend-violent", "legend-property",
)


def crime_series(palette: Palette) -> tuple[Series, Series, Series]:
    return (
        Series("total", "Totaal", lambda r: r.total, palette.dark),
        Series("violent", "Geweld", lambda r: r.violent, palette.tertiary),
        Series("property", "Vermogen", lambda r: r.property, palette.primary),
    )


def build_crime_chart(records: Sequence[CrimeRecord], config: ChartConfig,
                      palette: Palette) -> ChartHandle:
    """Build the crime chart; the y axis runs from 0 to 110% of the peak total."""
    upper = max_of(records, lambda r: r.total)
    handle = new_handle(NAME, records, config, 0,
                        upper * Y_HEADROOM if upper is not None else None)
    handle.static.extend(axis_elements(handle, format_thousands, config))

    series = crime_series(palette)
    for s in series:
        label = end_label(last_defined(records, s.value), s, handle, config, format_thousands)
        add_line_layer(handle, s, records, config, label)
    add_legend_layers(handle, series, config)
    logger.info("crime: built %d layers over %d records", len(handle.layers), len(records))
    return handle
