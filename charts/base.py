"""
Shared building blocks for the three chart builders.

Each builder picks its own domains, series and legend; the geometry for a
line layer, an end label, the legend entries and the axis scaffolding is the
same everywhere and lives here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from charts import axes
from charts.curves import line_path, series_runs
from charts.handle import ChartHandle, Layer, SvgElement
from charts.scales import LinearScale, extent
from utils.config import ChartConfig
from utils.errors import ChartBuildError
from utils.formatting import format_year

logger = logging.getLogger(__name__)

Accessor = Callable[[object], "float | None"]

LEGEND_X_OFFSET = 20
LEGEND_Y_OFFSET = 20
LEGEND_SWATCH = 30
LEGEND_TEXT_X = 40


@dataclass(frozen=True)
class Series:
    """One plotted series: the layer it lives in, its values and its style."""

    key: str                       # short name, e.g. "budgeted"
    label: str                     # legend text
    value: Accessor
    color: str
    dash: str | None = None

    @property
    def line_layer(self) -> str:
        return f"line-{self.key}"

    @property
    def legend_layer(self) -> str:
        return f"legend-{self.key}"


def require_records(chart: str, records: Sequence) -> None:
    if not records:
        raise ChartBuildError(f"Cannot build chart {chart!r}: no records")


def year_scale(records: Sequence, width: float) -> LinearScale:
    """x scale over the year extent of the records."""
    lo, hi = extent(r.year for r in records)
    return LinearScale((lo, hi), (0, width))


def value_scale(lower: float, upper: float | None, height: float) -> LinearScale:
    """y scale from *lower* to *upper*, inverted so larger values sit higher.

    With no upper bound (every value missing) the domain collapses onto
    *lower* and all points map to the vertical midpoint.
    """
    if upper is None:
        upper = lower
    return LinearScale((lower, upper), (height, 0))


def new_handle(name: str, records: Sequence, config: ChartConfig,
               y_lower: float, y_upper: float | None) -> ChartHandle:
    """Validate the records and set up an empty handle with both scales."""
    require_records(name, records)
    width, height = config.inner_width, config.inner_height
    handle = ChartHandle(
        name=name,
        x=year_scale(records, width),
        y=value_scale(y_lower, y_upper, height),
        width=width,
        height=height,
        margin=dict(config.margin),
    )
    logger.debug("%s: x=%s y=%s", name, handle.x, handle.y)
    return handle


def axis_elements(handle: ChartHandle, y_format: Callable[[float], str],
                  config: ChartConfig) -> tuple[SvgElement, SvgElement, SvgElement]:
    """Grid, x axis and y axis for a handle (in drawing order)."""
    return (
        axes.grid(handle.y, handle.width, config.tick_count),
        axes.bottom_axis(handle.x, handle.height, format_year, config.tick_count,
                         integer=True),
        axes.left_axis(handle.y, y_format, config.tick_count),
    )


def path_element(series: Series, records: Sequence, handle: ChartHandle,
                 config: ChartConfig) -> SvgElement:
    runs = series_runs(records, series.value, handle.x, handle.y)
    attrs = {
        "class": f"line line-{series.key}",
        "d": line_path(runs),
        "fill": "none",
        "stroke": series.color,
        "stroke-width": config.stroke_width,
    }
    if series.dash:
        attrs["stroke-dasharray"] = series.dash
    return SvgElement("path", attrs)


def last_defined(records: Sequence, value: Accessor):
    """The last record whose value is present, or None."""
    for record in reversed(records):
        if value(record) is not None:
            return record
    return None


def end_label(record, series: Series, handle: ChartHandle, config: ChartConfig,
              fmt: Callable[[float], str]) -> SvgElement | None:
    """Bold value label just right of a series' anchor point.

    Returns None when the anchor record has no value for the series.
    """
    if record is None:
        return None
    value = series.value(record)
    if value is None:
        logger.info("%s: no end label for %s (no value in %s)",
                    handle.name, series.key, record.year)
        return None
    return SvgElement("g", {"class": "end-label"}, children=[SvgElement(
        "text",
        {
            "x": f"{handle.x(record.year) + config.label_offset:.3f}",
            "y": f"{handle.y(value):.3f}",
            "dy": "0.35em",
            "font-size": "14px",
            "font-weight": "bold",
            "fill": series.color,
        },
        fmt(value),
    )])


def add_line_layer(handle: ChartHandle, series: Series, records: Sequence,
                   config: ChartConfig, label: SvgElement | None = None) -> Layer:
    elements = [path_element(series, records, handle, config)]
    if label is not None:
        elements.append(label)
    return handle.add_layer(Layer(series.line_layer, "line", elements))


def add_legend_layers(handle: ChartHandle, series: Sequence[Series],
                      config: ChartConfig) -> list[Layer]:
    """One legend entry per series, stacked to the right of the plot area."""
    layers = []
    for i, s in enumerate(series):
        swatch = {
            "x1": 0, "x2": LEGEND_SWATCH, "y1": 0, "y2": 0,
            "stroke": s.color, "stroke-width": config.stroke_width,
        }
        if s.dash:
            swatch["stroke-dasharray"] = s.dash
        x = handle.width + LEGEND_X_OFFSET
        y = LEGEND_Y_OFFSET + i * config.legend_spacing
        layers.append(handle.add_layer(Layer(
            s.legend_layer,
            "legend",
            [
                SvgElement("line", swatch),
                SvgElement("text", {"x": LEGEND_TEXT_X, "y": 5, "class": "legend-text"}, s.label),
            ],
            transform=f"translate({x:g},{y:g})",
        )))
    return layers
