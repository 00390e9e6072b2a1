"""Axis and grid geometry, laid out the way a left/bottom axis generator does.

Ticks sit 6px outside the domain line with labels 3px beyond; the grid is a
set of horizontal lines spanning the plot width at each y tick.
"""

from typing import Callable, List

from charts.handle import SvgElement
from charts.scales import LinearScale

TICK_SIZE = 6
TICK_PADDING = 3


def _tick_values(scale: LinearScale, count: int, integer: bool = False) -> List[float]:
    values = scale.ticks(count)
    if integer:
        values = [v for v in values if float(v).is_integer()]
    if not values and scale.is_degenerate:
        return [scale.domain[0]]
    return values


def bottom_axis(scale: LinearScale, height: float, fmt: Callable[[float], str],
                count: int = 10, integer: bool = False) -> SvgElement:
    """Horizontal axis along the bottom of the plot area.

    With *integer* set, fractional ticks are dropped (a year axis over a
    short span would otherwise label half years).
    """
    r0, r1 = scale.range
    group = SvgElement("g", {
        "class": "axis axis-x",
        "transform": f"translate(0,{height:g})",
        "text-anchor": "middle",
    })
    group.children.append(SvgElement("path", {
        "class": "domain",
        "d": f"M{r0:g},{TICK_SIZE}V0H{r1:g}V{TICK_SIZE}",
    }))
    for value in _tick_values(scale, count, integer):
        x = scale(value)
        tick = SvgElement("g", {"class": "tick", "transform": f"translate({x:.3f},0)"})
        tick.children.append(SvgElement("line", {"y2": TICK_SIZE}))
        tick.children.append(SvgElement(
            "text", {"y": TICK_SIZE + TICK_PADDING, "dy": "0.71em"}, fmt(value)
        ))
        group.children.append(tick)
    return group


def left_axis(scale: LinearScale, fmt: Callable[[float], str],
              count: int = 10) -> SvgElement:
    """Vertical axis along the left of the plot area."""
    r0, r1 = scale.range
    group = SvgElement("g", {"class": "axis axis-y", "text-anchor": "end"})
    group.children.append(SvgElement("path", {
        "class": "domain",
        "d": f"M-{TICK_SIZE},{r0:g}H0V{r1:g}H-{TICK_SIZE}",
    }))
    for value in _tick_values(scale, count):
        y = scale(value)
        tick = SvgElement("g", {"class": "tick", "transform": f"translate(0,{y:.3f})"})
        tick.children.append(SvgElement("line", {"x2": -TICK_SIZE}))
        tick.children.append(SvgElement(
            "text", {"x": -(TICK_SIZE + TICK_PADDING), "dy": "0.32em"}, fmt(value)
        ))
        group.children.append(tick)
    return group


def grid(scale: LinearScale, width: float, count: int = 10) -> SvgElement:
    """Horizontal grid lines at each y tick, without labels."""
    group = SvgElement("g", {"class": "grid"})
    for value in _tick_values(scale, count):
        y = scale(value)
        group.children.append(SvgElement("line", {
            "x1": 0, "x2": f"{width:g}", "y1": f"{y:.3f}", "y2": f"{y:.3f}",
        }))
    return group
