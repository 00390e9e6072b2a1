"""SVG path generation: monotone-X curves, gap segmentation, areas.

Lines are drawn with monotone cubic interpolation in x (Steffen's method):
the curve passes through every point and never overshoots between two of
them, so a flat year stays flat and a peak stays the peak.

Gap policy: a point whose value is None splits the series. Each run of
consecutive defined points becomes its own sub-path; nothing is drawn across
the missing year.
"""

import math
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

Point = Tuple[float, float]
T = TypeVar("T")


def _fmt(value: float) -> str:
    """Compact number for path data: at most 3 decimals, no trailing zeros."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _sign(x: float) -> int:
    return -1 if x < 0 else 1


def defined_runs(items: Sequence[T], defined: Callable[[T], bool]) -> List[List[T]]:
    """Split items into runs of consecutive entries for which defined() holds."""
    runs: List[List[T]] = []
    current: List[T] = []
    for item in items:
        if defined(item):
            current.append(item)
        elif current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)
    return runs


class _PathContext:
    """Accumulates SVG path commands."""

    def __init__(self) -> None:
        self.parts: List[str] = []

    def move_to(self, x: float, y: float) -> None:
        self.parts.append(f"M{_fmt(x)},{_fmt(y)}")

    def line_to(self, x: float, y: float) -> None:
        self.parts.append(f"L{_fmt(x)},{_fmt(y)}")

    def curve_to(self, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> None:
        self.parts.append(
            f"C{_fmt(x1)},{_fmt(y1)},{_fmt(x2)},{_fmt(y2)},{_fmt(x)},{_fmt(y)}"
        )

    def close(self) -> None:
        self.parts.append("Z")

    def __str__(self) -> str:
        return "".join(self.parts)


class MonotoneX:
    """Monotone cubic curve writer over points with monotonic x.

    ``line_start``/``point``/``line_end`` mirror a streaming curve interface;
    ``area_start``/``area_end`` switch the writer into polygon mode where the
    second line of a pair continues the first and the shape is closed.
    """

    def __init__(self, context: _PathContext) -> None:
        self.ctx = context
        self._line: Optional[int] = None
        self._reset()

    def _reset(self) -> None:
        self._x0 = self._x1 = self._y0 = self._y1 = self._t0 = math.nan
        self._point = 0

    def area_start(self) -> None:
        self._line = 0

    def area_end(self) -> None:
        self._line = None

    def line_start(self) -> None:
        self._reset()

    def _slope3(self, x2: float, y2: float) -> float:
        h0 = self._x1 - self._x0
        h1 = x2 - self._x1
        if h0 == 0 or h1 == 0 or h0 + h1 == 0:
            return 0.0
        s0 = (self._y1 - self._y0) / h0
        s1 = (y2 - self._y1) / h1
        p = (s0 * h1 + s1 * h0) / (h0 + h1)
        return (_sign(s0) + _sign(s1)) * min(abs(s0), abs(s1), 0.5 * abs(p))

    def _slope2(self, t: float) -> float:
        h = self._x1 - self._x0
        return (3 * (self._y1 - self._y0) / h - t) / 2 if h else t

    def _hermite(self, t0: float, t1: float) -> None:
        dx = (self._x1 - self._x0) / 3
        self.ctx.curve_to(
            self._x0 + dx, self._y0 + dx * t0,
            self._x1 - dx, self._y1 - dx * t1,
            self._x1, self._y1,
        )

    def point(self, x: float, y: float) -> None:
        if x == self._x1 and y == self._y1:
            return
        t1 = math.nan
        if self._point == 0:
            self._point = 1
            if self._line:
                self.ctx.line_to(x, y)
            else:
                self.ctx.move_to(x, y)
        elif self._point == 1:
            self._point = 2
        elif self._point == 2:
            self._point = 3
            t1 = self._slope3(x, y)
            self._hermite(self._slope2(t1), t1)
        else:
            t1 = self._slope3(x, y)
            self._hermite(self._t0, t1)
        self._x0, self._x1 = self._x1, x
        self._y0, self._y1 = self._y1, y
        self._t0 = t1

    def line_end(self) -> None:
        if self._point == 2:
            self.ctx.line_to(self._x1, self._y1)
        elif self._point == 3:
            self._hermite(self._t0, self._slope2(self._t0))
        in_area = self._line is not None
        if (in_area and self._line) or (not in_area and self._point == 1):
            self.ctx.close()
        if in_area:
            self._line = 1 - self._line


def line_path(points_runs: Sequence[Sequence[Point]]) -> str:
    """SVG path data for one or more runs of points (one sub-path per run).

    An isolated single point becomes ``M x,yZ`` so it is still visible with
    round line caps.
    """
    ctx = _PathContext()
    curve = MonotoneX(ctx)
    for run in points_runs:
        curve.line_start()
        for x, y in run:
            curve.point(x, y)
        curve.line_end()
    return str(ctx)


def area_path(runs: Sequence[Sequence[Tuple[float, float, float]]]) -> str:
    """SVG path data for the region between two curves.

    Each run holds (x, y_top, y_bottom) triples; the top edge is drawn left to
    right, the bottom edge right to left, and the polygon is closed.
    """
    ctx = _PathContext()
    curve = MonotoneX(ctx)
    for run in runs:
        curve.area_start()
        curve.line_start()
        for x, y_top, _ in run:
            curve.point(x, y_top)
        curve.line_end()
        curve.line_start()
        for x, _, y_bottom in reversed(run):
            curve.point(x, y_bottom)
        curve.line_end()
        curve.area_end()
    return str(ctx)


def series_runs(
    records: Sequence[T],
    value: Callable[[T], Optional[float]],
    x: Callable[[float], float],
    y: Callable[[float], float],
) -> List[List[Point]]:
    """Project a record series to pixel runs, breaking at missing values."""
    runs = defined_runs(records, lambda r: value(r) is not None)
    return [[(x(r.year), y(value(r))) for r in run] for run in runs]
