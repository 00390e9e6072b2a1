"""Linear scales and tick generation for the chart builders.

The tick algorithm follows the one browser charting libraries use for
``scale.ticks(count)``: pick a step of 1, 2 or 5 times a power of ten so that
roughly ``count`` ticks cover the domain, then list the multiples of that
step that fall inside it.
"""

import math
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def _tick_spec(start: float, stop: float, count: float) -> Tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = 10 ** -power / factor
        i1 = _round_half_up(start * inc)
        i2 = _round_half_up(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = 10 ** power * factor
        i1 = _round_half_up(start / inc)
        i2 = _round_half_up(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def ticks(start: float, stop: float, count: int = 10) -> List[float]:
    """Return evenly spaced, human-friendly values in [start, stop]."""
    if count <= 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    i1, i2, inc = _tick_spec(lo, hi, count)
    if i2 < i1:
        return []
    n = i2 - i1 + 1
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(n)]
    else:
        values = [(i1 + i) * inc for i in range(n)]
    return values[::-1] if reverse else values


def extent(values: Iterable[Optional[float]]) -> Optional[Tuple[float, float]]:
    """Min and max of the non-null values, or None when there are none."""
    present = [v for v in values if v is not None and not math.isnan(v)]
    if not present:
        return None
    return min(present), max(present)


def max_of(records: Sequence, *accessors: Callable) -> Optional[float]:
    """Largest non-null value any accessor yields over the records."""
    values = [acc(r) for r in records for acc in accessors]
    ext = extent(values)
    return ext[1] if ext else None


class LinearScale:
    """Maps a numeric domain linearly onto a pixel range.

    A degenerate domain (both ends equal) maps every value to the middle of
    the range rather than dividing by zero.
    """

    def __init__(self, domain: Tuple[float, float], range_: Tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    @property
    def is_degenerate(self) -> bool:
        return self.domain[0] == self.domain[1]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if self.is_degenerate:
            t = 0.5
        else:
            t = (value - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            return (d0 + d1) / 2
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int = 10) -> List[float]:
        return ticks(self.domain[0], self.domain[1], count)

    def __repr__(self) -> str:
        return f"LinearScale(domain={self.domain}, range={self.range})"
