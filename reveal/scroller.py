"""
Scroll observer -- decides which narrative step the reader is in.

Modelled on the browser scrollama library the page uses: a trigger line sits
``offset`` of the way down the viewport, and the step whose box contains that
line is the current step. When the current step changes, the observer emits
an exit event for the old step and an enter event for the new one, both
tagged with the scroll direction.

Each chart gets its own observer; observers share no state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_OFFSET = 0.7

DOWN = "down"
UP = "up"


@dataclass
class StepBox:
    """Measured vertical extent of a step element, in page coordinates."""

    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains(self, y: float) -> bool:
        return self.top <= y < self.bottom


@dataclass
class StepMarker:
    """A narrative text block; ``active`` while the reader is inside it."""

    index: int
    box: StepBox
    active: bool = False


@dataclass(frozen=True)
class StepEvent:
    kind: str          # "enter" | "exit"
    index: int
    direction: str     # "down" | "up"


StepCallback = Callable[[StepEvent], None]


class ScrollObserver:
    """Classifies scroll positions against a list of step boxes."""

    def __init__(self, name: str, offset: float = DEFAULT_OFFSET) -> None:
        if not 0 <= offset <= 1:
            raise ValueError(f"offset must be in [0, 1], got {offset}")
        self.name = name
        self.offset = offset
        self.markers: list[StepMarker] = []
        self.current: int | None = None
        self.resize_count = 0
        self._last_scroll: float | None = None
        self._enter_callbacks: list[StepCallback] = []
        self._exit_callbacks: list[StepCallback] = []

    def setup(self, boxes: Sequence[tuple[float, float]]) -> "ScrollObserver":
        """Register the steps by their (top, height) boxes, in step order."""
        self.markers = [StepMarker(i, StepBox(top, height)) for i, (top, height) in enumerate(boxes)]
        self.current = None
        self._last_scroll = None
        return self

    def on_step_enter(self, callback: StepCallback) -> "ScrollObserver":
        self._enter_callbacks.append(callback)
        return self

    def on_step_exit(self, callback: StepCallback) -> "ScrollObserver":
        self._exit_callbacks.append(callback)
        return self

    def trigger_line(self, scroll_top: float, viewport_height: float) -> float:
        return scroll_top + self.offset * viewport_height

    def step_at(self, y: float) -> int | None:
        for marker in self.markers:
            if marker.box.contains(y):
                return marker.index
        return None

    def update(self, scroll_top: float, viewport_height: float) -> list[StepEvent]:
        """Classify a scroll position and fire exit/enter events for a step change."""
        direction = UP if self._last_scroll is not None and scroll_top < self._last_scroll else DOWN
        self._last_scroll = scroll_top
        new = self.step_at(self.trigger_line(scroll_top, viewport_height))
        if new == self.current:
            return []

        events = []
        if self.current is not None:
            events.append(self._exit(self.current, direction))
        if new is not None:
            events.append(self._enter(new, direction))
        self.current = new
        return events

    def _enter(self, index: int, direction: str) -> StepEvent:
        event = StepEvent("enter", index, direction)
        self.markers[index].active = True
        logger.debug("%s: enter step %d (%s)", self.name, index, direction)
        for callback in self._enter_callbacks:
            callback(event)
        return event

    def _exit(self, index: int, direction: str) -> StepEvent:
        event = StepEvent("exit", index, direction)
        self.markers[index].active = False
        logger.debug("%s: exit step %d (%s)", self.name, index, direction)
        for callback in self._exit_callbacks:
            callback(event)
        return event

    def resize(self, boxes: Sequence[tuple[float, float]] | None = None) -> None:
        """Re-measure the steps after a layout change.

        Only the boxes change; the current step and the charts stay as they
        are until the next update.
        """
        self.resize_count += 1
        if boxes is None:
            return
        if len(boxes) != len(self.markers):
            raise ValueError(
                f"{self.name}: expected {len(self.markers)} step boxes, got {len(boxes)}"
            )
        for marker, (top, height) in zip(self.markers, boxes):
            marker.box = StepBox(top, height)

    def active_steps(self) -> list[int]:
        return [m.index for m in self.markers if m.active]
