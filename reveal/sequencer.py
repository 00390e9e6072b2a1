"""
Reveal sequencer -- turns "the reader entered step K" into layer transitions.

The sequencer looks the step up in its chart's RevealTable and hands the
full target state to a LayerAnimator. It keeps no other history: entering a
step always produces that step's target, whatever came before.
"""

from __future__ import annotations

import logging
import time

from reveal.animator import Clock, LayerAnimator
from reveal.state import RevealState
from reveal.tables import RevealTable

logger = logging.getLogger(__name__)


class RevealSequencer:
    """Drives one chart's layers through its reveal table."""

    def __init__(self, table: RevealTable, animator: LayerAnimator | None = None,
                 clock: Clock | None = None) -> None:
        self.table = table
        if animator is None:
            animator = LayerAnimator(table.layers, clock or time.monotonic)
        self.animator = animator
        self.current_step: int | None = None
        self._target = table.initial_state()

    @property
    def chart(self) -> str:
        return self.table.chart

    @property
    def target_state(self) -> RevealState:
        """The state the chart is heading to (hidden before any step)."""
        return self._target

    def enter(self, step: int, now: float | None = None) -> RevealState:
        """Enter *step* and start its transitions.

        Raises:
            UnknownStepError: If the step is not in the chart's table
        """
        target = self.table.target(step)
        started = self.animator.apply(target.state, target.duration_ms, now)
        logger.debug("%s: step %s -> %d transition(s) over %dms",
                     self.chart, step, len(started), target.duration_ms)
        self.current_step = step
        self._target = target.state
        return target.state

    def current_state(self, now: float | None = None) -> RevealState:
        """Opacities as they are on screen at *now*."""
        return RevealState(self.animator.snapshot(now))

    def settled(self, now: float | None = None) -> bool:
        return not self.animator.is_animating(now)
