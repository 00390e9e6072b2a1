"""
Layer animator -- eased, pre-emptible opacity transitions.

Every layer animates on its own. Starting a new transition on a layer
replaces whatever transition it had (last write wins); the new one starts
from the opacity the layer shows at that instant, so an interrupted fade
never jumps.

Time comes from an injectable clock (seconds, monotonic) so the animator can
be driven deterministically.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping

from reveal.easing import ease_cubic_in_out

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class Transition:
    """One layer moving from ``start_value`` to ``end_value``."""

    layer: str
    start_value: float
    end_value: float
    start_time: float
    duration: float                    # seconds
    easing: Callable[[float], float] = ease_cubic_in_out

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration

    def value_at(self, now: float) -> float:
        if self.duration <= 0 or now >= self.end_time:
            return self.end_value
        if now <= self.start_time:
            return self.start_value
        progress = self.easing((now - self.start_time) / self.duration)
        return self.start_value + (self.end_value - self.start_value) * progress

    def finished(self, now: float) -> bool:
        return now >= self.end_time


class LayerAnimator:
    """Tracks the animated opacity of a fixed set of layers."""

    def __init__(self, layers: Iterable[str], clock: Clock = time.monotonic,
                 easing: Callable[[float], float] = ease_cubic_in_out,
                 initial: float = 0.0) -> None:
        self.clock = clock
        self.easing = easing
        self._settled: dict[str, float] = {name: initial for name in layers}
        self._transitions: dict[str, Transition] = {}

    @property
    def layers(self) -> tuple[str, ...]:
        return tuple(self._settled)

    def _now(self, now: float | None) -> float:
        return self.clock() if now is None else now

    def value(self, layer: str, now: float | None = None) -> float:
        """Opacity of *layer* at *now*.

        Raises:
            KeyError: If the layer is unknown
        """
        if layer not in self._settled:
            raise KeyError(f"Unknown layer {layer!r}")
        transition = self._transitions.get(layer)
        if transition is None:
            return self._settled[layer]
        t = self._now(now)
        if transition.finished(t):
            self._settled[layer] = transition.end_value
            del self._transitions[layer]
            return transition.end_value
        return transition.value_at(t)

    def animate(self, layer: str, target: float, duration_ms: float,
                now: float | None = None) -> Transition | None:
        """Start moving *layer* towards *target*, replacing any running transition.

        Returns the new Transition, or None when the layer already rests at
        the target.
        """
        t = self._now(now)
        current = self.value(layer, t)
        running = layer in self._transitions
        if not running and current == target:
            return None
        if running:
            logger.debug("pre-empting %s at %.3f", layer, current)
        transition = Transition(layer, current, target, t, duration_ms / 1000.0, self.easing)
        self._transitions[layer] = transition
        return transition

    def apply(self, state: Mapping[str, float], duration_ms: float,
              now: float | None = None) -> list[Transition]:
        """Animate every layer in *state* towards its target opacity."""
        t = self._now(now)
        started = []
        for layer, target in state.items():
            transition = self.animate(layer, target, duration_ms, t)
            if transition is not None:
                started.append(transition)
        return started

    def snapshot(self, now: float | None = None) -> dict[str, float]:
        t = self._now(now)
        return {layer: self.value(layer, t) for layer in self._settled}

    def is_animating(self, now: float | None = None) -> bool:
        t = self._now(now)
        return any(not tr.finished(t) for tr in self._transitions.values())

    def targets(self) -> dict[str, float]:
        """Where every layer is heading (or resting)."""
        result = dict(self._settled)
        result.update({name: tr.end_value for name, tr in self._transitions.items()})
        return result
