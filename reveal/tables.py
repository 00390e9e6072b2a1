"""
Declarative reveal tables: for every chart, step index -> target state.

Each step lists the complete target for every layer of its chart, so the
state after entering step K depends only on K. Scrolling back and forth, or
entering the same step twice, always converges on the same picture.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from charts import budget, clearance, crime
from reveal.state import RevealState
from utils.config import ChartConfig
from utils.errors import UnknownStepError

DIMMED = 0.3


@dataclass(frozen=True)
class StepTarget:
    """Where a step takes the chart and how long the transition lasts."""

    state: RevealState
    duration_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {"opacity": self.state.to_dict(), "duration_ms": self.duration_ms}


class RevealTable:
    """Step lookup for one chart."""

    def __init__(self, chart: str, layers: tuple[str, ...],
                 steps: Mapping[int, StepTarget]) -> None:
        self.chart = chart
        self.layers = tuple(layers)
        for index, target in steps.items():
            if set(target.state) != set(self.layers):
                missing = sorted(set(self.layers) - set(target.state))
                extra = sorted(set(target.state) - set(self.layers))
                raise ValueError(
                    f"{chart} step {index}: state must cover every layer "
                    f"(missing={missing}, unknown={extra})"
                )
        self._steps = dict(sorted(steps.items()))

    @property
    def steps(self) -> tuple[int, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __contains__(self, step: object) -> bool:
        return step in self._steps

    def target(self, step: int) -> StepTarget:
        """Look up a step.

        Raises:
            UnknownStepError: If the chart has no such step
        """
        try:
            return self._steps[step]
        except (KeyError, TypeError):
            raise UnknownStepError(self.chart, step, list(self._steps)) from None

    def initial_state(self) -> RevealState:
        return RevealState.hidden(self.layers)

    def to_dict(self) -> dict[str, Any]:
        return {
            "chart": self.chart,
            "layers": list(self.layers),
            "steps": {str(k): v.to_dict() for k, v in self._steps.items()},
        }


def budget_table(config: ChartConfig | None = None) -> RevealTable:
    config = config or ChartConfig()
    reveal = config.reveal_duration_ms
    hidden = RevealState.hidden(budget.LAYERS)
    axes_and_budget = hidden.shown(
        "grid", "x-axis", "y-axis", "line-budgeted", "legend-budgeted"
    )
    with_inflation = axes_and_budget.shown("line-inflation", "legend-inflation")
    with_area = with_inflation.shown("shaded-area", "annotation")
    with_actual = with_area.shown("line-actual", "legend-actual")
    return RevealTable(budget.NAME, budget.LAYERS, {
        0: StepTarget(hidden, config.reset_duration_ms),   # title
        1: StepTarget(hidden, reveal),                     # introduction
        2: StepTarget(axes_and_budget, reveal),            # 2015 budget
        3: StepTarget(axes_and_budget, reveal),            # growth to 2025
        4: StepTarget(with_inflation, reveal),             # inflation-only path
        5: StepTarget(with_area, reveal),                  # the extra money
        6: StepTarget(with_actual, reveal),                # overspending
    })


def crime_table(config: ChartConfig | None = None) -> RevealTable:
    config = config or ChartConfig()
    duration = config.step_duration_ms
    hidden = RevealState.hidden(crime.LAYERS)
    total = hidden.shown("line-total", "legend-total")
    violent = total.shown("line-violent", "legend-violent")
    everything = violent.shown("line-property", "legend-property")
    return RevealTable(crime.NAME, crime.LAYERS, {
        0: StepTarget(hidden, duration),
        1: StepTarget(total, duration),
        2: StepTarget(violent, duration),
        3: StepTarget(everything, duration),
        4: StepTarget(everything, duration),
    })


def clearance_table(config: ChartConfig | None = None) -> RevealTable:
    config = config or ChartConfig()
    duration = config.step_duration_ms
    hidden = RevealState.hidden(clearance.LAYERS)
    everything = hidden.shown(*clearance.LAYERS)
    property_focus = everything.shown("line-total", "line-violent", opacity=DIMMED)
    return RevealTable(clearance.NAME, clearance.LAYERS, {
        0: StepTarget(hidden, duration),
        1: StepTarget(everything, duration),
        2: StepTarget(property_focus, duration),
    })


TABLE_FACTORIES = {
    "budget": budget_table,
    "crime": crime_table,
    "clearance": clearance_table,
}


def reveal_table(chart: str, config: ChartConfig | None = None) -> RevealTable:
    """Reveal table for a chart name.

    Raises:
        KeyError: If the chart name is unknown
    """
    return TABLE_FACTORIES[chart](config)
