"""
Story assembly -- datasets in, three wired scrollytelling sections out.

For each chart the story owns:
    handle      the built chart (scales, layers, scaffolding)
    table       its reveal table
    sequencer   applies table targets through a LayerAnimator
    observer    scroll observer whose enter events drive the sequencer

Usage::

    story = load_story(AppConfig.from_env())
    story.enter("budget", 2)
    story.snapshot({"budget": 6})     # target state per chart
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from charts import BUILDERS, ChartHandle
from pipeline.loader import load_datasets
from pipeline.records import Datasets
from pipeline.transform import LENIENT, STRICT
from reveal.animator import Clock
from reveal.scroller import ScrollObserver, StepEvent
from reveal.sequencer import RevealSequencer
from reveal.state import RevealState
from reveal.tables import RevealTable, reveal_table
from story.narrative import SECTIONS, Section
from utils.config import AppConfig, ChartConfig, Palette

logger = logging.getLogger(__name__)

CHART_ORDER = ("budget", "crime", "clearance")


@dataclass
class ChartSection:
    """Everything belonging to one chart of the article."""

    name: str
    text: Section
    handle: ChartHandle
    table: RevealTable
    sequencer: RevealSequencer
    observer: ScrollObserver

    @property
    def steps(self) -> tuple[int, ...]:
        return self.table.steps


@dataclass
class Story:
    datasets: Datasets
    chart_config: ChartConfig
    palette: Palette
    sections: dict[str, ChartSection] = field(default_factory=dict)

    def section(self, chart: str) -> ChartSection:
        """Look up a chart section.

        Raises:
            KeyError: If the chart name is unknown
        """
        try:
            return self.sections[chart]
        except KeyError:
            raise KeyError(f"Unknown chart {chart!r}; expected one of {list(self.sections)}") from None

    def enter(self, chart: str, step: int, now: float | None = None) -> RevealState:
        return self.section(chart).sequencer.enter(step, now)

    def target(self, chart: str, step: int) -> RevealState:
        """Target state of a step, without touching the sequencer."""
        return self.section(chart).table.target(step).state

    def snapshot(self, steps: Mapping[str, int] | None = None) -> dict[str, RevealState]:
        """Target state of every chart, at the given steps (hidden elsewhere)."""
        steps = steps or {}
        for chart in steps:
            self.section(chart)
        return {
            name: (sec.table.target(steps[name]).state if name in steps
                   else sec.table.initial_state())
            for name, sec in self.sections.items()
        }

    def resize(self, boxes: Mapping[str, Sequence[tuple[float, float]]] | None = None) -> None:
        """Ask every observer to re-measure; charts are left as they are."""
        boxes = boxes or {}
        for name, sec in self.sections.items():
            sec.observer.resize(boxes.get(name))

    def reveal_config(self, offset: float | None = None) -> dict[str, Any]:
        """Reveal tables as plain data for the client runtime."""
        config = {}
        for name, sec in self.sections.items():
            config[name] = {
                "container": sec.text.chart_id,
                "steps_selector": f"#{sec.text.scrolly_id} .text-step",
                "offset": sec.observer.offset if offset is None else offset,
                **sec.table.to_dict(),
            }
        return config


def _enter_handler(sequencer: RevealSequencer) -> Callable[[StepEvent], None]:
    def handle(event: StepEvent) -> None:
        sequencer.enter(event.index)
    return handle


def build_story(datasets: Datasets, chart_config: ChartConfig | None = None,
                palette: Palette | None = None, clock: Clock | None = None) -> Story:
    """Build the three charts and wire observers to sequencers.

    Raises:
        ChartBuildError: If a dataset has no records
    """
    chart_config = chart_config or ChartConfig()
    palette = palette or Palette()
    story = Story(datasets=datasets, chart_config=chart_config, palette=palette)
    for name in CHART_ORDER:
        handle = BUILDERS[name](datasets.get(name), chart_config, palette)
        table = reveal_table(name, chart_config)
        text = SECTIONS[name]
        if len(text.steps) != len(table):
            raise ValueError(
                f"{name}: {len(text.steps)} narrative steps but {len(table)} reveal steps"
            )
        sequencer = RevealSequencer(table, clock=clock)
        observer = ScrollObserver(name).on_step_enter(_enter_handler(sequencer))
        story.sections[name] = ChartSection(name, text, handle, table, sequencer, observer)
    logger.info("Story built: %s", {n: len(s.handle.layers) for n, s in story.sections.items()})
    return story


def load_story(config: AppConfig | None = None, palette: Palette | None = None) -> Story:
    """Load the datasets described by *config* and build the story.

    Raises:
        DataLoadError: If any dataset could not be read
    """
    config = config or AppConfig.from_env()
    policy = STRICT if config.strict_parse else LENIENT
    datasets = load_datasets(config.data_sources(), policy=policy)
    return build_story(datasets, config.chart_config(), palette)
