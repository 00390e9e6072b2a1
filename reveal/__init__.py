"""
Reveal package -- step tables, eased transitions and scroll classification.

    from reveal import RevealSequencer, reveal_table
    seq = RevealSequencer(reveal_table("budget"))
    seq.enter(2)
"""

from reveal.state import RevealState
from reveal.easing import ease_cubic_in_out
from reveal.animator import LayerAnimator, Transition
from reveal.tables import RevealTable, StepTarget, reveal_table
from reveal.sequencer import RevealSequencer
from reveal.scroller import ScrollObserver, StepEvent, StepMarker

__all__ = [
    "LayerAnimator",
    "RevealSequencer",
    "RevealState",
    "RevealTable",
    "ScrollObserver",
    "StepEvent",
    "StepMarker",
    "StepTarget",
    "Transition",
    "ease_cubic_in_out",
    "reveal_table",
]
