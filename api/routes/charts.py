"""
Chart and reveal-step endpoints.

GET /api/v1/charts                          → layers and steps of every chart
GET /api/v1/charts/{chart}/steps/{step}     → target state of one step
"""

from fastapi import APIRouter, Depends, HTTPException

from api.models import ChartSummaryOut, StepOut
from api.store import get_story
from story.article import ChartSection, Story
from utils.errors import UnknownStepError

router = APIRouter(prefix="/charts", tags=["charts"])


def _section(story: Story, chart: str) -> ChartSection:
    try:
        return story.section(chart)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0]))


@router.get("", response_model=list[ChartSummaryOut], summary="List charts")
def list_charts(story: Story = Depends(get_story)) -> list[ChartSummaryOut]:
    """Return every chart with its layer names and step indices."""
    out = []
    for name, sec in story.sections.items():
        summary = sec.handle.summary()
        out.append(ChartSummaryOut(
            name=name,
            title=sec.text.title,
            width=summary["width"],
            height=summary["height"],
            x_domain=summary["x_domain"],
            y_domain=summary["y_domain"],
            layers=summary["layers"],
            steps=list(sec.steps),
        ))
    return out


@router.get(
    "/{chart}/steps/{step}",
    response_model=StepOut,
    summary="Target state of a step",
)
def get_step(chart: str, step: int, story: Story = Depends(get_story)) -> StepOut:
    """Return the opacity every layer of *chart* moves to when *step* is entered."""
    sec = _section(story, chart)
    try:
        target = sec.table.target(step)
    except UnknownStepError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return StepOut(
        chart=chart,
        step=step,
        duration_ms=target.duration_ms,
        opacity=target.state.to_dict(),
        text=sec.text.steps[step].body,
    )
