"""
Frontend HTML routes.

Serves the article rendered from the Jinja2 templates.

Routes:
    GET /                       → story.html (three scrollytelling sections)
    GET /?budget=6&crime=3      → same page, rendered at the given steps
    GET /?retry=1               → reload the datasets after a failed load

When the datasets could not be loaded the page shows the fallback message
from error.html with a retry link, and answers 503.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from api.store import StoryStore, get_store
from story.render import error_context, page_context
from utils.errors import UnknownStepError

router = APIRouter(tags=["frontend"])

# Templates instance is set by create_app() after mounting.
_templates: Jinja2Templates | None = None


def set_templates(t: Jinja2Templates) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised — call set_templates() first")
    return _templates


def _requested_steps(budget: int | None, crime: int | None,
                     clearance: int | None) -> dict[str, int]:
    requested = {"budget": budget, "crime": crime, "clearance": clearance}
    return {chart: step for chart, step in requested.items() if step is not None}


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(
    request: Request,
    budget: int | None = Query(None, ge=0),
    crime: int | None = Query(None, ge=0),
    clearance: int | None = Query(None, ge=0),
    retry: bool = False,
    store: StoryStore = Depends(get_store),
) -> HTMLResponse:
    """The article page."""
    if retry and not store.loaded:
        store.reload()

    static_url = "/static"
    if store.story is None:
        return _tmpl().TemplateResponse(
            request,
            "error.html",
            error_context(store.error, "/?retry=1", static_url),
            status_code=503,
        )

    try:
        context: dict[str, Any] = page_context(
            store.story, _requested_steps(budget, crime, clearance), static_url
        )
    except UnknownStepError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return _tmpl().TemplateResponse(request, "story.html", context)
