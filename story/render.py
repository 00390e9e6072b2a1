"""
Page rendering -- Jinja2 templates for the article and the error fallback.

The preview app (via ``Jinja2Templates``) and the static export share the
same template directory and the same filters; ``page_context`` builds the
variables both hand to ``story.html``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from reveal.easing import CUBIC_IN_OUT_CSS
from story.article import Story
from story.narrative import LOAD_ERROR_MESSAGE, PAGE_TITLE
from utils.formatting import format_billions, format_count, format_percent

# Package data, declared in pyproject.toml
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"
SCROLLAMA_URL = "https://unpkg.com/scrollama@3.2.0/build/scrollama.min.js"


def fmt_opacity(value: float) -> str:
    """Jinja filter: opacity for a style attribute ("0", "0.3", "1")."""
    return f"{float(value):g}"


def register_filters(env: Environment) -> Environment:
    env.filters["fmt_billions"] = format_billions
    env.filters["fmt_percent"] = format_percent
    env.filters["fmt_count"] = format_count
    env.filters["fmt_opacity"] = fmt_opacity
    return env


def latest_value(records: Sequence[Any], attr: str) -> tuple[int | None, Any]:
    """(year, value) of the last record where *attr* is not None."""
    for rec in reversed(records):
        value = getattr(rec, attr)
        if value is not None:
            return rec.year, value
    return None, None


def template_env(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "svg")),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    return register_filters(env)


def page_context(story: Story, steps: Mapping[str, int] | None = None,
                 static_url: str = "static") -> dict[str, Any]:
    """Template variables for the article.

    Args:
        story: The built story.
        steps: Optional chart -> step to render server-side; the named
            step's marker is rendered active and its layers at their target
            opacity. Charts not listed start hidden.
        static_url: Prefix for stylesheet and script URLs.

    Raises:
        KeyError: If *steps* names an unknown chart
        UnknownStepError: If *steps* names a step a chart does not have
    """
    steps = dict(steps or {})
    states = story.snapshot(steps)
    sections = []
    for name, sec in story.sections.items():
        sections.append({
            "name": name,
            "title": sec.text.title,
            "chart_id": sec.text.chart_id,
            "scrolly_id": sec.text.scrolly_id,
            "handle": sec.handle,
            "opacity": states[name].to_dict(),
            "steps": [
                {
                    "index": i,
                    "heading": text.heading,
                    "body": text.body,
                    "active": steps.get(name) == i,
                }
                for i, text in enumerate(sec.text.steps)
            ],
        })
    datasets = story.datasets
    return {
        "page_title": PAGE_TITLE,
        "sections": sections,
        "facts": {
            "budget": latest_value(datasets.budget, "budgeted"),
            "crime": latest_value(datasets.crime, "total"),
            "clearance": latest_value(datasets.clearance, "total"),
        },
        "reveal_config": story.reveal_config(),
        "easing_css": CUBIC_IN_OUT_CSS,
        "scrollama_url": SCROLLAMA_URL,
        "static_url": static_url.rstrip("/"),
    }


def error_context(error: Exception | str, retry_url: str = "/",
                  static_url: str = "static") -> dict[str, Any]:
    return {
        "page_title": PAGE_TITLE,
        "message": LOAD_ERROR_MESSAGE,
        "detail": str(error),
        "retry_url": retry_url,
        "static_url": static_url.rstrip("/"),
    }


def render_page(story: Story, steps: Mapping[str, int] | None = None,
                env: Environment | None = None, static_url: str = "static") -> str:
    env = env or template_env()
    return env.get_template("story.html").render(**page_context(story, steps, static_url))


def render_error_page(error: Exception | str, env: Environment | None = None,
                      retry_url: str = "/", static_url: str = "static") -> str:
    env = env or template_env()
    return env.get_template("error.html").render(**error_context(error, retry_url, static_url))
