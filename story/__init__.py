"""
Story package -- narrative, chart wiring and page rendering.

    from story import load_story, render_page
    html = render_page(load_story())
"""

from story.article import ChartSection, Story, build_story, load_story
from story.render import render_error_page, render_page, template_env

__all__ = [
    "ChartSection",
    "Story",
    "build_story",
    "load_story",
    "render_error_page",
    "render_page",
    "template_env",
]
