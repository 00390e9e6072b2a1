"""
Story store for the API.

The preview app loads the three datasets once and keeps the built Story on
``app.state.store``. A failed load is remembered (not retried on every
request); the article page offers a retry link that calls ``reload()``.

Routes get the story through the ``get_story`` dependency, which answers
503 while no story is available.
"""

import logging
import threading

from fastapi import HTTPException, Request

from story.article import Story, load_story
from utils.config import AppConfig
from utils.errors import StoryError

logger = logging.getLogger(__name__)


class StoryStore:
    """Holds the built story, or the error that prevented building it."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.story: Story | None = None
        self.error: StoryError | None = None
        self.attempts = 0
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self.story is not None

    def load(self) -> Story | None:
        """Load the datasets and build the story; remember the outcome."""
        with self._lock:
            self.attempts += 1
            try:
                self.story = load_story(self.config)
                self.error = None
            except StoryError as exc:
                logger.error("Story load failed (attempt %d): %s", self.attempts, exc)
                self.story = None
                self.error = exc
            return self.story

    def ensure_loaded(self) -> Story | None:
        if self.story is None and self.error is None:
            return self.load()
        return self.story

    def reload(self) -> Story | None:
        return self.load()


def get_store(request: Request) -> StoryStore:
    store = request.app.state.store
    store.ensure_loaded()
    return store


def get_story(request: Request) -> Story:
    """FastAPI dependency: the loaded story, or 503 if loading failed."""
    store = get_store(request)
    if store.story is None:
        raise HTTPException(
            status_code=503,
            detail=f"Story data unavailable: {store.error}",
        )
    return store.story
