"""
FastAPI preview server for the police budget story.

Usage:
    python -m api.app                       # http://localhost:8000, auto-reload
    STORY_DATA_DIR=/data/csv python -m api.app
    python main.py                          # same app with a launcher CLI

The interactive API docs are at /docs once the server runs.

The three CSV datasets are loaded once (at startup, or on the first request
when the app runs without a lifespan) and the built story is kept on
``app.state.store``. A failed load does not stop the server: the article
page shows a retry message, /health answers 503 and the JSON endpoints
answer 503 until a retry succeeds.

APP_LOG_FORMAT=json switches the log output to one JSON object per line.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from api.models import ErrorResponse
from api.routes import charts, datasets
from api.routes import frontend as frontend_routes
from api.store import StoryStore
from story.render import STATIC_DIR, TEMPLATES_DIR, register_filters
from utils.config import AppConfig

_cfg = AppConfig.from_env()

# Request attributes copied from ``extra=`` into JSON log lines
_REQUEST_FIELDS = ("method", "path", "status", "duration_ms", "request_id")


class _JsonFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update({k: getattr(record, k) for k in _REQUEST_FIELDS if hasattr(record, k)})
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def configure_logging(log_format: str) -> None:
    """Route all logging to stderr as text (default) or JSON lines."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        _JsonFormatter() if log_format == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
    logging.basicConfig(handlers=[handler], level=logging.INFO, force=True)


configure_logging(_cfg.log_format)
_logger = logging.getLogger("police_story_api")


def _error_response(status_code: int, error: str, exc: Exception) -> JSONResponse:
    body = ErrorResponse(error=error, detail=str(exc), status_code=status_code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the story before the first request is served."""
    store: StoryStore = app.state.store
    if store.ensure_loaded() is None:
        _logger.warning("Story not available: %s. The page will offer a retry.",
                        store.error)
    yield


def create_app(data_dir: Path | None = None, config: AppConfig | None = None) -> FastAPI:
    """Create the preview application.

    Args:
        data_dir: Read the CSV files from this directory (overrides config).
        config: Full configuration; defaults to ``AppConfig.from_env()``.
    """
    cfg = config or AppConfig.from_env()
    if data_dir is not None:
        cfg.data_dir = Path(data_dir)
        cfg.data_url = None

    app = FastAPI(
        title="Police Budget Story",
        summary="Scroll-driven article on the Dutch police budget, crime and clearance rates.",
        description=(
            "Serves the article page and the data behind its three charts.\n\n"
            "### Key concepts\n"
            "- **Budget amounts** are in **millions of euros**; the charts show them "
            "in miljard (`€5.1mrd`).\n"
            "- **Clearance rates** are percentages of registered crimes.\n"
            "- **Steps** are the narrative blocks of a chart; every step has a "
            "fixed target opacity for each chart layer.\n"
            "- Missing values are `null` and are drawn as gaps."
        ),
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "datasets", "description": "Typed records and data issues."},
            {"name": "charts", "description": "Chart layers and reveal steps."},
            {"name": "meta", "description": "Health check."},
        ],
    )
    app.state.store = StoryStore(cfg)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log method, path, status and duration; tag the response with a short ID."""
        request_id = uuid.uuid4().hex[:8]
        started = time.monotonic()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        fields = {
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.monotonic() - started) * 1000, 1),
            "request_id": request_id,
        }
        if cfg.log_format == "json":
            _logger.info("request", extra=fields)
        else:
            _logger.info("%(method)s %(path)s %(status)d %(duration_ms).1fms rid=%(request_id)s",
                         fields)
        return response

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        _logger.exception("Unhandled error on %s", request.url.path)
        return _error_response(500, "Internal server error", exc)

    @app.exception_handler(ValueError)
    async def bad_value(request: Request, exc: ValueError):
        return _error_response(400, "Bad request", exc)

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """200 with row counts when the story is built, 503 when loading failed."""
        store: StoryStore = app.state.store
        story = store.ensure_loaded()
        if story is None:
            return JSONResponse(
                status_code=503,
                content={"status": "data_unavailable", "error": str(store.error)},
            )
        return {
            "status": "ok",
            "datasets": story.datasets.row_counts(),
            "issues": len(story.datasets.validation.issues),
        }

    app.include_router(datasets.router, prefix="/api/v1")
    app.include_router(charts.router, prefix="/api/v1")

    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    if TEMPLATES_DIR.exists():
        templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
        register_filters(templates.env)
        frontend_routes.set_templates(templates)
        app.include_router(frontend_routes.router)
    else:
        _logger.warning("Templates not found at %s; the article page is disabled",
                        TEMPLATES_DIR)

    return app


# Module-level instance for ``uvicorn api.app:app``
app = create_app(config=_cfg)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.app:app", host=_cfg.api_host, port=_cfg.api_port,
                reload=True, log_level="info")
