"""
Tests for api/app.py and the routes under api/routes/

Uses FastAPI's TestClient against create_app() pointed at the temporary CSV
directory from conftest.py. Covers the health check, dataset and chart
endpoints, the article page, the load-failure fallback with its retry link,
and the error handlers.
"""
import shutil
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from api.app import create_app
from utils.config import AppConfig


@pytest.fixture()
def app(app_config):
    return create_app(config=app_config)


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def broken_config(app_config, tmp_path):
    cfg = AppConfig.from_dict(app_config.to_dict())
    cfg.data_dir = tmp_path / "not-there-yet"
    return cfg


@pytest.fixture()
def broken_client(broken_config):
    return TestClient(create_app(config=broken_config))


# ── app factory ───────────────────────────────────────────────────────────────

class TestCreateApp:
    def test_metadata(self, app):
        assert app.title == "Police Budget Story"
        assert app.version == "1.0.0"

    def test_routes_registered(self, app):
        paths = set(app.openapi()["paths"])
        assert {"/health", "/api/v1/datasets", "/api/v1/charts",
                "/api/v1/charts/{chart}/steps/{step}", "/api/v1/validation"} <= paths

    def test_page_route_registered(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]

    def test_static_mounted(self, client):
        resp = client.get("/static/story.js")
        assert resp.status_code == 200
        assert "scrollama" in resp.text

    def test_data_dir_override(self, app_config, tmp_path):
        app = create_app(data_dir=tmp_path, config=app_config)
        assert app.state.store.config.data_dir == tmp_path

    def test_lifespan_loads_story(self, app):
        with TestClient(app) as client:
            assert app.state.store.loaded
            assert app.state.store.attempts == 1
            client.get("/health")
        assert app.state.store.attempts == 1

    def test_request_id_header(self, client):
        resp = client.get("/health")
        assert len(resp.headers["X-Request-ID"]) == 8


# ── health ────────────────────────────────────────────────────────────────────

def test_health_ok(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["datasets"] == {"budget": 12, "crime": 5, "clearance": 5}
    assert body["issues"] == 0


def test_health_without_data(broken_client):
    resp = broken_client.get("/health")
    assert resp.status_code == 503
    assert resp.json()["status"] == "data_unavailable"
    assert "budget" in resp.json()["error"]


# ── datasets ──────────────────────────────────────────────────────────────────

class TestDatasets:
    def test_row_counts(self, client):
        assert client.get("/api/v1/datasets").json() == {
            "budget": 12, "crime": 5, "clearance": 5,
        }

    def test_budget_records(self, client):
        body = client.get("/api/v1/datasets/budget").json()
        assert body["row_count"] == 12
        first, last = body["records"][0], body["records"][-1]
        assert first == {"year": 2015, "budgeted": 5100.0, "actual": 5180.3,
                         "inflation_adjusted": 5100.0}
        assert last["year"] == 2026
        assert last["actual"] is None

    def test_crime_counts_stay_integers(self, client):
        record = client.get("/api/v1/datasets/crime").json()["records"][0]
        assert record["total"] == 845820
        assert isinstance(record["total"], int)

    def test_clearance_gaps_are_null(self, client):
        records = client.get("/api/v1/datasets/clearance").json()["records"]
        assert records[3]["property"] is None
        assert records[4]["violent"] is None

    def test_unknown_dataset(self, client):
        resp = client.get("/api/v1/datasets/weather")
        assert resp.status_code == 404
        assert "weather" in resp.json()["detail"]

    def test_validation_clean(self, client):
        body = client.get("/api/v1/validation").json()
        assert body["is_valid"] is True
        assert body["issues"] == []
        assert "clearance:unique_years" in body["passed_checks"]
        assert body["summary"]["errors"] == 0

    def test_validation_reports_malformed_cell(self, app_config, make_data_dir, csv_text):
        app_config.data_dir = make_data_dir(
            clearance=csv_text["clearance"].replace('"24,8"', '"n.b."'))
        client = TestClient(create_app(config=app_config))
        body = client.get("/api/v1/validation").json()
        assert body["is_valid"] is True
        (issue,) = body["issues"]
        assert issue["check"] == "malformed_cell"
        assert issue["dataset"] == "clearance"
        assert issue["severity"] == "warning"
        assert issue["sample"] == "n.b."
        assert client.get("/api/v1/datasets/clearance").json()["records"][1]["total"] is None

    def test_strict_mode_refuses_malformed_cell(self, app_config, make_data_dir, csv_text):
        app_config.data_dir = make_data_dir(
            clearance=csv_text["clearance"].replace('"24,8"', '"n.b."'))
        app_config.strict_parse = True
        client = TestClient(create_app(config=app_config))
        assert client.get("/api/v1/datasets").status_code == 503


# ── charts ────────────────────────────────────────────────────────────────────

class TestCharts:
    def test_list(self, client):
        charts = client.get("/api/v1/charts").json()
        assert [c["name"] for c in charts] == ["budget", "crime", "clearance"]
        budget = charts[0]
        assert budget["steps"] == [0, 1, 2, 3, 4, 5, 6]
        assert "shaded-area" in budget["layers"]
        assert budget["x_domain"] == [2015, 2026]
        assert budget["y_domain"][0] == 5000

    def test_step(self, client):
        body = client.get("/api/v1/charts/clearance/steps/2").json()
        assert body["chart"] == "clearance"
        assert body["duration_ms"] == 800
        assert body["opacity"]["line-total"] == 0.3
        assert body["opacity"]["line-property"] == 1.0
        assert body["text"]

    def test_budget_title_step_resets(self, client):
        body = client.get("/api/v1/charts/budget/steps/0").json()
        assert set(body["opacity"].values()) == {0.0}
        assert body["duration_ms"] == 800

    def test_unknown_step(self, client):
        resp = client.get("/api/v1/charts/clearance/steps/3")
        assert resp.status_code == 404
        assert "no step 3" in resp.json()["detail"]

    def test_unknown_chart(self, client):
        assert client.get("/api/v1/charts/weather/steps/1").status_code == 404

    def test_non_integer_step(self, client):
        assert client.get("/api/v1/charts/budget/steps/two").status_code == 422

    def test_unavailable_without_data(self, broken_client):
        resp = broken_client.get("/api/v1/charts")
        assert resp.status_code == 503
        assert "unavailable" in resp.json()["detail"]


# ── article page ──────────────────────────────────────────────────────────────

class TestPage:
    def test_article(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        html = resp.text
        assert 'data-layer="line-budgeted"' in html
        assert 'id="reveal-config"' in html
        assert 'href="/static/story.css"' in html
        assert "opacity: 1" not in html

    def test_article_at_step(self, client):
        html = client.get("/?budget=6").text
        assert 'data-layer="shaded-area" style="opacity: 1"' in html
        assert html.count("text-step active") == 1

    def test_article_at_unknown_step(self, client):
        assert client.get("/?crime=9").status_code == 404

    def test_negative_step_rejected(self, client):
        assert client.get("/?clearance=-1").status_code == 422

    def test_load_failure_shows_retry(self, broken_client):
        resp = broken_client.get("/")
        assert resp.status_code == 503
        assert "De gegevens konden niet worden geladen." in resp.text
        assert 'href="/?retry=1"' in resp.text
        assert "data-layer" not in resp.text

    def test_failure_is_remembered_until_retry(self, broken_config, data_dir):
        app = create_app(config=broken_config)
        client = TestClient(app)
        assert client.get("/").status_code == 503

        shutil.copytree(data_dir, broken_config.data_dir)
        assert client.get("/").status_code == 503
        assert app.state.store.attempts == 1

        resp = client.get("/?retry=1")
        assert resp.status_code == 200
        assert app.state.store.attempts == 2
        assert client.get("/health").status_code == 200


# ── error handlers ────────────────────────────────────────────────────────────

def test_value_error_becomes_400(app):
    def boom():
        raise ValueError("Opacity for 'grid' must be in [0, 1], got 2")

    app.add_api_route("/boom", boom)
    resp = TestClient(app).get("/boom")
    assert resp.status_code == 400
    assert resp.json() == {
        "error": "Bad request",
        "detail": "Opacity for 'grid' must be in [0, 1], got 2",
        "status_code": 400,
    }


def test_unhandled_error_becomes_500(app):
    def crash():
        raise RuntimeError("kaboom")

    app.add_api_route("/crash", crash)
    resp = TestClient(app, raise_server_exceptions=False).get("/crash")
    assert resp.status_code == 500
    assert resp.json()["error"] == "Internal server error"
