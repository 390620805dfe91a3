import json

import pytest
from fastapi.testclient import TestClient

from reportcharts.core.settings import Settings, get_settings
from reportcharts.main import app
from reportcharts.routes import charts as charts_routes
from reportcharts.routes import reports as reports_routes


def _settings(tmp_path=None, render_url=None):
    return Settings(
        render_service_url=render_url,
        render_timeout=5,
        chart_width=800,
        default_chart_height=400,
        style_profile="pdf",
        allowed_origins=["*"],
        audit_root=tmp_path,
        log_level="INFO",
    )


class _StubRenderer:
    def __init__(self, base_url, timeout=30):
        self.base_url = base_url

    def render(self, config, width, height):
        return f"<svg width='{width}' height='{height}'></svg>"


@pytest.fixture
def client():
    app.dependency_overrides[get_settings] = lambda: _settings()
    yield TestClient(app)
    app.dependency_overrides.clear()


def _request_body():
    gradient = {
        "series": [
            {"type": "bar", "data": [100]},
            {"type": "line", "markLine": {"data": [{"xAxis": 0}], "label": {"formatter": ""}}},
        ]
    }
    return {
        "charts": [
            {"type": "gradient-bar", "scale_identifier": "Depression", "chart_json": json.dumps(gradient), "extra_info": "one"},
            {"type": "bar", "scale_identifier": "Depression", "chart_json": "{oops", "height": 250},
            {"type": "line", "scale_identifier": "Mood", "chart_json": {"series": [{"type": "line", "data": []}]}},
        ],
        "result_scales": {"Depression": {"value": 42, "cutOffArea": "mild"}},
        "historical_data": {
            "mood": [
                {"date": "01.02.2023", "value": 4},
                {"date": "01.01.2023", "value": 3},
                {"date": "01.03.2023", "value": None},
            ]
        },
    }


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/api/charts/health").json()["status"] == "healthy"


def test_resolve_endpoint(client):
    response = client.post("/api/charts/resolve", json=_request_body())
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["failed"] == 1
    assert body["audit_path"] is None

    first, second, third = body["results"]
    assert first["ok"] is True
    assert first["extra_info"] == "one"
    assert first["config"]["series"][1]["markLine"]["data"][0]["xAxis"] == 42
    assert first["config"]["series"][1]["markLine"]["label"]["formatter"] == "Wert: 42 (mild)"

    assert second["ok"] is False
    assert second["config"] == "{oops"
    assert second["height"] == 250
    assert second["error"]

    assert [point["value"] for point in third["config"]["series"][0]["data"]] == [["01.01.2023", 3.0], ["01.02.2023", 4.0]]


def test_resolve_writes_audit_trail(tmp_path):
    app.dependency_overrides[get_settings] = lambda: _settings(tmp_path=tmp_path)
    try:
        body = TestClient(app).post("/api/charts/resolve", json=_request_body()).json()
    finally:
        app.dependency_overrides.clear()

    run_dir = tmp_path / body["audit_path"].split("/")[-1]
    failures = json.loads((run_dir / "failures.json").read_text(encoding="utf-8"))
    assert [failure["index"] for failure in failures] == [1]
    assert len(json.loads((run_dir / "resolved.json").read_text(encoding="utf-8"))) == 3


def test_resolve_requires_charts(client):
    assert client.post("/api/charts/resolve", json={"result_scales": {}}).status_code == 422


def test_generate_without_renderer_is_unavailable(client):
    assert client.post("/api/charts/generate", json=_request_body()).status_code == 503


def test_generate_with_renderer(monkeypatch):
    monkeypatch.setattr(charts_routes, "RemoteRenderer", _StubRenderer)
    app.dependency_overrides[get_settings] = lambda: _settings(render_url="http://render.local")
    try:
        body = TestClient(app).post("/api/charts/generate", json=_request_body()).json()
    finally:
        app.dependency_overrides.clear()

    assert body["success"] is True
    assert body["count"] == 3
    assert body["heights"] == [400, 250, 400]
    assert body["images"][0].startswith("data:image/svg+xml;base64,")
    assert body["images"][1] is None
    assert body["errors"][1]


def test_report_requires_test(client):
    assert client.post("/api/reports/test-result", json={"charts": []}).status_code == 400


def test_report_renders_html(monkeypatch):
    monkeypatch.setattr(reports_routes, "RemoteRenderer", _StubRenderer)
    app.dependency_overrides[get_settings] = lambda: _settings(render_url="http://render.local")
    payload = _request_body()
    payload["test"] = {"name": "Screening"}
    try:
        response = TestClient(app).post("/api/reports/test-result", json=payload)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<h1>Screening</h1>" in response.text
    assert response.text.count("data:image/svg+xml;base64,") == 2
    assert "Diagramm konnte nicht erstellt werden." in response.text


def test_resolve_keeps_batch_when_one_template_is_not_an_object(client):
    body = _request_body()
    body["charts"][1] = {"type": "gradient-bar", "scale_identifier": 5, "chart_json": [1, 2], "height": "tall"}
    response = client.post("/api/charts/resolve", json=body)
    assert response.status_code == 200

    first, second, third = response.json()["results"]
    assert first["ok"] is True
    assert first["config"]["series"][1]["markLine"]["data"][0]["xAxis"] == 42
    assert second["ok"] is False
    assert second["config"] == [1, 2]
    assert second["height"] == 400
    assert "must be an object" in second["error"]
    assert third["ok"] is True


def test_resolve_drops_malformed_history_points(client):
    body = _request_body()
    body["historical_data"]["mood"].extend(
        [
            {"date": "01.04.2023", "value": "n.a."},
            {"date": "sometime", "value": 6},
            {"value": 7},
        ]
    )
    body["result_scales"]["Mood"] = {"value": "n.a.", "cutOffArea": 3}
    response = client.post("/api/charts/resolve", json=body)
    assert response.status_code == 200

    third = response.json()["results"][2]
    assert third["ok"] is True
    assert [point["value"] for point in third["config"]["series"][0]["data"]] == [["01.01.2023", 3.0], ["01.02.2023", 4.0]]
