from fastapi.testclient import TestClient

from checkin_api.app import create_app


def test_trace_header_is_propagated() -> None:
    client = TestClient(create_app())

    response = client.get("/healthz", headers={"x-trace-id": "trace-abc"})

    assert response.status_code == 200
    assert response.headers["x-trace-id"] == "trace-abc"


def test_trace_header_is_generated_when_absent() -> None:
    response = TestClient(create_app()).get("/healthz")
    assert response.headers["x-trace-id"]


def test_api_latency_metric_is_collected() -> None:
    app = create_app()
    client = TestClient(app)

    response = client.post("/v1/checkin/validate")
    metrics = app.state.api_metrics.snapshot()

    assert response.status_code == 200
    assert len(metrics) >= 1
    assert metrics[-1]["route"] == "/v1/checkin/validate"
    assert metrics[-1]["method"] == "POST"
    assert metrics[-1]["status_code"] == 200
    assert metrics[-1]["duration_ms"] >= 0


def test_prometheus_metrics_endpoint_exposes_http_metrics() -> None:
    client = TestClient(create_app())

    client.get("/healthz")
    response = client.get("/metrics")
    body = response.text

    assert response.status_code == 200
    assert "checkin_http_requests_total" in body
    assert "checkin_http_request_duration_ms" in body


def test_readyz_reports_configured_sites() -> None:
    response = TestClient(create_app()).get("/readyz")
    assert response.json() == {"status": "ready", "sites": 5}


def test_metrics_use_route_template_not_raw_url() -> None:
    app = create_app()
    client = TestClient(app)

    client.post("/.netlify/functions/validate?token=abc")
    client.get("/no/such/path/12345")
    paths = [item["route"] for item in app.state.api_metrics.snapshot()]

    assert paths == ["/.netlify/functions/validate", "unmatched"]


def test_every_decision_outcome_is_exported_at_zero() -> None:
    body = TestClient(create_app()).get("/metrics").text

    for outcome in ("accepted", "outside_radius", "expired", "bad_json", "server_error"):
        assert f'checkin_decisions_total{{outcome="{outcome}"}} 0.0' in body
