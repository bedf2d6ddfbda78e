from app.core.config import get_settings


def test_health_endpoints(client):
    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code in {200, 503}
    payload = ready.json()
    assert "database" in payload
    assert "smtp" not in payload
    assert payload["database"]["missing_tables"] == []
    assert payload["defaults"]["buffer_minutes"] == get_settings().default_buffer_minutes


def test_ready_reports_term_lock_counts(client):
    payload = client.get("/api/health/ready").json()
    if payload["database"]["schema_ok"]:
        assert set(payload["schedule"]) == {"terms", "locked_terms"}
        assert payload["schedule"]["locked_terms"] <= payload["schedule"]["terms"]


def test_requests_carry_timing_header(client):
    response = client.get("/api/health")
    assert response.json() == {"status": "ok"}
    assert "X-Process-Time-Ms" in response.headers


def test_oversized_request_body_is_rejected(client, scheduler_headers):
    limit = get_settings().max_request_size_bytes
    response = client.post(
        "/api/terms/",
        content=b"x" * (limit + 1),
        headers={**scheduler_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 413
    assert response.json()["details"] == {}
