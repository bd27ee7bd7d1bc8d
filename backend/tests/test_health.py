def test_health_endpoints(client):
    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code in {200, 503}
    payload = ready.json()
    assert set(payload["database"]) == {"ok", "schema_ok", "missing_tables", "missing_columns", "error"}
    assert set(payload["period_settings"]) == {"saved", "version"}


def test_security_headers_present(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_oversized_request_rejected(client):
    body = "x" * (2 * 1024 * 1024)
    response = client.put(
        "/api/period-settings",
        content=body,
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 413
