def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "OK"
    assert payload["timestamp"].endswith("Z")
    assert payload["traceId"] == response.headers["X-Trace-ID"]


def test_health_echoes_incoming_trace_id(client):
    response = client.get("/health", headers={"X-Trace-ID": "trace-abc"})

    assert response.headers["X-Trace-ID"] == "trace-abc"
    assert response.json()["traceId"] == "trace-abc"


def test_ready(client):
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_metrics_exposes_request_counters(client):
    client.get("/health")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_error_bodies_carry_trace_id(client):
    response = client.get("/products", headers={"X-Trace-ID": "trace-err"})

    assert response.status_code == 401
    assert response.json()["trace_id"] == "trace-err"


def test_malformed_trace_id_is_replaced(client):
    response = client.get("/health", headers={"X-Trace-ID": "bad id with spaces"})

    trace_id = response.headers["X-Trace-ID"]
    assert trace_id != "bad id with spaces"
    assert response.json()["traceId"] == trace_id
