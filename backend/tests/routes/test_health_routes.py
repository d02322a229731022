"""Tests for the root, health and metrics endpoints."""


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Welcome to the SkillBridge API!"
    assert response.json()["docs"] == "/docs"


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "skillbridge-api"
    assert body["database"] == "ok"
    assert body["timestamp"].endswith("Z")


def test_root_health_alias(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_health_lite(client):
    assert client.get("/api/v1/health/lite").json() == {"status": "ok"}


def test_metrics_exposition(client):
    client.get("/api/v1/health/lite")
    response = client.get("/api/v1/metrics")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "skillbridge_http_requests_total" in response.text
