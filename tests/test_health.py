"""Health check tests."""

from datetime import datetime


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "OK"
    assert data["environment"] == "development"
    datetime.fromisoformat(data["timestamp"])


def test_health_ignores_bad_token(client):
    resp = client.get("/health", headers={"Authorization": "Bearer whatever"})
    assert resp.status_code == 200


def test_ready(client):
    resp = client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ready"}


def test_cors_preflight(client):
    resp = client.options(
        "/api/auth/login",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
