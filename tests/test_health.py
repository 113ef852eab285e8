"""Test health check endpoint."""

from fastapi.testclient import TestClient

from academy.main import app

client = TestClient(app)


def test_health_check():
    """Test that /health returns 200 with status ok."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"


def test_v1_routes_are_mounted():
    """Mounted v1 routes answer 401 without credentials instead of 404."""
    assert client.get("/v1/readiness/program").status_code == 401
    assert client.get("/v1/live-sessions/ABC123").status_code == 401
    assert client.get("/v1/no-such-route").status_code == 404
