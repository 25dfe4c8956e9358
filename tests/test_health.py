"""
Health endpoint tests.
"""

import pytest
from fastapi.testclient import TestClient

import clinicqueue.api.routers.health as health_module
from clinicqueue.app import app


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


def test_health_endpoint(client):
    """Test that the /health endpoint returns 200 OK."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert "data" in data
    assert data["data"]["status"] == "healthy"
    assert "timestamp" in data["data"]
    assert "version" in data["data"]
    assert data["data"]["service"] == "Clinic Queue Journey"


def test_health_ready_endpoint(client, monkeypatch):
    """Test that /health/ready reports ready when the database answers."""

    async def _ping(settings):
        return None

    monkeypatch.setattr(health_module, "ping", _ping)
    response = client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["data"] == {"ready": True, "checks": {"database": "ok"}}


def test_health_ready_without_database(client, monkeypatch):
    """Test that /health/ready returns 503 when the database is unreachable."""

    async def _ping(settings):
        raise ConnectionError("no route to host")

    monkeypatch.setattr(health_module, "ping", _ping)
    response = client.get("/health/ready")
    assert response.status_code == 503
    data = response.json()
    assert data["data"]["ready"] is False
    assert data["data"]["checks"]["database"].startswith("error:")


def test_root_endpoint(client):
    """Test that the root endpoint returns API information."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "service" in data
    assert "version" in data
    assert "status" in data
    assert data["status"] == "running"
