"""Tests for /health and /version endpoints."""

from fastapi.testclient import TestClient

from screenflow import __version__
from screenflow.server.api import create_app


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_200(self, test_client: TestClient):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_response_structure(self, test_client: TestClient):
        data = test_client.get("/health").json()

        assert data["version"] == __version__
        assert data["document_loaded"] is True
        assert data["sessions"] == 0
        assert "timestamp" in data

    def test_health_counts_sessions(self, test_client: TestClient, session_id):
        assert test_client.get("/health").json()["sessions"] == 1

    def test_health_without_document(self):
        client = TestClient(create_app())
        assert client.get("/health").json()["document_loaded"] is False


class TestVersionEndpoint:
    """Tests for /version endpoint."""

    def test_version_parts(self, test_client: TestClient):
        data = test_client.get("/version").json()

        assert data["version"] == __version__
        assert isinstance(data["major"], int)
        assert isinstance(data["minor"], int)
        assert isinstance(data["patch"], str)
