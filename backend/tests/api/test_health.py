"""Tests for health check endpoints."""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from api import app


client = TestClient(app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self):
        """Health endpoint should return 200 with status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"

    def test_health_response_structure(self):
        """Health response should have correct structure."""
        response = client.get("/api/health")
        assert set(response.json().keys()) == {"status", "version"}

    @patch("api.routes.health.ping_database", new_callable=AsyncMock)
    def test_readiness_check(self, mock_ping):
        """Readiness endpoint should return 200 when the database answers."""
        mock_ping.return_value = True
        response = client.get("/api/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "database": "connected"}

    @patch("api.routes.health.ping_database", new_callable=AsyncMock)
    def test_readiness_database_down(self, mock_ping):
        """Readiness endpoint should return 503 when the database is unreachable."""
        mock_ping.side_effect = OSError("connection refused")
        response = client.get("/api/ready")
        assert response.status_code == 503
        assert response.json() == {"status": "not_ready", "database": "unavailable"}
