"""Tests for health check and root endpoints"""


class TestHealthEndpoints:
    """Test suite for health endpoints"""

    def test_health(self, client):
        """Test basic health check"""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["storage"] == "MemoryStorage"
        assert data["timestamp"].endswith("Z")

    def test_root(self, client):
        """Test root endpoint"""
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["message"] == "DesignDesk API"
