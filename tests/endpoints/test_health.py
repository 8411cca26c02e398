from unittest.mock import patch

from fastapi.testclient import TestClient

from grelibre.schemas.health import ServiceHealth


def test_health_check_all_services_healthy(client: TestClient):
    """Test health check when all services are healthy."""
    with (
        patch("grelibre.services.planner_service.planner_service.health_check") as mock_planner,
        patch(
            "grelibre.services.geocoding_service.geocoding_service.health_check"
        ) as mock_geocoding,
    ):
        mock_planner.return_value = ServiceHealth(healthy=True, message="Planner API is responding")
        mock_geocoding.return_value = ServiceHealth(
            healthy=True, message="Geocoding API is responding"
        )

        response = client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()

        assert data["service"] == "grelibre-backend"
        assert data["healthy"] is True
        assert "timestamp" in data
        assert data["planner_service"]["healthy"] is True
        assert data["geocoding_service"]["healthy"] is True


def test_health_check_planner_unhealthy(client: TestClient):
    """Test health check when the planner is down."""
    with (
        patch("grelibre.services.planner_service.planner_service.health_check") as mock_planner,
        patch(
            "grelibre.services.geocoding_service.geocoding_service.health_check"
        ) as mock_geocoding,
    ):
        mock_planner.return_value = ServiceHealth(
            healthy=False, message="Planner API request timed out"
        )
        mock_geocoding.return_value = ServiceHealth(
            healthy=True, message="Geocoding API is responding"
        )

        response = client.get("/api/v1/health")

        assert response.status_code == 503
        data = response.json()["detail"]

        assert data["healthy"] is False
        assert data["planner_service"]["healthy"] is False
        assert data["planner_service"]["message"] == "Planner API request timed out"
        assert data["geocoding_service"]["healthy"] is True


def test_root(client: TestClient):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to GreLibre API"}
