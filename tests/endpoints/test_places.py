from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from grelibre.schemas.geo import Position
from grelibre.schemas.location import GeocodingCandidate
from grelibre.services.geocoding_service import GeocodingNetworkError


def test_search_places(client: TestClient):
    candidates = [
        GeocodingCandidate(
            name="Place Victor Hugo, 38000 Grenoble, France",
            center=Position(lon=5.7253, lat=45.1893),
            relevance=0.98,
        )
    ]

    with patch(
        "grelibre.services.geocoding_service.geocoding_service.search",
        new_callable=AsyncMock,
        return_value=candidates,
    ) as mock_search:
        response = client.get("/api/v1/places/search", params={"q": "Victor Hugo", "limit": 3})

    assert response.status_code == 200
    data = response.json()
    assert data["query"] == "Victor Hugo"
    assert data["candidates"][0]["center"] == [5.7253, 45.1893]
    mock_search.assert_awaited_once_with("Victor Hugo", limit=3)


def test_search_places_requires_query(client: TestClient):
    response = client.get("/api/v1/places/search")

    assert response.status_code == 422


def test_search_places_unavailable(client: TestClient):
    with patch(
        "grelibre.services.geocoding_service.geocoding_service.search",
        new_callable=AsyncMock,
        side_effect=GeocodingNetworkError("Network error: refused"),
    ):
        response = client.get("/api/v1/places/search", params={"q": "Chavant"})

    assert response.status_code == 503
