"""
Geocoding Service

Resolves free-text place names to positions with the Mapbox forward
geocoding API, biased towards Grenoble.

Documentation: https://docs.mapbox.com/api/search/geocoding-v5/
"""

import logging
from typing import Dict, List, Optional
from urllib.parse import quote

import httpx

from grelibre.core.config import settings
from grelibre.schemas.geo import Position
from grelibre.schemas.health import ServiceHealth
from grelibre.schemas.location import GeocodingCandidate

logger = logging.getLogger(__name__)

# Shorter queries are not sent to the provider
MIN_QUERY_LENGTH = 3


class GeocodingServiceError(Exception):
    """Base exception for geocoding service errors."""


class GeocodingNetworkError(GeocodingServiceError):
    """Raised when the geocoding provider cannot be reached."""


class PlaceNotFoundError(GeocodingServiceError):
    """Raised when a query has no match."""


class GeocodingService:
    """
    Service for interacting with the Mapbox geocoding API.
    """

    def __init__(self):
        self._api_url = settings.GEOCODING_API_URL
        self._access_token = settings.MAPBOX_ACCESS_TOKEN
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create the HTTP client for the geocoding API.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._api_url, timeout=10.0)
        return self._client

    def _search_path(self, query: str) -> str:
        text = f"{query}, {settings.GEOCODING_CITY}" if settings.GEOCODING_CITY else query
        return f"/{quote(text, safe='')}.json"

    async def health_check(self) -> ServiceHealth:
        """
        Perform a health check of the geocoding provider.
        """
        if not self._access_token:
            return ServiceHealth(healthy=False, message="Mapbox access token is not configured")
        try:
            client = self._get_client()
            response = await client.get(
                self._search_path(settings.GEOCODING_CITY or "Grenoble"),
                params={"access_token": self._access_token, "limit": 1},
            )

            if response.status_code == 200:
                return ServiceHealth(healthy=True, message="Geocoding API is responding")
            return ServiceHealth(
                healthy=False,
                message=f"Geocoding API returned status code: {response.status_code}",
            )

        except httpx.TimeoutException:
            return ServiceHealth(healthy=False, message="Geocoding API request timed out")
        except Exception as e:  # pylint: disable=broad-except
            return ServiceHealth(healthy=False, message=f"Geocoding API check failed: {str(e)}")

    async def search(self, query: str, limit: int = 5) -> List[GeocodingCandidate]:
        """
        Search places matching a free-text query.

        Args:
            query: Place name or address typed by the user
            limit: Maximum number of candidates

        Returns:
            Candidates ranked by the provider; empty for queries shorter
            than three characters

        Raises:
            GeocodingNetworkError: If the provider cannot be reached or errors
        """
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        params = {
            "access_token": self._access_token,
            "limit": limit,
            "proximity": f"{settings.CITY_CENTER_LON},{settings.CITY_CENTER_LAT}",
            "language": "fr",
        }

        try:
            client = self._get_client()
            response = await client.get(self._search_path(query), params=params)
            response.raise_for_status()
            return self._parse_features(response.json())

        except httpx.HTTPStatusError as e:
            logger.error("Geocoding API returned status %s", e.response.status_code)
            raise GeocodingNetworkError(
                f"Geocoding API status {e.response.status_code}"
            ) from e

        except httpx.HTTPError as e:
            logger.error("Network error while contacting geocoding API: %s", str(e))
            raise GeocodingNetworkError(f"Network error: {str(e)}") from e

        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error("Failed to parse geocoding response: %s", str(e))
            raise GeocodingServiceError(f"Invalid response data: {str(e)}") from e

    async def geocode(self, query: str) -> Position:
        """
        Resolve a query to the position of its best match.

        Raises:
            PlaceNotFoundError: If nothing matches
        """
        candidates = await self.search(query, limit=1)
        if not candidates:
            raise PlaceNotFoundError(f"Lieu non trouvé: {query}")
        return candidates[0].center

    def _parse_features(self, data: Dict) -> List[GeocodingCandidate]:
        return [
            GeocodingCandidate(
                name=feature["place_name"],
                center=Position(lon=feature["center"][0], lat=feature["center"][1]),
                relevance=feature.get("relevance", 0.0),
            )
            for feature in data.get("features", [])
        ]

    async def close(self):
        """
        Close the HTTP client.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton instance for dependency injection
geocoding_service = GeocodingService()
