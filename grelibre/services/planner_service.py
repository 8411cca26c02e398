"""
Planner Service

This service interfaces with the trip planner of the Grenoble mobility
authority (SMMAG), an OpenTripPlanner instance exposing the OTP v1 REST API,
to fetch public transport itineraries.

API Endpoint: https://data.mobilites-m.fr/api/routers/default/plan
Documentation: https://data.mobilites-m.fr/donnees
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

import httpx

from grelibre.core.config import settings
from grelibre.schemas.geo import Coordinates
from grelibre.schemas.health import ServiceHealth
from grelibre.schemas.itinerary import IntermediateStop, Itinerary, Leg, TransportMode
from grelibre.schemas.location import Place

logger = logging.getLogger(__name__)

PLAN_PATH = "/routers/default/plan"

# OTP error id returned when no path exists between the two places
PATH_NOT_FOUND = 404


class PlannerServiceError(Exception):
    """Base exception for planner service errors."""


class PlannerAPIError(PlannerServiceError):
    """Raised when the planner API returns an error."""


class PlannerNetworkError(PlannerServiceError):
    """Raised when network communication fails."""


class PlannerDataError(PlannerServiceError):
    """Raised when response data cannot be parsed."""


def _from_epoch_ms(value: Optional[float]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def _coordinates(data: Dict) -> Optional[Coordinates]:
    if data.get("lat") is None or data.get("lon") is None:
        return None
    return Coordinates(latitude=data["lat"], longitude=data["lon"])


class PlannerService:
    """
    Service for requesting itineraries from the SMMAG OpenTripPlanner API.
    """

    def __init__(self):
        self._api_url = settings.PLANNER_API_URL
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create the HTTP client for the planner API.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._api_url,
                timeout=settings.PLANNER_TIMEOUT,
                headers={
                    "Origin": settings.PLANNER_ORIGIN_HEADER,
                    "Accept": "application/json",
                },
            )
        return self._client

    def build_params(
        self,
        origin: Coordinates,
        destination: Coordinates,
        departure: datetime,
        mode: str,
        num_itineraries: int,
        arrive_by: bool,
    ) -> Dict[str, Any]:
        """
        Build the query parameters of a plan request.

        The planner expects local date and time, and "lat,lon" places.
        """
        if departure.tzinfo is None:
            departure = departure.replace(tzinfo=timezone.utc)
        local = departure.astimezone(ZoneInfo(settings.TIMEZONE))
        with_transit = "TRANSIT" in mode

        return {
            "fromPlace": f"{origin.latitude},{origin.longitude}",
            "toPlace": f"{destination.latitude},{destination.longitude}",
            "date": local.strftime("%Y-%m-%d"),
            "time": local.strftime("%H:%M"),
            "mode": mode,
            "numItineraries": num_itineraries,
            "showIntermediateStops": "true",
            "arriveBy": "true" if arrive_by else "false",
            "maxWalkDistance": 1000 if with_transit else 100000,
            "walkReluctance": 10 if with_transit else 2,
            "locale": "fr",
        }

    async def health_check(self) -> ServiceHealth:
        """
        Perform a health check of the planner API.
        """
        try:
            client = self._get_client()
            response = await client.get("/routers/default")

            if response.status_code == 200:
                return ServiceHealth(healthy=True, message="Planner API is responding")
            return ServiceHealth(
                healthy=False,
                message=f"Planner API returned status code: {response.status_code}",
            )

        except httpx.TimeoutException:
            return ServiceHealth(healthy=False, message="Planner API request timed out")
        except Exception as e:  # pylint: disable=broad-except
            return ServiceHealth(healthy=False, message=f"Planner API check failed: {str(e)}")

    async def plan(
        self,
        origin: Coordinates,
        destination: Coordinates,
        departure: Optional[datetime] = None,
        mode: str = "TRANSIT,WALK",
        num_itineraries: int = 3,
        arrive_by: bool = False,
    ) -> List[Itinerary]:
        """
        Fetch itineraries between two locations.

        Args:
            origin: Coordinates of the starting point
            destination: Coordinates of the destination point
            departure: Departure (or arrival, with arrive_by) time, defaults to now
            mode: OTP mode set, e.g. "TRANSIT,WALK", "WALK", "BICYCLE"
            num_itineraries: Number of alternatives to request
            arrive_by: Whether departure is the requested arrival time

        Returns:
            List of Itinerary objects; empty when no path exists

        Raises:
            PlannerAPIError: If the planner reports an error
            PlannerNetworkError: If the request fails or times out
            PlannerDataError: If the response cannot be parsed
        """
        params = self.build_params(
            origin,
            destination,
            departure or datetime.now(timezone.utc),
            mode,
            num_itineraries,
            arrive_by,
        )

        try:
            client = self._get_client()
            response = await client.get(PLAN_PATH, params=params)
            response.raise_for_status()

            return self._parse_plan(response.json())

        except PlannerServiceError:
            raise

        except httpx.HTTPStatusError as e:
            logger.error("Planner API returned status %s", e.response.status_code)
            raise PlannerAPIError(f"Planner API status {e.response.status_code}") from e

        except httpx.TimeoutException as e:
            logger.error("Request to planner API timed out")
            raise PlannerNetworkError("Request timed out") from e

        except httpx.HTTPError as e:
            logger.error("Network error while contacting planner API: %s", str(e))
            raise PlannerNetworkError(f"Network error: {str(e)}") from e

        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error("Failed to parse planner API response: %s", str(e))
            raise PlannerDataError(f"Invalid response data: {str(e)}") from e

        except Exception as e:
            logger.exception("Unexpected error in planner service")
            raise PlannerServiceError(f"Unexpected error: {str(e)}") from e

    def _parse_plan(self, data: Dict) -> List[Itinerary]:
        """
        Parse a plan response into a list of Itinerary objects.
        """
        error = data.get("error")
        if error:
            if error.get("id") == PATH_NOT_FOUND:
                logger.info("Planner found no path: %s", error.get("msg"))
                return []
            raise PlannerAPIError(f"Planner error {error.get('id')}: {error.get('msg')}")

        plan = data.get("plan") or {}
        return [self._parse_itinerary(item) for item in plan.get("itineraries", [])]

    def _parse_itinerary(self, data: Dict) -> Itinerary:
        """
        Parse a single itinerary.
        """
        return Itinerary(
            start=_from_epoch_ms(data["startTime"]),
            end=_from_epoch_ms(data["endTime"]),
            duration=data.get("duration") or 0,
            walk_distance=data.get("walkDistance") or 0.0,
            walk_time=data.get("walkTime") or 0,
            transfers=data.get("transfers") or 0,
            legs=[self._parse_leg(leg) for leg in data.get("legs") or []],
        )

    def _parse_leg(self, data: Dict) -> Leg:
        """
        Parse a single leg. Fields the planner omits for some modes default.
        """
        geometry = data.get("legGeometry") or {}
        return Leg(
            mode=TransportMode(data["mode"]),
            duration=data.get("duration") or 0.0,
            distance=data.get("distance") or 0.0,
            route_short_name=data.get("routeShortName") or "",
            route_long_name=data.get("routeLongName") or "",
            from_place=self._parse_place(data.get("from") or {}),
            to_place=self._parse_place(data.get("to") or {}),
            intermediate_stops=self._parse_stops(data.get("intermediateStops") or []),
            geometry=geometry.get("points") or "",
            transit_leg=bool(data.get("transitLeg")),
            start=_from_epoch_ms(data.get("startTime")),
            end=_from_epoch_ms(data.get("endTime")),
        )

    def _parse_place(self, data: Dict) -> Place:
        return Place(
            name=data.get("name") or "",
            coordinates=_coordinates(data),
            stop_id=data.get("stopId"),
            arrival=_from_epoch_ms(data.get("arrival")),
            departure=_from_epoch_ms(data.get("departure")),
        )

    def _parse_stops(self, stops: List[Dict]) -> List[IntermediateStop]:
        parsed = []
        for stop in stops:
            coordinates = _coordinates(stop)
            if coordinates is None:
                logger.warning(
                    "Skipping intermediate stop without position: %s", stop.get("name")
                )
                continue
            parsed.append(
                IntermediateStop(
                    coordinates=coordinates,
                    name=stop.get("name") or "",
                    arrival=_from_epoch_ms(stop.get("arrival")),
                    departure=_from_epoch_ms(stop.get("departure")),
                )
            )
        return parsed

    async def close(self):
        """
        Close the HTTP client.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton instance for dependency injection
planner_service = PlannerService()
