"""
Schedule Service

Lines, timetable directions and next passages at stops, read from the
index API of the SMMAG OpenTripPlanner instance and the timetable sheets
("fiches horaires") of the same API.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

import httpx

from grelibre.core.config import settings
from grelibre.schemas.schedules import (
    ROUTE_TYPE_BUS,
    ROUTE_TYPE_TRAM,
    Direction,
    DirectionStop,
    GtfsRoute,
    Passage,
    TransitLine,
    TransitLines,
)
from grelibre.services.planner_service import (
    PlannerAPIError,
    PlannerDataError,
    PlannerNetworkError,
)
from grelibre.utils.gtfs import load_gtfs_routes

logger = logging.getLogger(__name__)

# Number of passages shown when none is upcoming
FALLBACK_PASSAGES = 5


def format_wait_time(arrival: datetime, now: datetime) -> str:
    """
    Describe the time left before a passage.

    Returns "Passé" for past passages, "N min" under an hour and "HhMM"
    beyond.
    """
    seconds = (arrival - now).total_seconds()
    if seconds < 0:
        return "Passé"

    minutes = int(seconds // 60)
    if minutes < 60:
        return f"{minutes} min"
    return f"{minutes // 60}h{minutes % 60:02d}"


class ScheduleService:
    """
    Service for transit lines and stop times.
    """

    def __init__(self, gtfs_routes_path: Optional[str] = None):
        self._api_url = settings.PLANNER_API_URL
        self._gtfs_routes_path = gtfs_routes_path or settings.GTFS_ROUTES_PATH
        self._gtfs_routes: Optional[List[GtfsRoute]] = None
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
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

    def _get_gtfs_routes(self) -> List[GtfsRoute]:
        if self._gtfs_routes is None:
            self._gtfs_routes = load_gtfs_routes(self._gtfs_routes_path)
        return self._gtfs_routes

    async def _get_json(self, path: str, params: Optional[Dict] = None):
        try:
            client = self._get_client()
            response = await client.get(path, params=params)
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            logger.error("Schedule API returned status %s for %s", e.response.status_code, path)
            raise PlannerAPIError(f"Schedule API status {e.response.status_code}") from e

        except httpx.TimeoutException as e:
            logger.error("Request to schedule API timed out: %s", path)
            raise PlannerNetworkError("Request timed out") from e

        except httpx.HTTPError as e:
            logger.error("Network error while contacting schedule API: %s", str(e))
            raise PlannerNetworkError(f"Network error: {str(e)}") from e

        except ValueError as e:
            logger.error("Schedule API returned invalid JSON for %s", path)
            raise PlannerDataError(f"Invalid response data: {str(e)}") from e

    async def list_lines(self) -> TransitLines:
        """
        List the lines of the network, grouped into trams and buses.

        Lines are enriched with the colors and type of the GTFS route sharing
        their short name; each group is sorted by short name.
        """
        data = await self._get_json("/routers/default/index/routes")
        gtfs_by_short_name = {route.route_short_name: route for route in self._get_gtfs_routes()}

        lines: Dict[str, TransitLine] = {}
        try:
            for route in data:
                short_name = route.get("shortName") or ""
                gtfs = gtfs_by_short_name.get(short_name)
                line = TransitLine(
                    id=route["id"],
                    unique_id=f"{route['id']}-{short_name}",
                    short_name=short_name,
                    long_name=route.get("longName") or "",
                    mode=route.get("mode"),
                    color=gtfs.route_color if gtfs else "CCCCCC",
                    text_color=gtfs.route_text_color if gtfs else "000000",
                    type=gtfs.route_type if gtfs else ROUTE_TYPE_BUS,
                )
                lines[line.unique_id] = line
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error("Failed to parse route index: %s", str(e))
            raise PlannerDataError(f"Invalid route index: {str(e)}") from e

        grouped = TransitLines()
        for line in sorted(lines.values(), key=lambda item: item.short_name):
            if line.type == ROUTE_TYPE_TRAM:
                grouped.trams.append(line)
            elif line.type == ROUTE_TYPE_BUS:
                grouped.buses.append(line)
            else:
                grouped.others.append(line)
        return grouped

    async def line_directions(self, route_id: str, now: Optional[datetime] = None) -> List[Direction]:
        """
        Get the directions of a line and their stops from its timetable sheet.

        The sheet is an object whose numeric keys are directions; other keys
        are ignored.
        """
        now = now or datetime.now(timezone.utc)
        data = await self._get_json(
            "/ficheHoraires/json",
            params={"route": route_id, "time": int(now.timestamp() * 1000), "nbTrips": 5},
        )
        if not isinstance(data, dict):
            raise PlannerDataError("Timetable sheet is not an object")

        directions = []
        try:
            for key in sorted((key for key in data if key.isdigit()), key=int):
                stops_data = (data[key] or {}).get("arrets")
                if not isinstance(stops_data, list):
                    continue

                stops = [
                    DirectionStop(
                        stop_id=stop["stopId"],
                        stop_name=stop.get("stopName") or "",
                        latitude=stop.get("lat"),
                        longitude=stop.get("lon"),
                    )
                    for stop in stops_data
                    if stop.get("stopId")
                ]
                first = stops[0].stop_name if stops else ""
                last = stops[-1].stop_name if stops else ""
                directions.append(
                    Direction(index=int(key), name=f"{first} → {last}", stops=stops)
                )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error("Failed to parse timetable sheet of %s: %s", route_id, str(e))
            raise PlannerDataError(f"Invalid timetable sheet: {str(e)}") from e

        return directions

    async def stop_passages(
        self,
        stop_id: str,
        route_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[Passage]:
        """
        Get the next passages at a stop.

        Args:
            stop_id: Planner stop id, e.g. "SEM:GENGARE"
            route_id: Keep only patterns of this line; all patterns are kept
                when none matches
            now: Reference time (defaults to now)

        Returns:
            Upcoming passages sorted by realtime arrival, or the first five
            passages of the day when none is upcoming
        """
        now = now or datetime.now(timezone.utc)
        service_date = now.astimezone(ZoneInfo(settings.TIMEZONE)).strftime("%Y%m%d")
        patterns = await self._get_json(
            f"/routers/default/index/stops/{stop_id}/stoptimes/{service_date}"
        )
        if not isinstance(patterns, list):
            raise PlannerDataError("Stop times response is not a list")

        try:
            relevant = patterns
            if route_id:
                relevant = [
                    p for p in patterns if route_id in ((p.get("pattern") or {}).get("id") or "")
                ]
                if not relevant:
                    logger.info(
                        "No pattern of %s serves %s, keeping all patterns", route_id, stop_id
                    )
                    relevant = patterns

            passages = self._flatten_times(relevant, now)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error("Failed to parse stop times of %s: %s", stop_id, str(e))
            raise PlannerDataError(f"Invalid stop times: {str(e)}") from e

        passages.sort(key=lambda passage: passage.realtime_arrival)
        upcoming = [passage for passage in passages if passage.realtime_arrival > now]
        if upcoming:
            return upcoming

        logger.info("No upcoming passage at %s", stop_id)
        return passages[:FALLBACK_PASSAGES]

    def _flatten_times(self, patterns: List[Dict], now: datetime) -> List[Passage]:
        passages = []
        for pattern_data in patterns:
            pattern = pattern_data.get("pattern") or {}
            for time in pattern_data.get("times") or []:
                service_day = time["serviceDay"]
                scheduled = datetime.fromtimestamp(
                    service_day + time["scheduledArrival"], tz=timezone.utc
                )
                realtime = datetime.fromtimestamp(
                    service_day + time.get("realtimeArrival", time["scheduledArrival"]),
                    tz=timezone.utc,
                )
                passages.append(
                    Passage(
                        scheduled_arrival=scheduled,
                        realtime_arrival=realtime,
                        pattern_desc=pattern.get("desc") or "",
                        trip_id=time.get("tripId"),
                        wait=format_wait_time(realtime, now),
                    )
                )
        return passages

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton instance for dependency injection
schedule_service = ScheduleService()
