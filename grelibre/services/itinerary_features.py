"""
Itinerary Features

Turns a planner itinerary into map features (leg lines, endpoint and
intermediate-stop markers), a viewport bounding box and a French summary
of the trip. Pure functions: no I/O, no shared state.
"""

import logging
import math
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from grelibre.core.config import settings
from grelibre.schemas.features import (
    ItineraryMap,
    ItinerarySummary,
    LegStep,
    LineFeature,
    MapFeature,
    PointFeature,
)
from grelibre.schemas.geo import BoundingBox, Position
from grelibre.schemas.itinerary import NON_TRANSIT_MODES, Itinerary, Leg, TransportMode
from grelibre.utils.encoded_polyline import DecodeError, decode_polyline

logger = logging.getLogger(__name__)

TRANSIT_LABELS = {
    TransportMode.TRAM: "Tram",
    TransportMode.BUS: "Bus",
    TransportMode.SUBWAY: "Métro",
}


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def to_minutes(seconds: float) -> int:
    """Whole minutes, ties rounded up (90 s -> 2 min)."""
    return round_half_up(seconds / 60)


def to_kilometers(meters: float) -> float:
    """Kilometers to one decimal, ties rounded up."""
    return round_half_up(meters / 100) / 10


def format_clock(moment: datetime, tz: tzinfo) -> str:
    """Local 24-hour HH:MM; naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).strftime("%H:%M")


def _isoformat(moment: Optional[datetime]) -> Optional[str]:
    return moment.isoformat() if moment is not None else None


def decode_leg_geometry(leg: Leg) -> List[Position]:
    """
    Decode the path of a leg.

    A malformed geometry yields an empty path so the leg keeps its place in
    the feature list.
    """
    try:
        return decode_polyline(leg.geometry)
    except DecodeError as e:
        logger.warning("Ignoring malformed geometry for %s leg: %s", leg.mode.value, str(e))
        return []


def describe_leg(leg: Leg) -> LegStep:
    """Build the localized breakdown line of a leg."""
    distance = f"{to_kilometers(leg.distance):.1f} km"

    if leg.mode == TransportMode.WALK:
        label, detail = "Marche", distance
    elif leg.mode in TRANSIT_LABELS:
        label = f"{TRANSIT_LABELS[leg.mode]} {leg.route_short_name}".rstrip()
        detail = leg.route_long_name
    elif leg.mode == TransportMode.BICYCLE:
        label, detail = "Vélo", distance
    elif leg.transit_leg:
        label = f"Transport {leg.route_short_name}".rstrip()
        detail = leg.route_long_name
    else:
        label, detail = leg.mode.value.capitalize(), distance

    stops = None
    if leg.from_place.name or leg.to_place.name:
        stops = f"{leg.from_place.name} → {leg.to_place.name}"

    return LegStep(
        mode=leg.mode,
        label=label,
        detail=detail,
        duration_minutes=to_minutes(leg.duration),
        stops=stops,
    )


def summarize_itinerary(itinerary: Itinerary, tz: Optional[tzinfo] = None) -> ItinerarySummary:
    """Build the textual summary displayed next to the map."""
    tz = tz or ZoneInfo(settings.TIMEZONE)
    return ItinerarySummary(
        duration_minutes=to_minutes(itinerary.duration),
        walk_distance_km=to_kilometers(itinerary.walk_distance),
        start_time=format_clock(itinerary.start, tz),
        end_time=format_clock(itinerary.end, tz),
        has_transit=any(leg.mode not in NON_TRANSIT_MODES for leg in itinerary.legs),
        steps=[describe_leg(leg) for leg in itinerary.legs],
    )


def _leg_features(leg: Leg) -> List[MapFeature]:
    properties: Dict[str, Any] = {
        "duration": leg.duration,
        "distance": leg.distance,
        "route_short_name": leg.route_short_name,
        "route_long_name": leg.route_long_name,
    }
    features: List[MapFeature] = [
        LineFeature(coordinates=decode_leg_geometry(leg), mode=leg.mode, properties=properties)
    ]
    for stop in leg.intermediate_stops:
        features.append(
            PointFeature(
                coordinate=stop.coordinates.as_position(),
                tag="intermediate-stop",
                properties={
                    "name": stop.name,
                    "arrival": _isoformat(stop.arrival),
                    "departure": _isoformat(stop.departure),
                },
            )
        )
    return features


def itinerary_to_map(
    itinerary: Itinerary,
    origin: Position,
    destination: Position,
    tz: Optional[tzinfo] = None,
) -> ItineraryMap:
    """
    Convert an itinerary into map features and a summary.

    Features are ordered: start marker, then for each leg its line followed
    by its intermediate stops, then the end marker. The result always holds
    2 + len(legs) + total intermediate stops features.

    Args:
        itinerary: The planner itinerary; an empty leg list is accepted
        origin: Position of the searched origin
        destination: Position of the searched destination
        tz: Timezone for displayed clock times (defaults to settings.TIMEZONE)

    Returns:
        ItineraryMap with features, the bounding box of all leg lines (None
        when no leg has geometry) and the summary
    """
    legs = itinerary.legs
    features: List[MapFeature] = [
        PointFeature(
            coordinate=Position(*origin),
            tag="start",
            properties={"name": legs[0].from_place.name if legs else ""},
        )
    ]
    for leg in legs:
        features.extend(_leg_features(leg))
    features.append(
        PointFeature(
            coordinate=Position(*destination),
            tag="end",
            properties={"name": legs[-1].to_place.name if legs else ""},
        )
    )

    bounds = BoundingBox.from_positions(
        position
        for feature in features
        if isinstance(feature, LineFeature)
        for position in feature.coordinates
    )

    return ItineraryMap(
        features=features,
        bounds=bounds,
        summary=summarize_itinerary(itinerary, tz),
    )
