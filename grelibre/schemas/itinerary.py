"""
Itinerary Schema

Pydantic models for representing transit itineraries as returned by the
trip planner. Optional planner fields default rather than fail, since the
planner omits them depending on the leg mode.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from grelibre.schemas.geo import Coordinates
from grelibre.schemas.location import Place


class TransportMode(str, Enum):
    """Transport modes."""

    WALK = "WALK"
    BICYCLE = "BICYCLE"
    CAR = "CAR"
    TRAM = "TRAM"
    SUBWAY = "SUBWAY"
    RAIL = "RAIL"
    BUS = "BUS"
    FERRY = "FERRY"
    CABLE_CAR = "CABLE_CAR"
    GONDOLA = "GONDOLA"
    FUNICULAR = "FUNICULAR"
    TRANSIT = "TRANSIT"

    @classmethod
    def _missing_(cls, value):
        # Modes the planner may add later are treated as generic transit
        return cls.TRANSIT


# Modes that do not count as public transport
NON_TRANSIT_MODES = frozenset({TransportMode.WALK, TransportMode.BICYCLE})


class IntermediateStop(BaseModel):
    """A stop served between the two ends of a transit leg."""

    coordinates: Coordinates
    name: str = ""
    arrival: Optional[datetime] = None
    departure: Optional[datetime] = None


class Leg(BaseModel):
    """A single mode-homogeneous segment of a journey."""

    mode: TransportMode
    duration: float = Field(default=0.0, description="Duration in seconds")
    distance: float = Field(default=0.0, description="Distance in meters")
    route_short_name: str = Field(default="", description="Short name of the line, e.g. 'A'")
    route_long_name: str = Field(default="", description="Long name of the line")
    from_place: Place = Field(default_factory=Place)
    to_place: Place = Field(default_factory=Place)
    intermediate_stops: List[IntermediateStop] = Field(default_factory=list)
    geometry: str = Field(default="", description="Encoded polyline of the leg path")
    transit_leg: bool = False
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class Itinerary(BaseModel):
    """A complete journey from origin to destination."""

    start: datetime
    end: datetime
    duration: float = Field(default=0.0, description="Total duration in seconds")
    walk_distance: float = Field(default=0.0, description="Total walking distance in meters")
    walk_time: float = Field(default=0.0, description="Total walking time in seconds")
    transfers: int = 0
    legs: List[Leg] = Field(default_factory=list)
