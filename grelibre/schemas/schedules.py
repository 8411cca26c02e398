"""
Schedule Schemas

Pydantic models for transit lines, line directions and upcoming passages
at a stop.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

# GTFS route_type values
ROUTE_TYPE_TRAM = 0
ROUTE_TYPE_BUS = 3


class GtfsRoute(BaseModel):
    """A row of a GTFS routes.txt file."""

    route_id: str = ""
    route_short_name: str = ""
    route_long_name: str = ""
    route_type: int = ROUTE_TYPE_BUS
    route_color: str = "CCCCCC"
    route_text_color: str = "000000"


class TransitLine(BaseModel):
    """A line of the network enriched with its GTFS display metadata."""

    id: str
    unique_id: str = Field(..., description="'<id>-<shortName>', unique across agencies")
    short_name: str
    long_name: str = ""
    mode: Optional[str] = None
    color: str = "CCCCCC"
    text_color: str = "000000"
    type: int = ROUTE_TYPE_BUS


class TransitLines(BaseModel):
    """Lines grouped the way they are listed to riders."""

    trams: List[TransitLine] = Field(default_factory=list)
    buses: List[TransitLine] = Field(default_factory=list)
    others: List[TransitLine] = Field(default_factory=list)


class DirectionStop(BaseModel):
    stop_id: str
    stop_name: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class Direction(BaseModel):
    """One direction of a line, from its timetable sheet."""

    index: int
    name: str = Field(..., description="'<first stop> → <last stop>'")
    stops: List[DirectionStop] = Field(default_factory=list)


class Passage(BaseModel):
    """A vehicle passage at a stop."""

    scheduled_arrival: datetime
    realtime_arrival: datetime
    pattern_desc: str = ""
    trip_id: Optional[str] = None
    wait: str = Field(..., description="Time left before the passage, e.g. '5 min'")


class StopPassagesResponse(BaseModel):
    stop_id: str
    route_id: Optional[str] = None
    passages: List[Passage]
