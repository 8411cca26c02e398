"""
Route Search Request/Response Schemas

Pydantic models for route search API endpoint.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from grelibre.schemas.features import ItineraryMap
from grelibre.schemas.geo import Coordinates


class RouteSearchRequest(BaseModel):
    """Request schema for route search endpoint."""

    origin: Coordinates = Field(..., description="Starting location coordinates")
    destination: Coordinates = Field(..., description="Destination location coordinates")
    departure: Optional[datetime] = Field(
        None,
        description=(
            "Departure time (ISO format), or arrival time when arrive_by is set. "
            "Defaults to current time if not provided."
        ),
    )
    arrive_by: bool = Field(default=False, description="Treat departure as the arrival time")
    mode: str = Field(
        default="TRANSIT,WALK",
        pattern=r"^[A-Z_]+(,[A-Z_]+)*$",
        description="Planner mode set, e.g. 'TRANSIT,WALK', 'WALK', 'BICYCLE'",
    )
    num_itineraries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Number of route alternatives to return (1-10, default: 3)",
    )


class RouteSearchResponse(BaseModel):
    """Response schema for route search endpoint."""

    origin: Coordinates
    destination: Coordinates
    itineraries: List[ItineraryMap] = Field(..., description="Map-ready itineraries")
    search_time: datetime = Field(..., description="Time when the search was performed")
