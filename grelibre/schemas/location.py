"""
Location Schema

Pydantic models for representing places and geocoding results.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from grelibre.schemas.geo import Coordinates, Position


class Place(BaseModel):
    """A place with metadata, as reported at either end of a leg."""

    name: str = ""
    coordinates: Optional[Coordinates] = None
    stop_id: Optional[str] = None
    arrival: Optional[datetime] = None
    departure: Optional[datetime] = None


class GeocodingCandidate(BaseModel):
    """A ranked geocoding match."""

    name: str = Field(..., description="Display name of the match")
    center: Position = Field(..., description="Position of the match, [lon, lat]")
    relevance: float = Field(default=0.0, description="Provider relevance score (0-1)")


class PlaceSearchResponse(BaseModel):
    """Response schema for the place search endpoint."""

    query: str
    candidates: list[GeocodingCandidate]
