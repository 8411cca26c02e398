"""
Location and Coordinate Type Definitions

Pydantic models and tuples for representing geographic positions,
coordinates and bounding boxes used throughout the application.
"""

from typing import Iterable, NamedTuple, Optional

from pydantic import BaseModel, Field, field_validator


class Position(NamedTuple):
    """A WGS84 position, longitude first as in GeoJSON."""

    lon: float
    lat: float


class Coordinates(BaseModel):
    """
    Geographic coordinates (latitude and longitude).
    """

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Longitude in decimal degrees")

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: float) -> float:
        """Ensure latitude is within valid range."""
        if not -90.0 <= v <= 90.0:
            raise ValueError("Latitude must be between -90 and 90 degrees")
        return v

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: float) -> float:
        """Ensure longitude is within valid range."""
        if not -180.0 <= v <= 180.0:
            raise ValueError("Longitude must be between -180 and 180 degrees")
        return v

    @classmethod
    def from_position(cls, position: Position) -> "Coordinates":
        return cls(latitude=position.lat, longitude=position.lon)

    def as_position(self) -> Position:
        return Position(lon=self.longitude, lat=self.latitude)

    def __str__(self) -> str:
        return f"({self.latitude}, {self.longitude})"


class BoundingBox(BaseModel):
    """Smallest box containing a set of positions, used to fit a map viewport."""

    west: float
    south: float
    east: float
    north: float

    @classmethod
    def from_positions(cls, positions: Iterable[Position]) -> Optional["BoundingBox"]:
        """
        Compute the bounding box of the given positions.

        Returns None when there is no position at all.
        """
        west = south = east = north = None
        for lon, lat in positions:
            if west is None:
                west, east, south, north = lon, lon, lat, lat
                continue
            west = min(west, lon)
            east = max(east, lon)
            south = min(south, lat)
            north = max(north, lat)

        if west is None:
            return None
        return cls(west=west, south=south, east=east, north=north)

    def as_list(self) -> list[float]:
        """GeoJSON ``bbox`` ordering."""
        return [self.west, self.south, self.east, self.north]
