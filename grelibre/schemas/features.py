"""
Map Feature Schema

Renderable map primitives derived from an itinerary, plus the textual
summary displayed next to the map.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from grelibre.schemas.geo import BoundingBox, Position
from grelibre.schemas.itinerary import TransportMode

PointTag = Literal["start", "end", "intermediate-stop"]


class PointFeature(BaseModel):
    """A point marker: itinerary endpoint or intermediate stop."""

    type: Literal["point"] = "point"
    coordinate: Position
    tag: PointTag
    properties: Dict[str, Any] = Field(default_factory=dict)


class LineFeature(BaseModel):
    """The path of one leg."""

    type: Literal["line"] = "line"
    coordinates: List[Position]
    mode: TransportMode
    properties: Dict[str, Any] = Field(default_factory=dict)


MapFeature = Annotated[Union[PointFeature, LineFeature], Field(discriminator="type")]


class LegStep(BaseModel):
    """One line of the per-leg breakdown."""

    mode: TransportMode
    label: str = Field(..., description="Localized mode label, e.g. 'Tram A'")
    detail: str = Field(..., description="Distance for walk/bike legs, line name otherwise")
    duration_minutes: int
    stops: Optional[str] = Field(default=None, description="'from → to' stop names")


class ItinerarySummary(BaseModel):
    """Human-readable digest of an itinerary."""

    duration_minutes: int
    walk_distance_km: float
    start_time: str = Field(..., description="Local departure time, HH:MM")
    end_time: str = Field(..., description="Local arrival time, HH:MM")
    has_transit: bool
    steps: List[LegStep] = Field(default_factory=list)


class ItineraryMap(BaseModel):
    """Everything a map view needs to display one itinerary."""

    features: List[MapFeature]
    bounds: Optional[BoundingBox] = None
    summary: ItinerarySummary

    def to_geojson(self) -> Dict[str, Any]:
        """
        Export the features as a GeoJSON FeatureCollection.

        Point tags and line modes are carried in the feature properties so a
        map widget can style layers without knowing these models.
        """
        features = []
        for feature in self.features:
            if isinstance(feature, LineFeature):
                geometry = {
                    "type": "LineString",
                    "coordinates": [list(position) for position in feature.coordinates],
                }
                properties = {"kind": "leg", "mode": feature.mode.value, **feature.properties}
            else:
                geometry = {"type": "Point", "coordinates": list(feature.coordinate)}
                properties = {"kind": feature.tag, **feature.properties}
            features.append({"type": "Feature", "geometry": geometry, "properties": properties})

        collection: Dict[str, Any] = {"type": "FeatureCollection", "features": features}
        if self.bounds is not None:
            collection["bbox"] = self.bounds.as_list()
        return collection
