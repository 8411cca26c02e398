"""
Places API Endpoint

Free-text place search used to fill the origin and destination fields.
"""

import logging

from fastapi import APIRouter, HTTPException, Query

from grelibre.schemas.location import PlaceSearchResponse
from grelibre.services.geocoding_service import (
    GeocodingNetworkError,
    GeocodingServiceError,
    geocoding_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search", response_model=PlaceSearchResponse)
async def search_places(
    q: str = Query(..., min_length=1, description="Place name or address"),
    limit: int = Query(5, ge=1, le=10),
):
    """
    Search places in Grenoble matching a query.
    """
    try:
        candidates = await geocoding_service.search(q, limit=limit)
    except GeocodingNetworkError as e:
        raise HTTPException(status_code=503, detail=f"Geocoding unavailable: {str(e)}") from e
    except GeocodingServiceError as e:
        raise HTTPException(status_code=502, detail=f"Geocoding error: {str(e)}") from e

    logger.debug("Place search %r returned %d candidates", q, len(candidates))
    return PlaceSearchResponse(query=q, candidates=candidates)
