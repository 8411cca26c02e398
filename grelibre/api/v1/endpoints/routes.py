"""
Routes API Endpoint

Provides REST API for planning itineraries on the Grenoble network.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from grelibre.schemas.routes import RouteSearchRequest, RouteSearchResponse
from grelibre.services.itinerary_features import itinerary_to_map
from grelibre.services.planner_service import (
    PlannerAPIError,
    PlannerDataError,
    PlannerNetworkError,
    PlannerServiceError,
    planner_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/search", response_model=RouteSearchResponse)
async def search_routes(request: RouteSearchRequest):
    """
    Search itineraries between two locations.

    Queries the SMMAG trip planner and converts every itinerary into map
    features, a viewport bounding box and a summary.

    Args:
        request: Route search parameters including origin, destination and mode

    Returns:
        RouteSearchResponse with the map-ready itineraries

    Raises:
        HTTPException: If no itinerary exists or the planner fails
    """
    logger.info(
        "Route search request: origin=%s, destination=%s, mode=%s, num_itineraries=%s",
        request.origin,
        request.destination,
        request.mode,
        request.num_itineraries,
    )

    try:
        itineraries = await planner_service.plan(
            origin=request.origin,
            destination=request.destination,
            departure=request.departure or datetime.now(timezone.utc),
            mode=request.mode,
            num_itineraries=request.num_itineraries,
            arrive_by=request.arrive_by,
        )

    except PlannerAPIError as e:
        logger.error("Planner API error: %s", str(e))
        raise HTTPException(status_code=502, detail=f"Planner API error: {str(e)}") from e

    except PlannerNetworkError as e:
        logger.error("Network error: %s", str(e))
        raise HTTPException(
            status_code=503,
            detail=f"Network error connecting to planner API: {str(e)}",
        ) from e

    except PlannerDataError as e:
        logger.error("Data parsing error: %s", str(e))
        raise HTTPException(
            status_code=502,
            detail=f"Failed to parse planner API response: {str(e)}",
        ) from e

    except PlannerServiceError as e:
        logger.error("Planner service error: %s", str(e))
        raise HTTPException(status_code=500, detail=f"Planner service error: {str(e)}") from e

    if not itineraries:
        raise HTTPException(status_code=404, detail="Aucun itinéraire trouvé")

    origin = request.origin.as_position()
    destination = request.destination.as_position()
    maps = [itinerary_to_map(itinerary, origin, destination) for itinerary in itineraries]

    logger.info("Route search successful: found %d itineraries", len(maps))

    return RouteSearchResponse(
        origin=request.origin,
        destination=request.destination,
        itineraries=maps,
        search_time=datetime.now(timezone.utc),
    )
