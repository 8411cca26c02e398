"""
Schedules API Endpoint

Lines of the network, their directions and next passages at stops.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException

from grelibre.schemas.schedules import Direction, StopPassagesResponse, TransitLines
from grelibre.services.planner_service import (
    PlannerAPIError,
    PlannerDataError,
    PlannerNetworkError,
    PlannerServiceError,
)
from grelibre.services.schedule_service import schedule_service

router = APIRouter()


def _to_http_error(e: PlannerServiceError) -> HTTPException:
    if isinstance(e, PlannerNetworkError):
        return HTTPException(status_code=503, detail=f"Schedule API unavailable: {str(e)}")
    if isinstance(e, (PlannerAPIError, PlannerDataError)):
        return HTTPException(status_code=502, detail=f"Schedule API error: {str(e)}")
    return HTTPException(status_code=500, detail=f"Schedule service error: {str(e)}")


@router.get("/lines", response_model=TransitLines)
async def list_lines():
    """List tram and bus lines with their colors."""
    try:
        return await schedule_service.list_lines()
    except PlannerServiceError as e:
        raise _to_http_error(e) from e


@router.get("/lines/{route_id}/directions", response_model=List[Direction])
async def line_directions(route_id: str):
    """List the directions of a line and their stops."""
    try:
        directions = await schedule_service.line_directions(route_id)
    except PlannerServiceError as e:
        raise _to_http_error(e) from e

    if not directions:
        raise HTTPException(status_code=404, detail="Aucun arrêt trouvé pour cette ligne")
    return directions


@router.get("/stops/{stop_id}", response_model=StopPassagesResponse)
async def stop_passages(stop_id: str, route_id: Optional[str] = None):
    """Next passages at a stop, optionally restricted to one line."""
    try:
        passages = await schedule_service.stop_passages(stop_id, route_id=route_id)
    except PlannerServiceError as e:
        raise _to_http_error(e) from e

    return StopPassagesResponse(stop_id=stop_id, route_id=route_id, passages=passages)
