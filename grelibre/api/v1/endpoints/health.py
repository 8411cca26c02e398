from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status

from grelibre.core.config import settings
from grelibre.schemas.health import HealthCheckResponse
from grelibre.services.geocoding_service import geocoding_service
from grelibre.services.planner_service import planner_service

router = APIRouter()


@router.get("/health")
async def health_check() -> HealthCheckResponse:
    """
    Health check endpoint that verifies:
    - Trip planner API availability
    - Geocoding API availability

    Returns 200 if all services are healthy, 503 if any service is down.
    """
    planner_health = await planner_service.health_check()
    geocoding_health = await geocoding_service.health_check()

    overall_healthy = all([planner_health.healthy, geocoding_health.healthy])

    response = HealthCheckResponse(
        service="grelibre-backend",
        version=settings.VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        healthy=overall_healthy,
        planner_service=planner_health,
        geocoding_service=geocoding_health,
    )

    if overall_healthy:
        return response
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=response.model_dump()
    )
