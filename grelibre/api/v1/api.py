from fastapi import APIRouter

from grelibre.api.v1.endpoints import health, places, routes, schedules

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(places.router, prefix="/places", tags=["places"])
api_router.include_router(routes.router, prefix="/routes", tags=["routes"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["schedules"])
