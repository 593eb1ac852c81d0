"""API router initialization."""

# Hey future me, this is the API router aggregator. The app mounts api_router at the root,
# so the bands endpoint stays at /userdata where existing clients expect it.

from fastapi import APIRouter

from bandstosee.api.routers import bands, health

api_router = APIRouter()
api_router.include_router(bands.router)
api_router.include_router(health.router)

__all__ = ["api_router", "bands", "health"]
