# Hey future me - this router is for Docker/Kubernetes health checks!
#
# Endpoints:
# - /health/live   → Liveness probe (app is running)
# - /health/ready  → Readiness probe (we hold a usable Spotify token)
#
# Readiness does NOT call Spotify. It only looks at the TokenManager state, so a
# probe every few seconds never burns API quota.
"""Liveness and readiness probes. Ready means we hold a usable Spotify token."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from bandstosee.api.dependencies import get_token_manager
from bandstosee.application.services import TokenManager

router = APIRouter(prefix="/health", tags=["health"])


class LivenessStatus(BaseModel):
    """Body of /health/live."""

    status: str = Field(description="alive or dead")
    timestamp: str = Field(description="ISO timestamp")


class ReadinessStatus(BaseModel):
    """Body of /health/ready."""

    status: str = Field(description="ready or not_ready")
    timestamp: str = Field(description="ISO timestamp")
    spotify_token: bool = Field(description="A non-expired Spotify token is held")


@router.get("/live", response_model=LivenessStatus)
async def liveness_probe() -> LivenessStatus:
    """Liveness probe. Returns 200 if the application process is running."""
    return LivenessStatus(
        status="alive",
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready", response_model=ReadinessStatus)
async def readiness_probe(
    token_manager: TokenManager | None = Depends(get_token_manager),
) -> JSONResponse:
    """Readiness probe.

    Returns 200 when a valid Spotify token is held, 503 otherwise (startup
    still running, or the last grant failed/expired).
    """
    token_ok = token_manager is not None and token_manager.is_valid()

    response = ReadinessStatus(
        status="ready" if token_ok else "not_ready",
        timestamp=datetime.now(UTC).isoformat(),
        spotify_token=token_ok,
    )
    status_code = status.HTTP_200_OK if token_ok else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=status_code)
