"""Bands-to-see endpoint."""

import logging

from fastapi import APIRouter, Depends

from bandstosee.api.dependencies import get_playlist_aggregator
from bandstosee.api.schemas.bands import BandToSeeResponse, ErrorResponse
from bandstosee.application.services import PlaylistAggregator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bands"])


# Failures are NOT handled here: AuthError/PlaylistFetchError/ArtistFetchError bubble up to
# the DomainException handler in exception_handlers.py, which turns them into the generic 500.
@router.get(
    "/userdata",
    response_model=list[BandToSeeResponse],
    responses={500: {"model": ErrorResponse}},
)
async def get_bands_to_see(
    aggregator: PlaylistAggregator = Depends(get_playlist_aggregator),
) -> list[BandToSeeResponse]:
    """Get the bands to see, each with its full Spotify artist object."""
    logger.info("GET request received at /userdata")
    bands = await aggregator.get_bands_to_see()
    logger.info("Retrieved %d bands successfully", len(bands))
    return [BandToSeeResponse.from_dto(band) for band in bands]
