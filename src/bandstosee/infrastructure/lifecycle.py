"""Application lifecycle management for startup and shutdown tasks.

This module handles the FastAPI lifespan context manager. Everything the routes
need is built ONCE here and parked on app.state:

- app.state.spotify_client      (SpotifyClient, closed on shutdown)
- app.state.token_manager       (the one and only TokenManager)
- app.state.playlist_aggregator (PlaylistAggregator)
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI

from bandstosee.application.services import (
    ArtistBatchFetcher,
    PlaylistAggregator,
    TokenManager,
)
from bandstosee.config import Settings, get_settings
from bandstosee.domain.exceptions import ConfigurationError, DomainException
from bandstosee.infrastructure.integrations.spotify_client import SpotifyClient
from bandstosee.infrastructure.observability import configure_logging

logger = logging.getLogger(__name__)


def validate_settings(settings: Settings) -> None:
    """Fail fast on configuration the service can't run without.

    Raises:
        ConfigurationError: If Spotify credentials or the playlist ID are missing
    """
    if not settings.spotify.is_configured:
        raise ConfigurationError(
            "SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET must be set "
            "(environment or .env)."
        )
    if not settings.source_playlist.playlist_id.strip():
        raise ConfigurationError("SOURCE_PLAYLIST_PLAYLIST_ID must be set.")


def build_aggregator(
    settings: Settings, spotify_client: SpotifyClient
) -> tuple[TokenManager, PlaylistAggregator]:
    """Wire the token manager and aggregator around one Spotify client."""
    token_manager = TokenManager(
        spotify_client,
        safety_margin_seconds=settings.spotify.token_safety_margin_seconds,
    )
    aggregator = PlaylistAggregator(
        spotify_client=spotify_client,
        token_manager=token_manager,
        artist_fetcher=ArtistBatchFetcher(spotify_client),
        playlist_id=settings.source_playlist.playlist_id,
        owner_id=settings.source_playlist.owner_id,
        artist_batch_size=settings.spotify.artist_batch_size,
    )
    return token_manager, aggregator


# Listen future me, @asynccontextmanager makes this a CONTEXT MANAGER for FastAPI lifespan!
# Code before the yield runs at startup, code after it at shutdown. We grab a token right
# away so the first request doesn't pay for the grant - but if Spotify is down at boot we
# only warn, ensure_valid() will try again on the first request.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    validate_settings(settings)

    spotify_client = SpotifyClient(settings.spotify)
    token_manager, aggregator = build_aggregator(settings, spotify_client)

    app.state.settings = settings
    app.state.spotify_client = spotify_client
    app.state.token_manager = token_manager
    app.state.playlist_aggregator = aggregator
    app.state.startup_time = datetime.now(UTC)

    try:
        await token_manager.ensure_valid()
    except DomainException as e:
        logger.warning("Initial Spotify token request failed: %s", e.message)

    try:
        yield
    finally:
        logger.info("Shutting down application")
        await spotify_client.close()
