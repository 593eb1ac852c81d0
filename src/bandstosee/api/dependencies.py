"""Dependency injection for API endpoints."""

from typing import cast

from fastapi import Request

from bandstosee.application.services import PlaylistAggregator, TokenManager


# Hey future me, these objects are built once in the lifespan (see lifecycle.py) and live on
# app.state. Tests override these functions via app.dependency_overrides instead of running
# the lifespan.
def get_playlist_aggregator(request: Request) -> PlaylistAggregator:
    """Get the process-wide PlaylistAggregator."""
    return cast(PlaylistAggregator, request.app.state.playlist_aggregator)


def get_token_manager(request: Request) -> TokenManager | None:
    """Get the process-wide TokenManager (None before startup finished)."""
    return cast(TokenManager | None, getattr(request.app.state, "token_manager", None))
