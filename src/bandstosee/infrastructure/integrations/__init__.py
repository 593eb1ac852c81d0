"""External service integrations."""

from bandstosee.infrastructure.integrations.spotify_client import SpotifyClient

__all__ = ["SpotifyClient"]
