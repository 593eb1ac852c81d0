"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod
from typing import Any


class ISpotifyClient(ABC):
    """Interface for the Spotify Web API calls the aggregation needs.

    Implementations translate transport failures into AuthError,
    PlaylistFetchError and ArtistFetchError respectively.
    """

    @abstractmethod
    async def grant_client_credentials(self) -> dict[str, Any]:
        """Request an app-only access token.

        Returns:
            Token response with access_token and expires_in (seconds)
        """
        pass

    @abstractmethod
    async def get_playlist(
        self, owner_id: str | None, playlist_id: str, access_token: str
    ) -> dict[str, Any]:
        """Get a playlist including its first page of tracks."""
        pass

    @abstractmethod
    async def get_several_artists(
        self, artist_ids: list[str], access_token: str
    ) -> list[dict[str, Any]]:
        """Get full artist objects for the given ids in one request."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP resources."""
        pass
