"""Spotify HTTP client implementation with the client-credentials flow."""

import logging
from typing import Any, cast

import httpx

from bandstosee.config.settings import SpotifySettings
from bandstosee.domain.exceptions import (
    ArtistFetchError,
    AuthError,
    ConfigurationError,
    PlaylistFetchError,
)
from bandstosee.domain.ports import ISpotifyClient

logger = logging.getLogger(__name__)


def _status_of(exc: httpx.HTTPError) -> int | None:
    """Pull the HTTP status out of an httpx error, if there was a response."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


class SpotifyClient(ISpotifyClient):
    """HTTP client for the Spotify Web API (app-only access)."""

    TOKEN_URL = "https://accounts.spotify.com/api/token"  # nosec B105 - this is a public API endpoint URL, not a password
    API_BASE_URL = "https://api.spotify.com/v1"
    MAX_ARTISTS_PER_REQUEST = 50

    # The httpx.AsyncClient is built on first use in _get_client(), inside the running loop
    # of whoever calls us. Building it here would bind it to whatever loop imported the app.
    def __init__(self, settings: SpotifySettings) -> None:
        self.settings = settings
        self._client: httpx.AsyncClient | None = None

    # Every call gets the same bounded timeout from settings. No retries here: a failure
    # goes straight back to the caller.
    async def _get_client(self) -> httpx.AsyncClient:
        """Return the shared AsyncClient, creating it on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.request_timeout)
        return self._client

    # The lifespan calls this on shutdown. A second call is a no-op.
    async def close(self) -> None:
        """Release the pooled connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _api_request(
        self,
        method: str,
        url: str,
        access_token: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated API request and decode the JSON body.

        Args:
            method: HTTP verb
            url: Absolute Spotify API URL
            access_token: Bearer token from the TokenManager
            params: Query string parameters

        Returns:
            Decoded JSON body

        Raises:
            httpx.HTTPError: On transport errors and non-2xx responses
        """
        client = await self._get_client()
        response = await client.request(
            method=method,
            url=url,
            params=params,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    # Yo future me, this is the app-only token: no user, no refresh token, no scopes.
    # Spotify wants the client id/secret as HTTP Basic auth and the body form-urlencoded
    # (httpx does that for data=). The token lives ~3600s and then you just ask again.
    async def grant_client_credentials(self) -> dict[str, Any]:
        """
        Request an access token with the client-credentials grant.

        Returns:
            Token response with access_token, token_type, expires_in (seconds)

        Raises:
            ConfigurationError: If client id or secret is missing
            AuthError: If the grant fails or the token response is malformed
        """
        if not self.settings.is_configured:
            raise ConfigurationError(
                "SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET must be configured. "
                "Get credentials at https://developer.spotify.com/dashboard"
            )

        client = await self._get_client()
        try:
            response = await client.post(
                self.TOKEN_URL,
                data={"grant_type": "client_credentials"},
                auth=httpx.BasicAuth(self.settings.client_id, self.settings.client_secret),
            )
            response.raise_for_status()
            token_data = cast(dict[str, Any], response.json())
        except httpx.HTTPError as e:
            raise AuthError(
                f"Spotify token request failed: {e}", http_status=_status_of(e)
            ) from e
        except ValueError as e:
            raise AuthError(f"Spotify token response is not JSON: {e}") from e

        if "access_token" not in token_data or "expires_in" not in token_data:
            raise AuthError("Spotify token response is missing access_token/expires_in")
        expires_in = token_data["expires_in"]
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise AuthError(f"Spotify token expires_in is not an integer: {expires_in!r}")
        return token_data

    # Listen up, this fetches a playlist with ALL its details, but Spotify paginates the
    # track list after 100 items and we do NOT follow tracks.next. The legacy
    # /users/{owner}/playlists/{id} path is used when an owner is configured.
    async def get_playlist(
        self, owner_id: str | None, playlist_id: str, access_token: str
    ) -> dict[str, Any]:
        """
        Fetch one playlist, including the first page of its tracks.

        Args:
            owner_id: Spotify user ID that owns the playlist (optional)
            playlist_id: Spotify playlist ID
            access_token: Bearer token

        Returns:
            Playlist information including the first page of tracks

        Raises:
            PlaylistFetchError: If the request fails
        """
        if owner_id:
            url = f"{self.API_BASE_URL}/users/{owner_id}/playlists/{playlist_id}"
        else:
            url = f"{self.API_BASE_URL}/playlists/{playlist_id}"

        try:
            return await self._api_request("GET", url, access_token)
        except httpx.HTTPError as e:
            raise PlaylistFetchError(
                f"Failed to fetch playlist {playlist_id}: {e}",
                http_status=_status_of(e),
            ) from e
        except ValueError as e:
            raise PlaylistFetchError(
                f"Playlist {playlist_id} response is not JSON: {e}"
            ) from e

    async def get_several_artists(
        self, artist_ids: list[str], access_token: str
    ) -> list[dict[str, Any]]:
        """
        Fetch full artist objects for up to 50 ids with one /v1/artists call.

        Args:
            artist_ids: Spotify artist ids, at most 50
            access_token: Bearer token

        Returns:
            Artist objects in response order, without nulls

        Raises:
            ValueError: If more than 50 ids are passed
            ArtistFetchError: If the request fails
        """
        # Silently truncating to 50 would drop artists and break the join later.
        if len(artist_ids) > self.MAX_ARTISTS_PER_REQUEST:
            raise ValueError(
                f"At most {self.MAX_ARTISTS_PER_REQUEST} artist ids per request, "
                f"got {len(artist_ids)}"
            )

        try:
            result = await self._api_request(
                "GET",
                f"{self.API_BASE_URL}/artists",
                access_token,
                params={"ids": ",".join(artist_ids)},
            )
        except httpx.HTTPError as e:
            raise ArtistFetchError(
                f"Request for artists {artist_ids} failed: {e}",
                http_status=_status_of(e),
            ) from e
        except ValueError as e:
            raise ArtistFetchError(f"Artists response is not JSON: {e}") from e

        # Unknown ids come back as null; the batch fetcher reports them as missing.
        artists = result.get("artists") or []
        return [artist for artist in artists if artist is not None]

    async def __aenter__(self) -> "SpotifyClient":
        """Enter: the HTTP client is still created lazily."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit: close the HTTP client."""
        await self.close()
