"""Tests for the Spotify client implementation."""

import base64
from collections.abc import Callable
from urllib.parse import parse_qs

import httpx
import pytest

from bandstosee.config.settings import SpotifySettings
from bandstosee.domain.exceptions import (
    ArtistFetchError,
    AuthError,
    ConfigurationError,
    PlaylistFetchError,
)
from bandstosee.infrastructure.integrations.spotify_client import SpotifyClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def spotify_settings() -> SpotifySettings:
    """Create Spotify settings for testing."""
    return SpotifySettings(client_id="test-id", client_secret="test-secret")


@pytest.fixture
def spotify_client(spotify_settings: SpotifySettings) -> SpotifyClient:
    """Create Spotify client for testing."""
    return SpotifyClient(spotify_settings)


def use_transport(client: SpotifyClient, handler: Handler) -> list[httpx.Request]:
    """Route the client's HTTP traffic to ``handler`` and record the requests."""
    requests: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client._client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
    return requests


class TestSpotifyClientInit:
    """Test Spotify client initialization."""

    def test_init_with_settings(self, spotify_settings: SpotifySettings) -> None:
        client = SpotifyClient(spotify_settings)
        assert client.settings == spotify_settings
        assert client._client is None

    async def test_lazy_client_uses_configured_timeout(self) -> None:
        client = SpotifyClient(
            SpotifySettings(client_id="id", client_secret="secret", request_timeout=5.0)
        )

        http_client = await client._get_client()

        assert http_client.timeout.read == 5.0
        await client.close()

    async def test_close_and_context_manager(self, spotify_client: SpotifyClient) -> None:
        async with spotify_client as client:
            await client._get_client()
            assert client._client is not None

        assert spotify_client._client is None


class TestGrantClientCredentials:
    """Test the client-credentials token request."""

    async def test_grant_success(self, spotify_client: SpotifyClient) -> None:
        requests = use_transport(
            spotify_client,
            lambda request: httpx.Response(
                200,
                json={"access_token": "tok", "token_type": "Bearer", "expires_in": 3600},
            ),
        )

        result = await spotify_client.grant_client_credentials()

        assert result["access_token"] == "tok"
        assert result["expires_in"] == 3600
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == SpotifyClient.TOKEN_URL
        expected_auth = base64.b64encode(b"test-id:test-secret").decode()
        assert request.headers["Authorization"] == f"Basic {expected_auth}"
        assert parse_qs(request.content.decode()) == {"grant_type": ["client_credentials"]}

    async def test_grant_rejected(self, spotify_client: SpotifyClient) -> None:
        use_transport(
            spotify_client,
            lambda request: httpx.Response(400, json={"error": "invalid_client"}),
        )

        with pytest.raises(AuthError) as exc_info:
            await spotify_client.grant_client_credentials()

        assert exc_info.value.http_status == 400

    async def test_grant_connection_error(self, spotify_client: SpotifyClient) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("All connection attempts failed", request=request)

        use_transport(spotify_client, refuse)

        with pytest.raises(AuthError) as exc_info:
            await spotify_client.grant_client_credentials()

        assert exc_info.value.http_status is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_grant_response_without_token(
        self, spotify_client: SpotifyClient
    ) -> None:
        use_transport(spotify_client, lambda request: httpx.Response(200, json={}))

        with pytest.raises(AuthError):
            await spotify_client.grant_client_credentials()

    @pytest.mark.parametrize("expires_in", ["soon", "3600", None, 3600.5, True])
    async def test_grant_rejects_non_integer_expiry(
        self, spotify_client: SpotifyClient, expires_in: object
    ) -> None:
        use_transport(
            spotify_client,
            lambda request: httpx.Response(
                200, json={"access_token": "tok", "expires_in": expires_in}
            ),
        )

        with pytest.raises(AuthError, match="expires_in"):
            await spotify_client.grant_client_credentials()

    async def test_grant_requires_credentials(self) -> None:
        client = SpotifyClient(SpotifySettings(client_id="", client_secret=""))

        with pytest.raises(ConfigurationError):
            await client.grant_client_credentials()


class TestGetPlaylist:
    """Test playlist retrieval."""

    async def test_owner_path_and_bearer_token(
        self, spotify_client: SpotifyClient
    ) -> None:
        requests = use_transport(
            spotify_client,
            lambda request: httpx.Response(200, json={"id": "pl", "tracks": {"items": []}}),
        )

        result = await spotify_client.get_playlist("owner", "pl", "tok")

        assert result["id"] == "pl"
        assert requests[0].url.path == "/v1/users/owner/playlists/pl"
        assert requests[0].headers["Authorization"] == "Bearer tok"

    async def test_playlist_path_without_owner(
        self, spotify_client: SpotifyClient
    ) -> None:
        requests = use_transport(
            spotify_client,
            lambda request: httpx.Response(200, json={"id": "pl"}),
        )

        await spotify_client.get_playlist(None, "pl", "tok")

        assert requests[0].url.path == "/v1/playlists/pl"

    async def test_playlist_not_found(self, spotify_client: SpotifyClient) -> None:
        use_transport(
            spotify_client,
            lambda request: httpx.Response(404, json={"error": {"status": 404}}),
        )

        with pytest.raises(PlaylistFetchError) as exc_info:
            await spotify_client.get_playlist(None, "missing", "tok")

        assert exc_info.value.http_status == 404


class TestGetSeveralArtists:
    """Test batch artist lookup."""

    async def test_ids_joined_and_nulls_filtered(
        self, spotify_client: SpotifyClient
    ) -> None:
        requests = use_transport(
            spotify_client,
            lambda request: httpx.Response(
                200, json={"artists": [{"id": "a", "name": "A"}, None]}
            ),
        )

        artists = await spotify_client.get_several_artists(["a", "gone"], "tok")

        assert artists == [{"id": "a", "name": "A"}]
        assert requests[0].url.path == "/v1/artists"
        assert requests[0].url.params["ids"] == "a,gone"

    async def test_server_error(self, spotify_client: SpotifyClient) -> None:
        use_transport(spotify_client, lambda request: httpx.Response(503))

        with pytest.raises(ArtistFetchError) as exc_info:
            await spotify_client.get_several_artists(["a"], "tok")

        assert exc_info.value.http_status == 503

    async def test_more_than_fifty_ids_rejected(
        self, spotify_client: SpotifyClient
    ) -> None:
        with pytest.raises(ValueError):
            await spotify_client.get_several_artists(
                [f"id-{i}" for i in range(51)], "tok"
            )
