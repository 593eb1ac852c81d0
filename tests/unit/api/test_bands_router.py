"""Tests for the /userdata endpoint and error mapping."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from bandstosee.api.dependencies import get_playlist_aggregator
from bandstosee.api.exception_handlers import GENERIC_ERROR_MESSAGE
from bandstosee.application.services import PlaylistAggregator
from bandstosee.domain.dtos import BandToSee, TrackRecord
from bandstosee.domain.exceptions import (
    ArtistFetchError,
    AuthError,
    PlaylistFetchError,
)
from bandstosee.main import create_app


@pytest.fixture
def aggregator() -> MagicMock:
    mock = MagicMock(spec=PlaylistAggregator)
    mock.get_bands_to_see = AsyncMock(
        return_value=[
            BandToSee(
                track=TrackRecord(
                    title="Song 1",
                    source_track_id="t1",
                    primary_artist_id="A",
                    external_urls={"spotify": "https://open.spotify.com/track/t1"},
                ),
                artist={"id": "A", "name": "Artist A"},
            ),
            BandToSee(
                track=TrackRecord(title="Song 2", source_track_id="t2", primary_artist_id="B"),
                artist={"id": "B", "name": "Artist B"},
            ),
        ]
    )
    return mock


@pytest.fixture
def app(aggregator: MagicMock) -> FastAPI:
    app = create_app(app_lifespan=None)
    app.dependency_overrides[get_playlist_aggregator] = lambda: aggregator
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestGetBandsToSee:
    """Test GET /userdata."""

    def test_returns_bands_in_order(self, client: TestClient) -> None:
        response = client.get("/userdata")

        assert response.status_code == 200
        assert response.json() == [
            {
                "trackTitle": "Song 1",
                "sourceTrackID": "t1",
                "external_urls": {"spotify": "https://open.spotify.com/track/t1"},
                "primaryArtistID": "A",
                "artist": {"id": "A", "name": "Artist A"},
            },
            {
                "trackTitle": "Song 2",
                "sourceTrackID": "t2",
                "external_urls": {},
                "primaryArtistID": "B",
                "artist": {"id": "B", "name": "Artist B"},
            },
        ]

    @pytest.mark.parametrize(
        "error",
        [
            AuthError("grant failed", http_status=400),
            PlaylistFetchError("playlist gone", http_status=404),
            ArtistFetchError("batch failed"),
        ],
    )
    def test_any_core_failure_is_generic_500(
        self, client: TestClient, aggregator: MagicMock, error: Exception
    ) -> None:
        aggregator.get_bands_to_see.side_effect = error

        response = client.get("/userdata")

        assert response.status_code == 500
        assert response.json() == {"Err": GENERIC_ERROR_MESSAGE}

    def test_unexpected_error_uses_same_body(
        self, app: FastAPI, aggregator: MagicMock
    ) -> None:
        aggregator.get_bands_to_see.side_effect = KeyError("artists")

        response = TestClient(app, raise_server_exceptions=False).get("/userdata")

        assert response.status_code == 500
        assert response.json() == {"Err": GENERIC_ERROR_MESSAGE}

    def test_response_has_correlation_id(self, client: TestClient) -> None:
        response = client.get("/userdata", headers={"X-Correlation-ID": "req-1"})
        assert response.headers["X-Correlation-ID"] == "req-1"
