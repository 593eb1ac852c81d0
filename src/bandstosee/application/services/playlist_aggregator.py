"""Bands-to-see aggregation: playlist tracks joined with their artists.

Flow:
1. TokenManager.ensure_valid()      -> access token (AuthError)
2. Spotify get_playlist()           -> playlist JSON (PlaylistFetchError)
3. build bands + ArtistIndex        -> local only
4. ArtistBatchFetcher               -> artist objects (ArtistFetchError)
5. join artists onto bands          -> local only

Only the FIRST artist of a track is resolved. Features/collabs are ignored on
purpose; don't "fix" that without changing the response contract.
"""

import logging
from typing import Any

from bandstosee.application.services.artist_batch_fetcher import ArtistBatchFetcher
from bandstosee.application.services.token_manager import TokenManager
from bandstosee.domain.dtos import ArtistIndex, ArtistRecord, BandToSee, TrackRecord
from bandstosee.domain.exceptions import PlaylistFetchError
from bandstosee.domain.ports import ISpotifyClient

logger = logging.getLogger(__name__)


def build_bands(
    playlist_items: list[dict[str, Any]],
) -> tuple[list[BandToSee], ArtistIndex]:
    """Turn playlist items into bands (no artist yet) plus the artist index.

    Every item yields exactly one band. An item without a track (removed or
    unavailable) or whose first artist has no id (local files) can't be joined,
    so the whole playlist is rejected.

    Args:
        playlist_items: The playlist's tracks.items array

    Returns:
        Bands in playlist order, and artist id -> band positions

    Raises:
        PlaylistFetchError: If an item has no track or no first-artist id
    """
    bands: list[BandToSee] = []
    index: ArtistIndex = {}

    for item_number, item in enumerate(playlist_items):
        track = item.get("track")
        if not track:
            raise PlaylistFetchError(f"Playlist item {item_number} has no track")

        artists = track.get("artists") or []
        primary_artist_id = artists[0].get("id") if artists else None
        if not primary_artist_id:
            raise PlaylistFetchError(
                f"Playlist item {item_number} ({track.get('name')}) has no artist id"
            )

        record = TrackRecord(
            title=track.get("name", ""),
            source_track_id=track.get("id") or "",
            primary_artist_id=primary_artist_id,
            external_urls=dict(track.get("external_urls") or {}),
        )
        index.setdefault(primary_artist_id, []).append(len(bands))
        bands.append(BandToSee(track=record))

    return bands, index


def attach_artists(
    bands: list[BandToSee], index: ArtistIndex, artists: dict[str, ArtistRecord]
) -> None:
    """Set the artist of every band from the resolved artist map (in place)."""
    for artist_id, positions in index.items():
        for position in positions:
            bands[position].artist = artists[artist_id]


class PlaylistAggregator:
    """Builds the bands-to-see list for the configured source playlist."""

    def __init__(
        self,
        spotify_client: ISpotifyClient,
        token_manager: TokenManager,
        artist_fetcher: ArtistBatchFetcher,
        playlist_id: str,
        owner_id: str | None = None,
        artist_batch_size: int = 2,
    ) -> None:
        """Initialize aggregator.

        Args:
            spotify_client: Client for the playlist request
            token_manager: Source of valid access tokens
            artist_fetcher: Batched artist resolver
            playlist_id: Spotify ID of the source playlist
            owner_id: Spotify user ID owning the playlist (optional)
            artist_batch_size: Artist ids per /v1/artists request
        """
        self._client = spotify_client
        self._token_manager = token_manager
        self._artist_fetcher = artist_fetcher
        self.playlist_id = playlist_id
        self.owner_id = owner_id
        self.artist_batch_size = artist_batch_size

    async def get_bands_to_see(self) -> list[BandToSee]:
        """Get every band on the source playlist together with its artist.

        Returns:
            Bands in playlist order, each with its artist attached

        Raises:
            AuthError: If no valid token could be obtained
            PlaylistFetchError: If the playlist can't be fetched or is malformed
            ArtistFetchError: If any artist lookup fails
        """
        try:
            access_token = await self._token_manager.ensure_valid()
        except Exception:
            logger.error("Unable to get bands to see as failed to authenticate with Spotify")
            raise

        playlist = await self._client.get_playlist(
            self.owner_id, self.playlist_id, access_token
        )
        tracks = playlist.get("tracks")
        items = tracks.get("items") if isinstance(tracks, dict) else None
        if not isinstance(items, list):
            raise PlaylistFetchError(
                f"Playlist {self.playlist_id} response has no tracks.items"
            )

        bands, index = build_bands(items)

        try:
            artists = await self._artist_fetcher.fetch_artists(
                list(index), self.artist_batch_size, access_token
            )
        except Exception:
            logger.error("Unable to get artist data for tracks")
            raise

        attach_artists(bands, index, artists)
        logger.info(
            "Built %d bands to see from playlist %s (%d unique artists)",
            len(bands),
            self.playlist_id,
            len(index),
        )
        return bands
