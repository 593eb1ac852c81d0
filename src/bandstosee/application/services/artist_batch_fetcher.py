"""Batched, concurrent artist lookups against Spotify."""

import asyncio
import logging
from collections.abc import Iterator, Sequence

from bandstosee.domain.dtos import ArtistRecord
from bandstosee.domain.exceptions import ArtistFetchError
from bandstosee.domain.ports import ISpotifyClient

logger = logging.getLogger(__name__)


def chunked(items: Sequence[str], size: int) -> Iterator[list[str]]:
    """Yield contiguous slices of at most ``size`` items, in order."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


class ArtistBatchFetcher:
    """Fetch many artists via several small /v1/artists calls fired at once.

    Hey future me - this is ALL-OR-NOTHING. If one batch blows up, the whole fetch
    fails with ArtistFetchError, even though the other batches may have come back
    fine. A band list with holes in it is worse than an error.
    """

    def __init__(self, spotify_client: ISpotifyClient) -> None:
        self._client = spotify_client

    async def fetch_artists(
        self, ids: Sequence[str], batch_size: int, access_token: str
    ) -> dict[str, ArtistRecord]:
        """Resolve artist ids to full artist objects.

        Args:
            ids: Unique Spotify artist ids (not modified)
            batch_size: Max ids per request
            access_token: Bearer token, already validated by the caller

        Returns:
            Mapping of artist id to artist object, one entry per requested id

        Raises:
            ValueError: If batch_size is not positive
            ArtistFetchError: If any batch fails or an id is not returned
        """
        batches = list(chunked(ids, batch_size))
        if not batches:
            return {}

        logger.debug(
            "Fetching %d artists in %d batches of up to %d",
            len(ids),
            len(batches),
            batch_size,
        )

        # return_exceptions=True so we wait for EVERY batch before deciding, instead of
        # bailing on the first error and leaving the others running unobserved.
        results = await asyncio.gather(
            *(self._client.get_several_artists(batch, access_token) for batch in batches),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error(
                "%d of %d artist requests failed", len(failures), len(batches)
            )
            first = failures[0]
            if isinstance(first, ArtistFetchError):
                raise first
            raise ArtistFetchError(f"Artist request failed: {first}") from first

        artists: dict[str, ArtistRecord] = {}
        for batch_artists in results:
            for artist in batch_artists:  # type: ignore[union-attr]
                artists[artist["id"]] = artist

        missing = [artist_id for artist_id in ids if artist_id not in artists]
        if missing:
            raise ArtistFetchError(f"Spotify returned no data for artists {missing}")

        logger.info("All artist data received successfully (%d artists)", len(artists))
        return artists
