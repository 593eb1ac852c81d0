"""Application services."""

from bandstosee.application.services.artist_batch_fetcher import (
    ArtistBatchFetcher,
    chunked,
)
from bandstosee.application.services.playlist_aggregator import PlaylistAggregator
from bandstosee.application.services.token_manager import TokenManager

__all__ = [
    "ArtistBatchFetcher",
    "PlaylistAggregator",
    "TokenManager",
    "chunked",
]
