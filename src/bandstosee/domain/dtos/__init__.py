"""
Data Transfer Objects for the bands-to-see aggregation.

Hey future me - these are deliberately DUMB carriers. The artist payload stays
the raw Spotify JSON (ArtistRecord) because the endpoint hands it straight to
the caller; we only type the parts we compute ourselves.

Flow: Spotify playlist JSON -> TrackRecord -> BandToSee (+ ArtistRecord) -> API schema
"""

from dataclasses import dataclass, field
from typing import Any

from bandstosee.domain.exceptions import ValidationError

# Raw Spotify artist object, keyed by its "id".
ArtistRecord = dict[str, Any]

# Artist id -> positions in the band list that reference it. An artist can sit on
# several tracks, so the value is a list, in playlist order.
ArtistIndex = dict[str, list[int]]


@dataclass(frozen=True)
class Credential:
    """A Spotify access token and the instant it stops being usable.

    expires_at is a clock value in seconds (same clock the TokenManager uses),
    already reduced by the safety margin.
    """

    access_token: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check whether the credential must not be used at ``now``."""
        return now >= self.expires_at


@dataclass(frozen=True)
class TrackRecord:
    """One playlist track, reduced to what we serve."""

    title: str
    source_track_id: str
    primary_artist_id: str
    external_urls: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate essential fields."""
        if not self.primary_artist_id:
            raise ValidationError("TrackRecord needs a primary artist id")


@dataclass
class BandToSee:
    """A track plus the full artist object of its first artist.

    artist stays None only between building the list and the join step.
    """

    track: TrackRecord
    artist: ArtistRecord | None = None


__all__ = [
    "ArtistIndex",
    "ArtistRecord",
    "BandToSee",
    "Credential",
    "TrackRecord",
]
