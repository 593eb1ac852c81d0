"""API schemas for the bands-to-see endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bandstosee.domain.dtos import BandToSee


class BandToSeeResponse(BaseModel):
    """One band: the playlist track plus the full Spotify artist object."""

    model_config = ConfigDict(populate_by_name=True)

    track_title: str = Field(..., alias="trackTitle", description="Track name")
    source_track_id: str = Field(
        ..., alias="sourceTrackID", description="Spotify track ID"
    )
    external_urls: dict[str, str] = Field(
        default_factory=dict, description="Provider name to track URL"
    )
    primary_artist_id: str = Field(
        ..., alias="primaryArtistID", description="Spotify ID of the first artist"
    )
    artist: dict[str, Any] = Field(..., description="Spotify artist object")

    @classmethod
    def from_dto(cls, band: BandToSee) -> "BandToSeeResponse":
        """Build the response item from a joined BandToSee.

        An unjoined band (artist still None) fails validation.
        """
        return cls(
            track_title=band.track.title,
            source_track_id=band.track.source_track_id,
            external_urls=band.track.external_urls,
            primary_artist_id=band.track.primary_artist_id,
            artist=band.artist,  # type: ignore[arg-type]
        )


class ErrorResponse(BaseModel):
    """Generic failure body. Deliberately says nothing about what failed."""

    Err: str = Field(..., description="Human readable error message")
