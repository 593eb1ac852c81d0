"""Application settings loaded from environment variables and .env."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SpotifySettings(BaseSettings):
    """Spotify Web API credentials and request tuning."""

    model_config = SettingsConfigDict(
        env_prefix="SPOTIFY_", env_file=".env", extra="ignore"
    )

    client_id: str = Field(default="", description="Spotify app client ID")
    client_secret: str = Field(default="", description="Spotify app client secret")
    request_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for every Spotify call"
    )
    # Hey future me - the margin is SECONDS, same unit as Spotify's expires_in.
    # We treat the token as dead this many seconds before Spotify does, so a request
    # started right before expiry doesn't land with a stale bearer token.
    token_safety_margin_seconds: int = Field(
        default=30, ge=0, description="Seconds subtracted from the token lifetime"
    )
    # /v1/artists accepts up to 50 ids per call. We default to 2 because that's
    # what the playlist service has always used; raise it if you have big playlists.
    artist_batch_size: int = Field(
        default=2, ge=1, le=50, description="Artist ids per /v1/artists call"
    )

    @property
    def is_configured(self) -> bool:
        """Check if client credentials are set."""
        return bool(self.client_id.strip() and self.client_secret.strip())


class SourcePlaylistSettings(BaseSettings):
    """The playlist holding the bands to see."""

    model_config = SettingsConfigDict(
        env_prefix="SOURCE_PLAYLIST_", env_file=".env", extra="ignore"
    )

    owner_id: str | None = Field(
        default=None, description="Spotify user ID owning the playlist"
    )
    playlist_id: str = Field(default="", description="Spotify playlist ID")


class ObservabilitySettings(BaseSettings):
    """Logging output settings."""

    model_config = SettingsConfigDict(
        env_prefix="OBSERVABILITY_", env_file=".env", extra="ignore"
    )

    log_json_format: bool = Field(
        default=False, description="Emit JSON logs (recommended for production)"
    )


class Settings(BaseSettings):
    """Top-level application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = Field(default="bandstosee")
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")  # nosec B104 - container default
    port: int = Field(default=8000, ge=1, le=65535)

    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    source_playlist: SourcePlaylistSettings = Field(
        default_factory=SourcePlaylistSettings
    )
    observability: ObservabilitySettings = Field(
        default_factory=ObservabilitySettings
    )


# Cached so every Depends(get_settings) shares one instance. Tests that tweak env
# vars must call get_settings.cache_clear() afterwards.
@lru_cache
def get_settings() -> Settings:
    """Get the cached application settings."""
    return Settings()
