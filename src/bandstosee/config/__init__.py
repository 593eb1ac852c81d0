"""Configuration module for bandstosee."""

from .settings import (
    ObservabilitySettings,
    Settings,
    SourcePlaylistSettings,
    SpotifySettings,
    get_settings,
)

__all__ = [
    "ObservabilitySettings",
    "Settings",
    "SourcePlaylistSettings",
    "SpotifySettings",
    "get_settings",
]
