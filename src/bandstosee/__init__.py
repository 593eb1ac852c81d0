"""Bands To See API: Spotify playlist bands enriched with artist data."""

__version__ = "1.0.0"
