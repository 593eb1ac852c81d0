"""Infrastructure layer: Spotify client, logging and app lifecycle."""
