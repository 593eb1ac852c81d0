"""Application layer: services orchestrating the domain and Spotify."""
