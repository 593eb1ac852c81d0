"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, we store message as an attribute so handlers can log it without
    # parsing str(exception). Don't raise this directly - use a specific subclass so
    # callers can catch precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Raised when required configuration is missing or invalid.

    Example:
        raise ConfigurationError("SPOTIFY_CLIENT_ID is not configured")
    """

    pass


class ValidationError(DomainException):
    """Input validation failed.

    Example:
        raise ValidationError("TrackRecord needs a primary artist id")
    """

    pass


class ExternalServiceError(DomainException):
    """Spotify returned an error or could not be reached.

    Carries the HTTP status when there was a response at all (None for
    timeouts and connection errors).
    """

    def __init__(self, message: str, http_status: int | None = None) -> None:
        super().__init__(message)
        self.http_status = http_status


class AuthError(ExternalServiceError):
    """The client-credentials grant failed.

    Example:
        raise AuthError("Spotify token request failed: 400", http_status=400)
    """

    pass


class PlaylistFetchError(ExternalServiceError):
    """The source playlist could not be retrieved or is malformed."""

    pass


class ArtistFetchError(ExternalServiceError):
    """One or more artist batch requests failed.

    Also raised when Spotify answers but leaves requested artists out, since a
    band without its artist is never returned.
    """

    pass


__all__ = [
    "ArtistFetchError",
    "AuthError",
    "ConfigurationError",
    "DomainException",
    "ExternalServiceError",
    "PlaylistFetchError",
    "ValidationError",
]
