"""Spotify app token lifecycle.

Hey future me - this is the ONLY owner of the access token. Nobody else writes it.
There's no background timer: expiry is noticed lazily the next time someone calls
ensure_valid(). States are simply Unset (no credential yet), Valid and Expired;
both Unset and Expired go through refresh().

Concurrency: several requests can hit an expired token at the same moment. Instead
of each one firing its own grant, they all await ONE shared refresh task.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from bandstosee.domain.dtos import Credential
from bandstosee.domain.ports import ISpotifyClient

logger = logging.getLogger(__name__)


class TokenManager:
    """Holds the current Credential and refreshes it on demand."""

    DEFAULT_SAFETY_MARGIN_SECONDS = 30

    def __init__(
        self,
        spotify_client: ISpotifyClient,
        safety_margin_seconds: int = DEFAULT_SAFETY_MARGIN_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize token manager.

        Args:
            spotify_client: Client used for the client-credentials grant
            safety_margin_seconds: Seconds to cut off the granted lifetime
            clock: Returns "now" in seconds (injectable for tests)
        """
        self._client = spotify_client
        self._safety_margin = safety_margin_seconds
        self._clock = clock
        self._credential: Credential | None = None
        self._refresh_task: asyncio.Task[Credential] | None = None

    @property
    def credential(self) -> Credential | None:
        """Current credential (may be expired), or None before the first grant."""
        return self._credential

    def is_valid(self) -> bool:
        """Check if a usable credential is held right now."""
        return self._credential is not None and not self._credential.is_expired(
            self._clock()
        )

    async def ensure_valid(self) -> str:
        """Return a usable access token, refreshing first if needed.

        Returns:
            Access token valid at the time of the call

        Raises:
            AuthError: If a refresh was needed and failed
        """
        credential = self._credential
        if credential is not None and not credential.is_expired(self._clock()):
            return credential.access_token

        if credential is None:
            logger.debug("No Spotify token yet, requesting one")
        else:
            logger.info("Spotify token expired, refreshing")

        credential = await self.refresh()
        return credential.access_token

    async def refresh(self) -> Credential:
        """Request a new client-credentials grant and install it.

        Concurrent callers share a single in-flight grant. Cancelling one
        caller does not cancel the grant for the others.

        Returns:
            The newly installed credential

        Raises:
            AuthError: If the grant fails; the previous credential is kept
        """
        if self._refresh_task is None:
            self._refresh_task = asyncio.create_task(self._grant())
            self._refresh_task.add_done_callback(self._clear_refresh_task)
        return await asyncio.shield(self._refresh_task)

    def _clear_refresh_task(self, task: "asyncio.Task[Credential]") -> None:
        if self._refresh_task is task:
            self._refresh_task = None

    async def _grant(self) -> Credential:
        try:
            token_data = await self._client.grant_client_credentials()
        except Exception:
            logger.error("Something went wrong when retrieving a Spotify access token")
            raise

        expires_in = int(token_data["expires_in"])
        lifetime = max(expires_in - self._safety_margin, 0)
        credential = Credential(
            access_token=str(token_data["access_token"]),
            expires_at=self._clock() + lifetime,
        )
        self._credential = credential

        # Never log the token itself.
        logger.info(
            "Spotify access token refreshed (expires in %ds, treated as %ds)",
            expires_in,
            lifetime,
        )
        return credential
