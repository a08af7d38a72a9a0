import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx

from constants import (
    CLIENT_ID,
    DEFAULT_EXPIRES_IN,
    NULL_SENTINEL,
    OAUTH_TOKEN_URL,
    TOKEN_REFRESH_BUFFER_SECONDS,
)
from credentials import CredentialRecord, format_expiry
from errors import TokenRefreshError
from settings import DEFAULT_OAUTH_TIMEOUT

logger = logging.getLogger(__name__)


class OAuthManager:
    """Keeps the hytale-downloader access token fresh via the refresh_token grant"""

    def __init__(
        self,
        timeout: float = DEFAULT_OAUTH_TIMEOUT,
        clock: Callable[[], float] = time.time,
        token_url: str = OAUTH_TOKEN_URL,
    ):
        self.timeout = timeout
        self.clock = clock
        self.token_url = token_url

    def now(self) -> int:
        return int(self.clock())

    @staticmethod
    def is_token_stale(record: CredentialRecord, now: int) -> bool:
        """True when the token expires within the refresh buffer

        Args:
            record: Parsed credential record (expires_at defaults to 0)
            now: Current epoch seconds

        Returns:
            True if the token must be refreshed before use
        """
        return record.expires_at <= now + TOKEN_REFRESH_BUFFER_SECONDS

    @staticmethod
    def _error_reason(payload: Dict[str, Any]) -> str:
        return payload.get("error_description") or payload.get("error") or "Unknown error"

    async def refresh_tokens(self, record: CredentialRecord, now: Optional[int] = None) -> CredentialRecord:
        """Exchange the refresh token for a new token pair

        Args:
            record: The current credential record
            now: Current epoch seconds, taken from the clock if omitted

        Returns:
            A new record with the fresh access token, rotated (or retained)
            refresh token, new expiry and the same branch

        Raises:
            TokenRefreshError: If no refresh token is available, the request
                fails, or the provider does not return an access token
        """
        if now is None:
            now = self.now()

        refresh_token = record.refresh_token
        if not refresh_token or refresh_token == NULL_SENTINEL:
            raise TokenRefreshError("No refresh token available")

        logger.info("Attempting to refresh OAuth tokens...")
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(
                    self.token_url,
                    data={
                        "grant_type": "refresh_token",
                        "client_id": CLIENT_ID,
                        "refresh_token": refresh_token,
                    },
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
            except httpx.HTTPError as e:
                raise TokenRefreshError(f"Failed to refresh token: {e}") from e

        try:
            token_data = response.json()
        except ValueError:
            token_data = None
        if not isinstance(token_data, dict):
            logger.debug(f"Token endpoint returned non-JSON body (status {response.status_code})")
            token_data = {}

        access_token = token_data.get("access_token")
        if not access_token:
            raise TokenRefreshError(f"Failed to refresh token: {self._error_reason(token_data)}")

        # Providers may skip refresh-token rotation
        new_refresh_token = token_data.get("refresh_token") or refresh_token
        expires_in = token_data.get("expires_in")
        if expires_in is None:
            expires_in = DEFAULT_EXPIRES_IN
        try:
            expires_in = int(expires_in)
        except (TypeError, ValueError) as e:
            raise TokenRefreshError(f"Failed to refresh token: invalid expires_in {expires_in!r}") from e

        return CredentialRecord(
            access_token=str(access_token),
            refresh_token=str(new_refresh_token),
            expires_at=now + expires_in,
            branch=record.branch,
        )

    def ensure_fresh_blob(self, blob: str, record: Optional[CredentialRecord] = None) -> str:
        """Return the credential blob, refreshed if its token is near expiry

        A blob whose token is still valid is returned unchanged so it can be
        written out exactly as supplied. Pass record when the blob has
        already been parsed.
        """
        if record is None:
            record = CredentialRecord.from_blob(blob)
        now = self.now()

        if not self.is_token_stale(record, now):
            logger.info(f"Access token still valid (expires at: {format_expiry(record.expires_at)})")
            return blob

        logger.info("Access token expired or expiring soon, refreshing...")
        refreshed = asyncio.run(self.refresh_tokens(record, now=now))
        logger.info(f"Token refreshed successfully (expires at: {format_expiry(refreshed.expires_at)})")
        return refreshed.to_blob()
