"""
Signed URL client for the ElevenLabs Conversational AI API.

Exchanges an agent identifier and the process-wide API key for a short-lived,
pre-authenticated WebSocket URL. The API key only ever travels in the
``xi-api-key`` request header and is never exposed to relay clients.
"""

import logging
from typing import Optional

import httpx

from ws_proxy.config.constants import API_KEY_HEADER, LOG_TAG, LOGGER_NAME, SIGNED_URL_PATH
from ws_proxy.config.settings import ProxySettings
from ws_proxy.errors import SignedUrlAuthError, SignedUrlError

logger = logging.getLogger(LOGGER_NAME)


class SignedUrlFetcher:
    """
    Fetches signed conversation URLs from ElevenLabs.

    Each call performs exactly one HTTP GET, bounded by the configured timeout.
    """

    def __init__(self, settings: ProxySettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the fetcher.

        Args:
            settings: Proxy settings providing the API key, base URL and timeout
            transport: Optional httpx transport, used to stub the API in tests
        """
        self.settings = settings
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.settings.api_base_url}{SIGNED_URL_PATH}"

    async def fetch(self, agent_id: str) -> str:
        """
        Request a signed URL for an agent.

        Args:
            agent_id: The ElevenLabs agent identifier supplied by the client

        Returns:
            str: The signed WebSocket URL

        Raises:
            SignedUrlAuthError: The endpoint answered with a non-success status
            SignedUrlError: The request failed, timed out or returned an unusable body
        """
        if not self.settings.api_key:
            raise SignedUrlError("API key not configured")

        headers = {API_KEY_HEADER: self.settings.api_key}
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.signed_url_timeout, transport=self._transport
            ) as client:
                response = await client.get(
                    self.endpoint, params={"agent_id": agent_id}, headers=headers
                )
        except httpx.TimeoutException as e:
            logger.error(f"{LOG_TAG} Signed URL request timed out for agent {agent_id}")
            raise SignedUrlError(
                f"Signed URL request timed out after {self.settings.signed_url_timeout:g}s"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{LOG_TAG} Signed URL request failed: {e}")
            raise SignedUrlError(f"Signed URL request failed: {e}") from e

        if not response.is_success:
            body = response.text
            logger.error(f"{LOG_TAG} Signed URL error: {response.status_code} {body}")
            raise SignedUrlAuthError(response.status_code, body)

        try:
            payload = response.json()
        except ValueError as e:
            raise SignedUrlError(f"Invalid signed URL response: {e}") from e

        signed_url = payload.get("signed_url") if isinstance(payload, dict) else None
        if not isinstance(signed_url, str) or not signed_url:
            raise SignedUrlError("Signed URL missing from response")

        if not signed_url.startswith("wss://"):
            logger.warning(f"{LOG_TAG} Signed URL does not use wss://")
        return signed_url
