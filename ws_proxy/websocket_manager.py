"""
WebSocket connection manager for the ElevenLabs proxy.

This module accepts client WebSocket connections, validates the request and the
process configuration, and hands every accepted connection to its own
``RelaySession``. Requests that cannot be served are answered with a single
structured error frame and closed before any upstream work is started.
"""

import logging
from typing import Dict, Optional

from fastapi import WebSocket

from ws_proxy.config.constants import (
    CLOSE_INTERNAL_ERROR,
    CLOSE_POLICY_VIOLATION,
    LOG_TAG,
    LOGGER_NAME,
)
from ws_proxy.config.settings import ProxySettings
from ws_proxy.models.message_schemas import ErrorMessage
from ws_proxy.relay.connections import ClientConnection
from ws_proxy.relay.session import RelaySession
from ws_proxy.services.signed_url import SignedUrlFetcher

logger = logging.getLogger(LOGGER_NAME)


class WebSocketManager:
    """Accepts client connections and runs one relay session per connection.

    The manager keeps a registry of live sessions so the health endpoint can
    report how many relays are active. Sessions never share mutable state.
    """

    def __init__(self, settings: ProxySettings, fetcher: Optional[SignedUrlFetcher] = None):
        self.settings = settings
        self.fetcher = fetcher
        self.sessions: Dict[str, RelaySession] = {}

    @property
    def active_sessions(self) -> int:
        return len(self.sessions)

    def create_session(self, client: ClientConnection, agent_id: str) -> RelaySession:
        """Build the relay session for an accepted connection."""
        fetcher = self.fetcher or SignedUrlFetcher(self.settings)
        return RelaySession(client, agent_id, self.settings, fetcher=fetcher)

    async def handle_websocket(self, websocket: WebSocket):
        """Handle a client WebSocket connection throughout its lifecycle.

        Args:
            websocket (WebSocket): The FastAPI WebSocket connection object

        This method:
        1. Accepts the WebSocket connection
        2. Rejects it with 1008 if ``agent_id`` is missing
        3. Rejects it with 1011 if no API key is configured
        4. Otherwise runs a relay session until both sides are closed
        """
        await websocket.accept()
        client = ClientConnection(websocket)

        agent_id = websocket.query_params.get("agent_id")
        if not agent_id:
            logger.warning(f"{LOG_TAG} Rejected connection: missing agent_id")
            await client.send_message(ErrorMessage(message="Missing agent_id"))
            await client.close(CLOSE_POLICY_VIOLATION, "Missing agent_id")
            return

        if not self.settings.api_key_configured:
            logger.error(f"{LOG_TAG} Rejected connection: ELEVENLABS_API_KEY not set")
            await client.send_message(ErrorMessage(message="API key not configured"))
            await client.close(CLOSE_INTERNAL_ERROR, "No API key")
            return

        logger.info(f"{LOG_TAG} New connection for agent: {agent_id}")
        session = self.create_session(client, agent_id)
        self.sessions[session.session_id] = session
        try:
            await session.run()
        finally:
            self.sessions.pop(session.session_id, None)
