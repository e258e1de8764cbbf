"""
Connection handles for the two sides of a relay session.

``ClientConnection`` wraps the accepted FastAPI WebSocket and ``UpstreamConnection``
wraps the ``websockets`` client connection to ElevenLabs. Both track a
``ConnectionState`` so the session never sends to a socket that is not open,
and both make ``close()`` idempotent.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional

import websockets
from fastapi import WebSocket
from websockets.exceptions import ConnectionClosed

from ws_proxy.config.constants import (
    CLOSE_NORMAL,
    LOG_TAG,
    LOGGER_NAME,
    RESERVED_CLOSE_CODES,
)
from ws_proxy.errors import UpstreamConnectTimeout
from ws_proxy.models.frames import BinaryFrame, Frame, frame_from_message
from ws_proxy.models.message_schemas import ControlMessage

logger = logging.getLogger(LOGGER_NAME)

# WebSocket configuration for the upstream connection
WS_MAX_SIZE = 16 * 1024 * 1024  # 16MB - large enough for audio chunks


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"
    ERRORED = "errored"


TERMINAL_STATES = (ConnectionState.CLOSED, ConnectionState.ERRORED)


def wire_close_code(code: Optional[int]) -> int:
    """Return a close code that may legally be sent in a close frame."""
    if code is None or code in RESERVED_CLOSE_CODES or not 1000 <= code <= 4999:
        return CLOSE_NORMAL
    return code


class ClientConnection:
    """The client-facing side of a relay session."""

    def __init__(self, websocket: WebSocket):
        """
        Wrap an accepted WebSocket.

        Args:
            websocket: The FastAPI WebSocket, already accepted
        """
        self.websocket = websocket
        self.state = ConnectionState.OPEN

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    @property
    def is_closed(self) -> bool:
        return self.state in TERMINAL_STATES

    async def receive(self) -> dict:
        """Return the next raw ASGI message from the client."""
        return await self.websocket.receive()

    async def send_frame(self, frame: Frame) -> bool:
        """
        Send a relayed frame, keeping its text/binary classification.

        Returns:
            bool: True if the frame was handed to the socket
        """
        if not self.is_open:
            return False
        try:
            if isinstance(frame, BinaryFrame):
                await self.websocket.send_bytes(frame.data)
            else:
                await self.websocket.send_text(frame.text)
            return True
        except Exception as e:
            logger.debug(f"{LOG_TAG} Dropped frame to client: {e}")
            return False

    async def send_message(self, message: ControlMessage) -> bool:
        """Send a proxy-originated control message as a text frame."""
        if not self.is_open:
            return False
        try:
            await self.websocket.send_text(message.to_json())
            return True
        except Exception as e:
            logger.warning(f"{LOG_TAG} Could not send {message.type} to client: {e}")
            return False

    async def close(self, code: int = CLOSE_NORMAL, reason: str = "") -> bool:
        """
        Close the client socket.

        Returns:
            bool: False if the socket was already closing or closed
        """
        if not self.is_open:
            return False
        self.state = ConnectionState.CLOSING
        try:
            await self.websocket.close(code=wire_close_code(code), reason=reason)
        except Exception as e:
            logger.debug(f"{LOG_TAG} Client close failed: {e}")
        self.state = ConnectionState.CLOSED
        return True

    def mark_closed(self) -> None:
        if self.state != ConnectionState.ERRORED:
            self.state = ConnectionState.CLOSED

    def mark_errored(self) -> None:
        self.state = ConnectionState.ERRORED


class UpstreamConnection:
    """The ElevenLabs side of a relay session."""

    def __init__(self, connect_timeout: float, connect: Optional[Callable[..., Any]] = None):
        """
        Initialize an upstream handle in the connecting state.

        Args:
            connect_timeout: Seconds allowed for the WebSocket handshake
            connect: Factory used to open the socket; defaults to ``websockets.connect``
        """
        self.connect_timeout = connect_timeout
        self._connect = connect or websockets.connect
        self.ws = None
        self.state = ConnectionState.CONNECTING

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    @property
    def is_closed(self) -> bool:
        return self.state in TERMINAL_STATES

    async def connect(self, url: str) -> None:
        """
        Open the WebSocket to the signed URL.

        Raises:
            UpstreamConnectTimeout: The handshake did not finish in time
            Exception: Any error raised by the WebSocket library while connecting
        """
        try:
            self.ws = await asyncio.wait_for(
                self._connect(url, max_size=WS_MAX_SIZE, open_timeout=None),
                timeout=self.connect_timeout,
            )
        except asyncio.TimeoutError as e:
            self.state = ConnectionState.ERRORED
            raise UpstreamConnectTimeout(self.connect_timeout) from e
        except Exception:
            self.state = ConnectionState.ERRORED
            raise
        if self.state == ConnectionState.CONNECTING:
            self.state = ConnectionState.OPEN
        else:
            # Abandoned while the handshake was in flight
            await self.ws.close()

    async def receive(self) -> Frame:
        """
        Return the next frame from ElevenLabs.

        Raises:
            websockets.exceptions.ConnectionClosed: The connection has closed
        """
        message = await self.ws.recv()
        return frame_from_message(message)

    async def send(self, frame: Frame) -> bool:
        """
        Forward a client frame, keeping its text/binary classification.

        Returns:
            bool: True if the frame was handed to the socket
        """
        if not self.is_open:
            return False
        payload = frame.data if isinstance(frame, BinaryFrame) else frame.text
        try:
            await self.ws.send(payload)
            return True
        except ConnectionClosed as e:
            logger.debug(f"{LOG_TAG} Dropped frame to ElevenLabs: {e}")
            return False

    async def close(self) -> bool:
        """
        Close the upstream socket without a specific code, or abandon a pending
        connect.

        Returns:
            bool: False if the socket was already closing or closed
        """
        if self.state in TERMINAL_STATES or self.state == ConnectionState.CLOSING:
            return False
        if self.ws is None:
            self.state = ConnectionState.CLOSED
            return True
        self.state = ConnectionState.CLOSING
        try:
            await self.ws.close()
        except Exception as e:
            logger.debug(f"{LOG_TAG} Upstream close failed: {e}")
        self.state = ConnectionState.CLOSED
        return True

    def mark_closed(self) -> None:
        if self.state != ConnectionState.ERRORED:
            self.state = ConnectionState.CLOSED

    def mark_errored(self) -> None:
        self.state = ConnectionState.ERRORED
