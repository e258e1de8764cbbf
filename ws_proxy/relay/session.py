"""
Relay session between one client and one ElevenLabs conversation.

A session runs the whole lifecycle of a client connection:

1. Fetch a signed URL for the requested agent.
2. Open the upstream WebSocket immediately, buffering client frames meanwhile.
3. On upstream open, flush the buffer in order, then notify the client with
   ``proxy_connected``.
4. Relay frames in both directions, preserving text/binary framing.
5. Tear down both sockets when either side closes or fails.

Socket activity is turned into events by two pump tasks and handled by a
single dispatch loop, so buffered and live client frames can never interleave.
"""

import asyncio
import logging
import uuid
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Type

from websockets.exceptions import ConnectionClosed, InvalidURI

from ws_proxy.config.constants import (
    CLIENT_LOG_EVERY,
    CLIENT_LOG_FIRST,
    CLIENT_PREVIEW_CHARS,
    CLOSE_GOING_AWAY,
    CLOSE_INTERNAL_ERROR,
    CLOSE_NO_STATUS,
    LOG_TAG,
    LOGGER_NAME,
    UPSTREAM_LOG_EVERY,
    UPSTREAM_LOG_FIRST,
    UPSTREAM_PREVIEW_CHARS,
)
from ws_proxy.config.settings import ProxySettings
from ws_proxy.errors import SignedUrlAuthError, UpstreamConnectTimeout
from ws_proxy.models.frames import frame_from_asgi
from ws_proxy.models.message_schemas import ErrorMessage, ProxyConnectedMessage
from ws_proxy.relay.buffer import PreOpenBuffer
from ws_proxy.relay.connections import ClientConnection, UpstreamConnection
from ws_proxy.relay.events import (
    ClientClosed,
    ClientErrored,
    ClientMessage,
    SetupFailed,
    UpstreamClosed,
    UpstreamErrored,
    UpstreamMessage,
    UpstreamOpened,
)
from ws_proxy.services.signed_url import SignedUrlFetcher

logger = logging.getLogger(LOGGER_NAME)

UPSTREAM_ERROR_MESSAGE = "ElevenLabs connection error"


class SessionState(str, Enum):
    SETTING_UP = "setting_up"
    RELAYING = "relaying"
    CLOSING = "closing"
    CLOSED = "closed"
    ERRORED = "errored"


def should_log(count: int, first: int, every: int) -> bool:
    """Sample frame logging: the first few frames, then every Nth."""
    return count <= first or count % every == 0


class RelaySession:
    """
    Per-connection relay state machine.

    All mutable state lives on the instance and is only modified from the
    dispatch loop, so concurrent sessions share nothing but the read-only
    settings.
    """

    def __init__(
        self,
        client: ClientConnection,
        agent_id: str,
        settings: ProxySettings,
        fetcher: Optional[SignedUrlFetcher] = None,
        upstream: Optional[UpstreamConnection] = None,
    ):
        self.session_id = str(uuid.uuid4())
        self.agent_id = agent_id
        self.settings = settings
        self.client = client
        self.upstream = upstream or UpstreamConnection(settings.upstream_connect_timeout)
        self.fetcher = fetcher or SignedUrlFetcher(settings)
        self.buffer = PreOpenBuffer()
        self.upstream_ready = False
        self.client_msg_count = 0
        self.upstream_msg_count = 0
        self.state = SessionState.SETTING_UP

        self._events: asyncio.Queue = asyncio.Queue()
        self._client_task: Optional[asyncio.Task] = None
        self._upstream_task: Optional[asyncio.Task] = None

        self.handlers: Dict[Type, Callable[..., Awaitable[None]]] = {
            ClientMessage: self._on_client_message,
            ClientClosed: self._on_client_closed,
            ClientErrored: self._on_client_errored,
            UpstreamOpened: self._on_upstream_opened,
            UpstreamMessage: self._on_upstream_message,
            UpstreamClosed: self._on_upstream_closed,
            UpstreamErrored: self._on_upstream_errored,
            SetupFailed: self._on_setup_failed,
        }

    @property
    def finished(self) -> bool:
        return self.client.is_closed and self.upstream.is_closed

    @property
    def counts(self) -> str:
        return f"Msgs: client={self.client_msg_count}, el={self.upstream_msg_count}"

    async def run(self) -> None:
        """Run the session until both sockets are closed."""
        try:
            signed_url = await self.fetcher.fetch(self.agent_id)
        except SignedUrlAuthError as e:
            await self._fail_client(f"Auth failed: {e.status_code}", "Auth failed")
            return
        except Exception as e:
            logger.error(f"{LOG_TAG} Setup error: {e}")
            await self._fail_client(f"Setup failed: {e}", "Setup failed")
            return

        logger.info(f"{LOG_TAG} Got signed URL, connecting to ElevenLabs...")
        self._upstream_task = asyncio.create_task(self._pump_upstream(signed_url))
        self._client_task = asyncio.create_task(self._pump_client())
        try:
            await self._dispatch()
        finally:
            await self._teardown()

    async def _dispatch(self) -> None:
        while not self.finished:
            event = await self._events.get()
            await self.handlers[type(event)](event)

    async def _pump_client(self) -> None:
        while True:
            try:
                message = await self.client.receive()
            except Exception as e:
                await self._events.put(ClientErrored(e))
                return
            if message["type"] == "websocket.disconnect":
                await self._events.put(
                    ClientClosed(message.get("code", CLOSE_NO_STATUS), message.get("reason") or "")
                )
                return
            if message["type"] == "websocket.receive":
                await self._events.put(ClientMessage(frame_from_asgi(message)))

    async def _pump_upstream(self, signed_url: str) -> None:
        try:
            await self.upstream.connect(signed_url)
        except (UpstreamConnectTimeout, InvalidURI) as e:
            # No socket was ever opened
            await self._events.put(SetupFailed(e))
            return
        except Exception as e:
            await self._events.put(UpstreamErrored(e))
            return
        await self._events.put(UpstreamOpened())

        while True:
            try:
                frame = await self.upstream.receive()
            except ConnectionClosed as e:
                if e.rcvd is None:
                    # Dropped without a close frame
                    await self._events.put(UpstreamErrored(e))
                else:
                    await self._events.put(UpstreamClosed(e.rcvd.code, e.rcvd.reason))
                return
            except Exception as e:
                await self._events.put(UpstreamErrored(e))
                return
            await self._events.put(UpstreamMessage(frame))

    async def _on_client_message(self, event: ClientMessage) -> None:
        self.client_msg_count += 1
        frame = event.frame
        if self.upstream_ready:
            await self.upstream.send(frame)
        elif not self.upstream.is_closed:
            self.buffer.append(frame)

        if should_log(self.client_msg_count, CLIENT_LOG_FIRST, CLIENT_LOG_EVERY):
            logger.info(
                f"{LOG_TAG} Client→EL #{self.client_msg_count}: {frame.preview(CLIENT_PREVIEW_CHARS)}"
            )

    async def _on_upstream_opened(self, event: UpstreamOpened) -> None:
        logger.info(f"{LOG_TAG} Connected to ElevenLabs")
        flushed = 0
        for frame in self.buffer.drain():
            if not await self.upstream.send(frame):
                break
            flushed += 1
        total = self.buffer.total_buffered
        self.buffer.clear()
        if flushed < total:
            # The upstream pump reports the close; the client is not told it is connected
            logger.warning(
                f"{LOG_TAG} Dropped {total - flushed} of {total} buffered messages, ElevenLabs went away"
            )
            return
        if flushed:
            logger.debug(f"{LOG_TAG} Flushed {flushed} buffered messages")

        self.upstream_ready = True
        self.state = SessionState.RELAYING
        await self.client.send_message(ProxyConnectedMessage())

    async def _on_upstream_message(self, event: UpstreamMessage) -> None:
        self.upstream_msg_count += 1
        frame = event.frame
        await self.client.send_frame(frame)

        if should_log(self.upstream_msg_count, UPSTREAM_LOG_FIRST, UPSTREAM_LOG_EVERY):
            logger.info(
                f"{LOG_TAG} EL→Client #{self.upstream_msg_count}: {frame.preview(UPSTREAM_PREVIEW_CHARS)}"
            )

    async def _on_client_closed(self, event: ClientClosed) -> None:
        self.client.mark_closed()
        logger.info(f"{LOG_TAG} Client disconnected: {event.code}. {self.counts}")
        self.state = SessionState.CLOSING
        await self._close_upstream()
        self.state = SessionState.CLOSED

    async def _on_client_errored(self, event: ClientErrored) -> None:
        self.client.mark_errored()
        logger.error(f"{LOG_TAG} Client error: {event.error}")
        self.state = SessionState.CLOSING
        await self._close_upstream()
        self.state = SessionState.CLOSED

    async def _on_upstream_closed(self, event: UpstreamClosed) -> None:
        self.upstream.mark_closed()
        logger.info(f"{LOG_TAG} ElevenLabs disconnected: {event.code} {event.reason}. {self.counts}")
        self.state = SessionState.CLOSING
        await self.client.close(event.code, event.reason)
        self.state = SessionState.CLOSED

    async def _on_upstream_errored(self, event: UpstreamErrored) -> None:
        self.upstream.mark_errored()
        logger.error(f"{LOG_TAG} ElevenLabs error: {event.error}. {self.counts}")
        await self._fail_client(UPSTREAM_ERROR_MESSAGE, "Upstream error")

    async def _on_setup_failed(self, event: SetupFailed) -> None:
        self.upstream.mark_errored()
        logger.error(f"{LOG_TAG} Setup error: {event.error}")
        await self._fail_client(f"Setup failed: {event.error}", "Setup failed")

    async def _close_upstream(self) -> None:
        if self.upstream.is_open:
            await self.upstream.close()
            return
        # Still connecting: abandon the handshake
        if self._upstream_task is not None and not self._upstream_task.done():
            self._upstream_task.cancel()
        await self.upstream.close()

    async def _fail_client(self, message: str, reason: str) -> None:
        """Send an error frame and close the client with an internal-error code."""
        self.state = SessionState.ERRORED
        if self.client.is_open:
            await self.client.send_message(ErrorMessage(message=message))
            await self.client.close(CLOSE_INTERNAL_ERROR, reason)

    async def _teardown(self) -> None:
        tasks = [t for t in (self._client_task, self._upstream_task) if t is not None and not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        await self.upstream.close()
        if self.client.is_open:
            await self.client.close(CLOSE_GOING_AWAY, "Proxy shutting down")

        if self.state not in (SessionState.CLOSED, SessionState.ERRORED):
            self.state = SessionState.CLOSED
        logger.debug(f"{LOG_TAG} Session {self.session_id} released. {self.counts}")
