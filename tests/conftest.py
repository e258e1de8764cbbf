import asyncio
import json
import logging
from unittest.mock import AsyncMock

import pytest
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK
from websockets.frames import Close

from ws_proxy.config.settings import ProxySettings
from ws_proxy.models.frames import BinaryFrame, TextFrame
from ws_proxy.services.signed_url import SignedUrlFetcher

SIGNED_URL = "wss://api.elevenlabs.io/v1/convai/conversation?agent_id=agent_123&conversation_signature=sig"


class FakeClientWebSocket:
    """Stands in for an accepted FastAPI WebSocket."""

    def __init__(self, query_params=None):
        self.query_params = query_params or {}
        self.incoming = asyncio.Queue()
        self.sent = []
        self.accepted = False
        self.close_calls = []

    async def accept(self):
        self.accepted = True

    async def receive(self):
        item = await self.incoming.get()
        if isinstance(item, BaseException):
            raise item
        return item

    async def send_text(self, data):
        self.sent.append(TextFrame(data))

    async def send_bytes(self, data):
        self.sent.append(BinaryFrame(data))

    async def close(self, code=1000, reason=None):
        self.close_calls.append((code, reason))

    def push_text(self, text):
        self.incoming.put_nowait({"type": "websocket.receive", "text": text})

    def push_bytes(self, data):
        self.incoming.put_nowait({"type": "websocket.receive", "bytes": data})

    def disconnect(self, code=1000, reason=""):
        self.incoming.put_nowait({"type": "websocket.disconnect", "code": code, "reason": reason})

    def fail(self, error):
        self.incoming.put_nowait(error)

    @property
    def control_messages(self):
        """Proxy-originated JSON messages, in order."""
        messages = []
        for frame in self.sent:
            if isinstance(frame, TextFrame):
                try:
                    data = json.loads(frame.text)
                except ValueError:
                    continue
                if isinstance(data, dict) and data.get("type") in ("error", "proxy_connected"):
                    messages.append(data)
        return messages


class FakeUpstreamSocket:
    """Stands in for a ``websockets`` client connection."""

    def __init__(self):
        self.incoming = asyncio.Queue()
        self.sent = []
        self.close_calls = 0

    async def recv(self):
        item = await self.incoming.get()
        if isinstance(item, BaseException):
            raise item
        return item

    async def send(self, message):
        self.sent.append(message)

    async def close(self):
        self.close_calls += 1
        self.incoming.put_nowait(ConnectionClosedOK(Close(1000, ""), Close(1000, ""), True))

    def push(self, message):
        self.incoming.put_nowait(message)

    def close_from_server(self, code, reason=""):
        frame = Close(code, reason)
        if code in (1000, 1001):
            self.incoming.put_nowait(ConnectionClosedOK(frame, frame, True))
        else:
            self.incoming.put_nowait(ConnectionClosedError(frame, frame, True))

    def drop(self):
        self.incoming.put_nowait(ConnectionClosedError(None, None))


class FakeConnector:
    """Replaces ``websockets.connect``; can be held open with a gate."""

    def __init__(self, socket=None, error=None, gated=False):
        self.socket = socket
        self.error = error
        self.gate = asyncio.Event()
        if not gated:
            self.gate.set()
        self.calls = []

    async def __call__(self, url, **kwargs):
        self.calls.append(url)
        await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.socket


async def wait_until(predicate, timeout=1.0):
    """Poll until ``predicate()`` is true or fail the test."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


@pytest.fixture
def settings():
    return ProxySettings(api_key="test-api-key", upstream_connect_timeout=1.0)


@pytest.fixture
def client_ws():
    return FakeClientWebSocket(query_params={"agent_id": "agent_123"})


@pytest.fixture
def upstream_socket():
    return FakeUpstreamSocket()


@pytest.fixture
def fetcher():
    mock = AsyncMock(spec=SignedUrlFetcher)
    mock.fetch.return_value = SIGNED_URL
    return mock


@pytest.fixture
def make_connector():
    return FakeConnector


@pytest.fixture
def poll():
    return wait_until


@pytest.fixture
def make_client_ws():
    return FakeClientWebSocket


@pytest.fixture
def make_upstream_socket():
    return FakeUpstreamSocket
