"""
Relay core: connection handles, the pre-open buffer and the relay session.

Key components:
- RelaySession: per-connection state machine driving handshake, buffering,
  duplex forwarding and teardown.
- ClientConnection / UpstreamConnection: handles for the two sockets, each
  tracking a ``ConnectionState`` with idempotent ``close()``.
- PreOpenBuffer: FIFO of client frames received before ElevenLabs is open.
"""

from ws_proxy.relay.buffer import PreOpenBuffer
from ws_proxy.relay.connections import ClientConnection, ConnectionState, UpstreamConnection
from ws_proxy.relay.session import RelaySession, SessionState

__all__ = [
    "ClientConnection",
    "ConnectionState",
    "PreOpenBuffer",
    "RelaySession",
    "SessionState",
    "UpstreamConnection",
]
