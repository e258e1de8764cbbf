"""
Data models for the proxy.

Key components:
- frames: the ``TextFrame`` / ``BinaryFrame`` tagged union relayed between sockets.
- message_schemas: pydantic models for proxy-originated control messages
  (``error``, ``proxy_connected``) and the health payload.
"""

from ws_proxy.models.frames import BinaryFrame, Frame, TextFrame
from ws_proxy.models.message_schemas import (
    ErrorMessage,
    HealthResponse,
    ProxyConnectedMessage,
)

__all__ = [
    "BinaryFrame",
    "Frame",
    "TextFrame",
    "ErrorMessage",
    "HealthResponse",
    "ProxyConnectedMessage",
]
