"""
Opaque WebSocket frames relayed by the proxy.

A frame is either ``TextFrame`` or ``BinaryFrame``; the class itself carries the
text/binary classification so it can never be lost or coerced while a frame
sits in a buffer or crosses from one socket to the other. Payloads are never
parsed.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TextFrame:
    """A text WebSocket frame."""

    text: str

    def preview(self, limit: int) -> str:
        return self.text[:limit]


@dataclass(frozen=True)
class BinaryFrame:
    """A binary WebSocket frame."""

    data: bytes

    def preview(self, limit: int) -> str:
        return f"[binary {len(self.data)} bytes]"


Frame = Union[TextFrame, BinaryFrame]


def frame_from_message(message: Union[str, bytes, bytearray, memoryview]) -> Frame:
    """Wrap a raw message as received from the ``websockets`` library."""
    if isinstance(message, str):
        return TextFrame(message)
    return BinaryFrame(bytes(message))


def frame_from_asgi(message: dict) -> Frame:
    """Wrap a ``websocket.receive`` ASGI message."""
    if message.get("bytes") is not None:
        return BinaryFrame(message["bytes"])
    return TextFrame(message.get("text") or "")
