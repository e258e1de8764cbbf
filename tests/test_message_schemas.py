import json

import pytest
from pydantic import ValidationError

from ws_proxy.models.frames import BinaryFrame, TextFrame, frame_from_asgi, frame_from_message
from ws_proxy.models.message_schemas import ErrorMessage, HealthResponse, ProxyConnectedMessage


def test_error_message_json():
    message = ErrorMessage(message="Missing agent_id")
    assert json.loads(message.to_json()) == {"type": "error", "message": "Missing agent_id"}


def test_error_message_requires_text():
    with pytest.raises(ValidationError):
        ErrorMessage(message="   ")


def test_proxy_connected_json():
    assert json.loads(ProxyConnectedMessage().to_json()) == {"type": "proxy_connected"}


def test_health_response_defaults():
    health = HealthResponse(service="elevenlabs-ws-proxy", version="1.1.0", api_key_configured=False)
    assert health.status == "ok"
    assert health.active_sessions == 0


def test_frame_from_message():
    assert frame_from_message("text") == TextFrame("text")
    assert frame_from_message(b"\x00") == BinaryFrame(b"\x00")
    assert frame_from_message(bytearray(b"\x01")) == BinaryFrame(b"\x01")


def test_frame_from_asgi():
    assert frame_from_asgi({"type": "websocket.receive", "text": "hi"}) == TextFrame("hi")
    assert frame_from_asgi({"type": "websocket.receive", "bytes": b"\x02"}) == BinaryFrame(b"\x02")
    assert frame_from_asgi({"type": "websocket.receive", "bytes": b""}) == BinaryFrame(b"")


def test_frame_preview():
    assert TextFrame("x" * 200).preview(80) == "x" * 80
    assert BinaryFrame(b"\x00" * 640).preview(80) == "[binary 640 bytes]"
