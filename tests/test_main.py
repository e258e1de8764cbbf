import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect
from unittest.mock import patch

from ws_proxy.config.settings import ProxySettings
from ws_proxy.main import app, websocket_manager

client = TestClient(app)


def test_health_check():
    """Test the health check endpoint returns correct response"""
    response = client.get("/health")
    assert response.status_code == 200

    response_json = response.json()
    assert response_json["status"] == "ok"
    assert response_json["service"] == "elevenlabs-ws-proxy"
    assert "version" in response_json
    assert isinstance(response_json["api_key_configured"], bool)
    assert response_json["active_sessions"] == 0


def test_root_serves_health():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health_reports_api_key():
    with patch.object(websocket_manager, "settings", ProxySettings(api_key="sk_test")):
        assert client.get("/health").json()["api_key_configured"] is True
    with patch.object(websocket_manager, "settings", ProxySettings(api_key=None)):
        assert client.get("/health").json()["api_key_configured"] is False


def test_health_allows_any_origin():
    response = client.get("/health", headers={"Origin": "https://example.com"})
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize("path", ["/", "/ws"])
def test_websocket_missing_agent_id(path):
    with client.websocket_connect(path) as websocket:
        assert websocket.receive_json() == {"type": "error", "message": "Missing agent_id"}
        with pytest.raises(WebSocketDisconnect) as exc_info:
            websocket.receive_text()
    assert exc_info.value.code == 1008


def test_websocket_without_api_key():
    with patch.object(websocket_manager, "settings", ProxySettings(api_key=None)):
        with client.websocket_connect("/?agent_id=agent_123") as websocket:
            assert websocket.receive_json() == {"type": "error", "message": "API key not configured"}
            with pytest.raises(WebSocketDisconnect) as exc_info:
                websocket.receive_text()
    assert exc_info.value.code == 1011


def test_app_configuration():
    assert app.title == "ElevenLabs WebSocket Proxy"
    route_paths = [route.path for route in app.routes]
    assert "/ws" in route_paths
    assert "/health" in route_paths
    assert "/" in route_paths
