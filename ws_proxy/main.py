"""
FastAPI server for the ElevenLabs Conversational AI WebSocket proxy.

This module initializes and configures the FastAPI application. It exposes a
health check over plain HTTP and the relay over WebSocket on the same port.
Clients connect with ``?agent_id=<id>``; the proxy obtains a signed URL with the
server-side API key and relays frames to and from ElevenLabs, so the key never
reaches the client.
"""

from pathlib import Path

import dotenv
from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from ws_proxy.config.constants import SERVICE_NAME, SERVICE_VERSION
from ws_proxy.config.logging_config import configure_logging
from ws_proxy.config.settings import ProxySettings
from ws_proxy.models.message_schemas import HealthResponse
from ws_proxy.websocket_manager import WebSocketManager

# Load environment variables from .env file if it exists
env_path = Path(".") / ".env"
if env_path.exists():
    dotenv.load_dotenv(env_path)

logger = configure_logging()

settings = ProxySettings.from_env()

app = FastAPI(
    title="ElevenLabs WebSocket Proxy",
    description="Relay between browser clients and the ElevenLabs Conversational AI WebSocket",
    version=SERVICE_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

websocket_manager = WebSocketManager(settings)


@app.websocket("/")
@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket relay endpoint.

    Requires the ``agent_id`` query parameter. The connection is relayed to the
    ElevenLabs agent until either side disconnects.
    """
    await websocket_manager.handle_websocket(websocket)


@app.get("/", response_model=HealthResponse)
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint for monitoring system status.

    Returns:
        HealthResponse: Service status, whether an API key is configured and
        the number of active relay sessions.
    """
    return HealthResponse(
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        api_key_configured=websocket_manager.settings.api_key_configured,
        active_sessions=websocket_manager.active_sessions,
    )
