"""
Pydantic models for the control messages the proxy sends to clients.

These are the only frames the proxy originates itself; everything else on the
client socket is relayed verbatim from ElevenLabs.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ControlMessage(BaseModel):
    """Base model for proxy-originated messages."""

    type: str = Field(..., description="Message type identifier")

    def to_json(self) -> str:
        return self.model_dump_json()


class ErrorMessage(ControlMessage):
    """Model for the error notification sent before the proxy closes a client."""

    type: Literal["error"] = "error"
    message: str = Field(..., description="Human readable failure description")

    @field_validator("message")
    def validate_message(cls, v):
        """Validate that the error message is not empty."""
        if not v.strip():
            raise ValueError("Error message cannot be empty")
        return v


class ProxyConnectedMessage(ControlMessage):
    """Model for the notification sent once the upstream socket is open."""

    type: Literal["proxy_connected"] = "proxy_connected"


class HealthResponse(BaseModel):
    """Model for the health check payload."""

    status: Literal["ok"] = "ok"
    service: str
    version: str
    api_key_configured: bool
    active_sessions: int = 0
