"""
Environment-based settings for the proxy.

All values are read once into an immutable ``ProxySettings`` instance which is
shared read-only by every relay session. A missing API key is not a startup
error; it is reported to each client that connects while it is unset.
"""

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ws_proxy.config.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_SIGNED_URL_TIMEOUT,
    DEFAULT_UPSTREAM_CONNECT_TIMEOUT,
    LOG_TAG,
    LOGGER_NAME,
)

logger = logging.getLogger(LOGGER_NAME)


class ProxySettings(BaseModel):
    """Process-wide proxy configuration."""

    model_config = ConfigDict(frozen=True)

    port: int = Field(DEFAULT_PORT, description="Listening port")
    host: str = Field(DEFAULT_HOST, description="Bind address")
    api_key: Optional[str] = Field(None, description="ElevenLabs API key", repr=False)
    api_base_url: str = Field(DEFAULT_API_BASE_URL, description="Signed URL issuing host")
    signed_url_timeout: float = Field(DEFAULT_SIGNED_URL_TIMEOUT, gt=0)
    upstream_connect_timeout: float = Field(DEFAULT_UPSTREAM_CONNECT_TIMEOUT, gt=0)

    @property
    def api_key_configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProxySettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from; defaults to ``os.environ``

        Returns:
            ProxySettings: The parsed settings
        """
        env = os.environ if environ is None else environ
        return cls(
            port=_int_setting(env, "PORT", DEFAULT_PORT),
            host=env.get("HOST") or DEFAULT_HOST,
            api_key=env.get("ELEVENLABS_API_KEY") or None,
            api_base_url=(env.get("ELEVENLABS_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
            signed_url_timeout=_float_setting(env, "SIGNED_URL_TIMEOUT", DEFAULT_SIGNED_URL_TIMEOUT),
            upstream_connect_timeout=_float_setting(
                env, "UPSTREAM_CONNECT_TIMEOUT", DEFAULT_UPSTREAM_CONNECT_TIMEOUT
            ),
        )


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{LOG_TAG} Invalid {name}={raw!r}, using {default}")
        return default


def _float_setting(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if value <= 0:
        logger.warning(f"{LOG_TAG} Invalid {name}={raw!r}, using {default}")
        return default
    return value
