"""
Constants and configuration values used throughout the proxy.

This module defines constants that are used across different parts of the service,
providing a centralized location for protocol values and making it easier to
maintain consistent naming throughout the codebase.
"""

# Logger name used throughout the application
LOGGER_NAME = "ws_proxy"

# Prefix used on every log line emitted by the relay
LOG_TAG = "[PROXY]"

SERVICE_NAME = "elevenlabs-ws-proxy"
SERVICE_VERSION = "1.1.0"

# Upstream ElevenLabs endpoints
DEFAULT_API_BASE_URL = "https://api.elevenlabs.io"
SIGNED_URL_PATH = "/v1/convai/conversation/get_signed_url"
API_KEY_HEADER = "xi-api-key"

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_SIGNED_URL_TIMEOUT = 10.0  # seconds
DEFAULT_UPSTREAM_CONNECT_TIMEOUT = 10.0  # seconds

# Close codes (RFC 6455)
CLOSE_NORMAL = 1000
CLOSE_GOING_AWAY = 1001
CLOSE_NO_STATUS = 1005
CLOSE_ABNORMAL = 1006
CLOSE_POLICY_VIOLATION = 1008
CLOSE_INTERNAL_ERROR = 1011
CLOSE_TLS_HANDSHAKE = 1015

# Codes that are reported locally but may never be sent in a close frame
RESERVED_CLOSE_CODES = (CLOSE_NO_STATUS, CLOSE_ABNORMAL, CLOSE_TLS_HANDSHAKE)

# Sampled frame logging: the first N frames, then every Nth frame
CLIENT_LOG_FIRST = 3
CLIENT_LOG_EVERY = 200
UPSTREAM_LOG_FIRST = 5
UPSTREAM_LOG_EVERY = 100
CLIENT_PREVIEW_CHARS = 80
UPSTREAM_PREVIEW_CHARS = 120
