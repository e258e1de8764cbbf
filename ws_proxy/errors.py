"""Shared error types for the proxy."""

from typing import Optional


class ProxyError(Exception):
    """Base class for proxy failures that end a single relay session."""


class SignedUrlError(ProxyError):
    """Raised when a signed URL could not be obtained."""


class SignedUrlAuthError(SignedUrlError):
    """Raised when the signed URL endpoint answers with a non-success status."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        super().__init__(f"Auth failed: {status_code}")
        self.status_code = status_code
        self.body = body


class UpstreamConnectTimeout(ProxyError):
    """Raised when the upstream WebSocket handshake does not finish in time."""

    def __init__(self, timeout: float):
        super().__init__(f"Upstream connect timed out after {timeout:g}s")
        self.timeout = timeout


__all__ = ["ProxyError", "SignedUrlError", "SignedUrlAuthError", "UpstreamConnectTimeout"]
