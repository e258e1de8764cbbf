"""
Client implementations for external API integrations.

Key components:
- SignedUrlFetcher: exchanges an agent identifier and the ElevenLabs API key for
  a short-lived signed WebSocket URL.

Usage examples:
```python
from ws_proxy.config.settings import ProxySettings
from ws_proxy.services import SignedUrlFetcher

fetcher = SignedUrlFetcher(ProxySettings.from_env())
signed_url = await fetcher.fetch("agent_123")
```
"""

from ws_proxy.services.signed_url import SignedUrlFetcher

__all__ = ["SignedUrlFetcher"]
