"""
Configuration module for the ElevenLabs WebSocket proxy.

Key components:
- constants: protocol values, close codes, endpoint paths and the logging
  sample cadence used by the relay.
- logging_config: console and rotating-file logging setup.
- settings: the immutable ``ProxySettings`` read from the environment.

Usage examples:
```python
from ws_proxy.config.logging_config import configure_logging
from ws_proxy.config.settings import ProxySettings

logger = configure_logging()
settings = ProxySettings.from_env()
logger.info(f"API key configured: {settings.api_key_configured}")
```
"""
