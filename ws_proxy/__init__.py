"""
ElevenLabs WebSocket Proxy

Relays a browser (or any untrusted) WebSocket client to the ElevenLabs
Conversational AI WebSocket without exposing the ElevenLabs API key.

Architecture Overview:
- FastAPI server exposing a health endpoint and the relay WebSocket on one port
- One HTTP call per connection to obtain a short-lived signed URL
- One relay session per client, forwarding text and binary frames unchanged

Key Components:
- config: constants, logging setup and environment-based settings
- models: frame types and control message schemas
- services: the signed URL client
- relay: connection handles, pre-open buffer and relay session
- websocket_manager: accepts connections and starts relay sessions

Getting Started:
1. Set up environment variables:
   - ELEVENLABS_API_KEY: Your ElevenLabs API key
   - PORT: Port to run the server on (default 3000)
   - HOST: Host to bind the server to (default 0.0.0.0)
   - LOG_LEVEL: Logging level (default INFO)

2. Start the server:
   ```bash
   python run.py
   ```

3. Connect a client to ``ws://your-server:3000/?agent_id=<agent id>``.
"""
