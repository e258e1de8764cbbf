"""
Run script for starting the ElevenLabs WebSocket proxy.

Usage:
    python run.py [--port PORT] [--host HOST] [--log-level LEVEL]
"""

import argparse
import logging
import os

import uvicorn

from ws_proxy.config.constants import DEFAULT_HOST, DEFAULT_PORT, LOG_TAG, LOGGER_NAME
from ws_proxy.config.logging_config import configure_logging
from ws_proxy.main import app, settings

logger = logging.getLogger(LOGGER_NAME)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Start the ElevenLabs WebSocket proxy"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to run the server on (default: {DEFAULT_PORT} or PORT env var)",
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Host to bind the server to (default: {DEFAULT_HOST} or HOST env var)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO").upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )
    return parser.parse_args(argv)


def main():
    """Main entry point for starting the proxy."""
    args = parse_args()
    configure_logging(args.log_level)

    # A missing key is reported per connection, not treated as fatal
    if not settings.api_key_configured:
        logger.warning(f"{LOG_TAG} ELEVENLABS_API_KEY not set; connections will be rejected")

    logger.info(f"{LOG_TAG} WebSocket proxy running on port {args.port}")

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        # Use HTTP/1.1 for lower overhead than HTTP/2
        http="h11",
        # Disable access logs, we have our own logging
        access_log=False,
    )


if __name__ == "__main__":
    main()
