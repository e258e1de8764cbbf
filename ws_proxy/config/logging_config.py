"""
Configure logging for the proxy.

All proxy modules log through the ``ws_proxy`` logger. Output goes to stdout
and, unless disabled, to a rotating file. The ``websockets`` library loggers
stay at WARNING whatever level the proxy runs at.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from ws_proxy.config.constants import LOGGER_NAME

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Log file configuration; LOG_DIR="" disables the file handler
DEFAULT_LOG_DIR = "logs"
LOG_FILE_NAME = "ws_proxy.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

LIBRARY_LOGGERS = ("websockets.client", "websockets.server")


def configure_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure the proxy logger with console and file handlers.

    Safe to call more than once; previous handlers are closed and replaced.

    Args:
        level: Log level name; falls back to the LOG_LEVEL environment variable
        log_dir: Directory for the rotating log file; falls back to LOG_DIR.
            An empty string keeps logging on stdout only.

    Returns:
        logging.Logger: The configured logger instance
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if log_dir is None:
        log_dir = os.getenv("LOG_DIR", DEFAULT_LOG_DIR)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        try:
            path = Path(log_dir)
            path.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                path / LOG_FILE_NAME,
                maxBytes=MAX_LOG_SIZE,
                backupCount=BACKUP_COUNT
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not set up file logging in {log_dir}: {e}")

    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Prevent log propagation to root logger
    logger.propagate = False

    logger.info(f"Logging configured at {level_name}")
    return logger
