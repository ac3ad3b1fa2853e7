"""
Centralized logging configuration for the coach engine.
"""

import json
import logging
import os
import sys
from typing import Any, Optional

from .config import AppConfig

DEBUG = os.getenv("DEBUG_COACH", "0") == "1"


def setup_logging(config: Optional[AppConfig] = None) -> None:
    """
    Setup root logging. CLI agents log to stderr so stdout stays pure JSON.

    Args:
        config: AppConfig instance, uses default if None
    """
    if config is None:
        from .config import config as default_config
        config = default_config

    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                        handlers=[logging.StreamHandler(sys.stderr)])


def get_logger(name: str, config: Optional[AppConfig] = None) -> logging.Logger:
    """
    Get a logger with the configured level.

    Args:
        name: Logger name (usually __name__)
        config: AppConfig instance, uses default if None
    """
    if config is None:
        from .config import config as default_config
        config = default_config

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    return logger


def dlog(obj: Any) -> None:
    """Debug dump as one JSON line on stderr (DEBUG_COACH=1)."""
    if DEBUG:
        sys.stderr.write(json.dumps(obj, ensure_ascii=False, default=str) + "\n")
