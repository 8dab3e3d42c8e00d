"""
RUNTIME CONFIGURATION

Purpose:
- Read provider endpoints, keys and timeouts from the environment
- Bootstrap package logging

Requirements:
• Never hardcode API keys (use os.getenv)
• Bad numeric values fall back to defaults
• Logging setup is idempotent

Author: Freight Tracker
"""

import os
import logging
from typing import Optional

logger = logging.getLogger(__name__)


def _int_env(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}, using {default}")
        return default


# ==================================================
# PROVIDER SETTINGS
# ==================================================

OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY")
OPENWEATHER_BASE_URL = os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5")

OPENSKY_BASE_URL = os.getenv("OPENSKY_BASE_URL", "https://opensky-network.org/api")

API_TIMEOUT = _int_env("API_TIMEOUT", 10)  # seconds
OPENSKY_ALL_TIMEOUT = _int_env("OPENSKY_ALL_TIMEOUT", 15)  # global listing is slower
OPENSKY_MAX_FLIGHTS = _int_env("OPENSKY_MAX_FLIGHTS", 2000)


# ==================================================
# LOGGING
# ==================================================

LOG_LEVEL = os.getenv("FREIGHT_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_PACKAGE_LOGGER = "freight_tracker"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    Calling it again only updates the level.

    Args:
        level: Level name (DEBUG, INFO, ...). Defaults to FREIGHT_LOG_LEVEL.

    Returns:
        logging.Logger: The package logger
    """
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    log_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    package_logger.setLevel(log_level)

    if not any(getattr(h, "_freight_tracker", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._freight_tracker = True
        package_logger.addHandler(handler)

    return package_logger
