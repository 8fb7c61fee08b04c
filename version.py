"""
Server version lookup.

The version is resolved from the installed distribution metadata the first
time it is asked for and reused for the life of the process.
"""

import logging
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "godot-bridge"
FALLBACK_VERSION = "0.0.0"

logger = logging.getLogger("godot_bridge")


@lru_cache(maxsize=None)
def get_server_version() -> str:
    """Return the version of this server, or 0.0.0 when running uninstalled."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        logger.debug(f"Distribution {DISTRIBUTION_NAME} not installed, using {FALLBACK_VERSION}")
        return FALLBACK_VERSION
