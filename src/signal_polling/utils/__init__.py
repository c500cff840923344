"""
Utility module for the EA signal poller

Provides the TTL cache and logging helpers.
"""

from .ttl_cache import TTLCache, CacheEntry
from .logging_config import (
    init_logging,
    get_logger,
    get_global_logger,
    setup_logging
)

__all__ = [
    "TTLCache",
    "CacheEntry",
    "init_logging",
    "get_logger",
    "get_global_logger",
    "setup_logging",
]
