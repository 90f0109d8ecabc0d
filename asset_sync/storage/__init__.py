"""
Storage Layer.

This package handles all data persistence: the INI configuration file and the
name-to-hash cache of previously synced assets.
"""

from .cache import HashCache, HashCacheStore
from .config_manager import ConfigManager

__all__ = ["ConfigManager", "HashCache", "HashCacheStore"]
