"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application, such as configuration, the remote manifest
and run statistics.
"""

from .config import SyncConfig
from .manifest import AssetRecord, PackRecord, ResourceVersion, UpdateManifest
from .stats import SyncStats

__all__ = [
    "AssetRecord",
    "PackRecord",
    "ResourceVersion",
    "SyncConfig",
    "SyncStats",
    "UpdateManifest",
]
