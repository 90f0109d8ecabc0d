"""
Utility helpers: name filtering, URL building, retry timing and formatting.
"""

from .path import build_asset_url, sanitize_asset_name
from .retry import RetryPolicy
from .whitelist import Whitelist

__all__ = ["RetryPolicy", "Whitelist", "build_asset_url", "sanitize_asset_name"]
