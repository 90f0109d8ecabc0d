"""
Remote API Layer.

This package handles reading the JSON documents published by the content
endpoint: the update manifest and the resource version.
"""

from .client import ManifestClient

__all__ = ["ManifestClient"]
