"""
Transfer and Extraction Layer.

This package is responsible for fetching archive payloads over HTTP and
handing their entries to the extraction sink.
"""

from .archive import ArchiveDispatcher, DispatchResult
from .downloader import Downloader, create_connection_pool
from .extraction import ExtractionSink, RawDumpSink, load_sink

__all__ = [
    "ArchiveDispatcher",
    "DispatchResult",
    "Downloader",
    "ExtractionSink",
    "RawDumpSink",
    "create_connection_pool",
    "load_sink",
]
