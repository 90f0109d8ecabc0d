"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class AssetSyncError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(AssetSyncError):
    """Raised for issues related to configuration loading or validation."""


class ManifestError(AssetSyncError):
    """Base class for failures while fetching a remote JSON document."""


class TransportError(ManifestError):
    """Raised when the server could not be reached or the request timed out."""


class StatusError(ManifestError):
    """Raised when the server answers with a non-success status code."""

    def __init__(self, url: str, status: int):
        super().__init__(f"GET {url} returned HTTP {status}")
        self.url = url
        self.status = status


class DecodeError(ManifestError):
    """Raised when a response body does not match the expected schema."""


class RetryExhaustedError(AssetSyncError):
    """Raised when a download failed on every attempt allowed by the retry policy."""

    def __init__(self, url: str, attempts: int, last_error: BaseException | None):
        super().__init__(
            f"Giving up on {url} after {attempts} attempts: {last_error}"
        )
        self.url = url
        self.attempts = attempts
        self.last_error = last_error


class ArchiveCorruptError(AssetSyncError):
    """
    Raised when a downloaded payload is not a readable zip archive, or one of its
    entries cannot be read. This is a data-integrity failure and is never retried.
    """

    def __init__(self, archive_name: str, reason: str, entry_index: int | None = None):
        location = f"archive '{archive_name}'"
        if entry_index is not None:
            location += f" (entry #{entry_index})"
        super().__init__(f"Corrupt {location}: {reason}")
        self.archive_name = archive_name
        self.entry_index = entry_index


class ExtractionError(AssetSyncError):
    """Raised when the extraction sink fails on a single archive entry."""
