"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pathlib import Path

from pydantic import (
    BaseModel,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from asset_sync.utils.retry import RetryPolicy
from asset_sync.utils.whitelist import Whitelist


class SyncConfig(BaseModel):
    """A validated configuration model for the application."""

    # Remote endpoint
    server_url: str
    manifest_url: str | None = None
    resource_version: str | None = None
    version_url: str | None = None

    # Local store
    output_dir: Path
    path_whitelist: list[str] | None = None
    extractor: str | None = None

    # Download behaviour
    max_workers: int = 8
    retry_base_delay: float = 3.0
    retry_max_delay: float = 20.0
    retry_max_attempts: int = 5
    request_timeout: float = 120.0
    skip_unchanged: bool = False
    dry_run: bool = False

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("server_url", "manifest_url", "version_url")
    @classmethod
    def validate_url(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Ensures endpoints are absolute HTTP(S) URLs."""
        if not v:
            if info.field_name == "server_url":
                raise ValueError("Server URL cannot be empty.")
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://, got: {v}")
        return v.rstrip("/")

    @field_validator("resource_version", "extractor")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        return v or None

    @field_validator("extractor")
    @classmethod
    def validate_extractor(cls, v: str | None) -> str | None:
        """Extractors are referenced as 'package.module:function'."""
        if v is not None and (v.count(":") != 1 or v.startswith(":") or v.endswith(":")):
            raise ValueError("Extractor must look like 'package.module:function'.")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 64:
            raise ValueError("Max workers must be between 1 and 64.")
        return v

    @field_validator("retry_max_attempts")
    @classmethod
    def validate_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Retry attempts must be at least 1.")
        return v

    @field_validator("retry_base_delay", "retry_max_delay", "request_timeout")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Delays and timeouts cannot be negative.")
        return v

    @model_validator(mode="after")
    def validate_version_source(self) -> "SyncConfig":
        """The download URL needs a resource version from somewhere."""
        if not self.resource_version and not self.version_url:
            raise ValueError(
                "Either 'resource_version' or 'version_url' must be configured."
            )
        return self

    @property
    def effective_manifest_url(self) -> str:
        return self.manifest_url or self.server_url

    @property
    def whitelist(self) -> Whitelist:
        return Whitelist(self.path_whitelist)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            base_delay=self.retry_base_delay,
            max_delay=self.retry_max_delay,
            max_attempts=self.retry_max_attempts,
        )

    @property
    def cache_file(self) -> Path:
        return Path(self.config_path) / "hash_cache.json"

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path", "dry_run"}
        return {key for key in cls.model_fields if key not in internal_fields}
