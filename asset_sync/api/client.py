"""
Async client for the JSON documents served by the content endpoint.
"""

import asyncio
import json
import logging
import time
from typing import Any

import aiohttp
from pydantic import ValidationError

from asset_sync.exceptions import DecodeError, StatusError, TransportError
from asset_sync.models.manifest import ResourceVersion, UpdateManifest

log = logging.getLogger(__name__)


class ManifestClient:
    """
    Fetches and parses the update manifest and the version document.

    Every call is a single request; retrying a failed fetch is left to the caller.
    """

    def __init__(self, session: aiohttp.ClientSession):
        """
        Args:
            session: Shared HTTP session, owned by the caller.
        """
        self._session = session

    async def _get_json(self, url: str) -> Any:
        """Performs one GET and decodes the body as JSON."""
        start_time = time.monotonic()
        try:
            async with self._session.get(url) as r:
                if not 200 <= r.status < 300:
                    raise StatusError(url, r.status)
                body = await r.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Could not fetch {url}: {e!r}") from e

        duration_ms = (time.monotonic() - start_time) * 1000
        log.debug(f"GET {url} -> {len(body)} bytes in {duration_ms:.0f} ms")

        try:
            return json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Response from {url} is not valid JSON: {e}") from e

    async def fetch_manifest(self, url: str) -> UpdateManifest:
        """
        Retrieves the update manifest.

        Raises:
            TransportError: The server could not be reached.
            StatusError: The server answered with a non-2xx status.
            DecodeError: The body is not a manifest.
        """
        data = await self._get_json(url)
        try:
            manifest = UpdateManifest.model_validate(data)
        except ValidationError as e:
            raise DecodeError(f"Manifest from {url} has an unexpected shape:\n{e}") from e

        log.info(
            f"Manifest lists [cyan]{len(manifest.assets)}[/cyan] assets in "
            f"[cyan]{len(manifest.packs)}[/cyan] packs."
        )
        return manifest

    async def fetch_resource_version(self, url: str) -> ResourceVersion:
        """Retrieves the version document that names the current asset directory."""
        data = await self._get_json(url)
        try:
            version = ResourceVersion.model_validate(data)
        except ValidationError as e:
            raise DecodeError(
                f"Version document from {url} has an unexpected shape:\n{e}"
            ) from e
        log.debug(f"Remote resource version is '{version.res_version}'.")
        return version
