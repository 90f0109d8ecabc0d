"""
The persisted name -> content hash record of previously synced assets.
"""

import json
import logging
import os
import tempfile
from collections.abc import Iterator, Mapping
from contextlib import suppress
from pathlib import Path

from asset_sync.models.manifest import UpdateManifest
from asset_sync.utils.whitelist import Whitelist

log = logging.getLogger(__name__)


class HashCache:
    """
    Mapping of asset name to the content hash it had when last synced.

    Only the sync manager mutates it, and only after a batch has completed.
    """

    def __init__(self, entries: Mapping[str, str] | None = None):
        self._entries: dict[str, str] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HashCache):
            return self._entries == other._entries
        return NotImplemented

    def __repr__(self) -> str:
        return f"HashCache({len(self._entries)} entries)"

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def is_current(self, name: str, content_hash: str) -> bool:
        """True when the cached hash for ``name`` equals ``content_hash``."""
        return self._entries.get(name) == content_hash

    def update_from_manifest(
        self, manifest: UpdateManifest, whitelist: Whitelist
    ) -> None:
        """
        Replaces every entry with the whitelisted assets of ``manifest``.
        Packs are not tracked individually.
        """
        self._entries = {
            asset.name: asset.content_hash
            for asset in manifest.assets
            if whitelist.passes(asset.name)
        }

    def as_dict(self) -> dict[str, str]:
        return dict(self._entries)


class HashCacheStore:
    """Loads and saves a :class:`HashCache` as a flat JSON object."""

    def __init__(self, cache_file: Path):
        self.cache_file = cache_file

    def load(self) -> HashCache:
        """
        Reads the cache file. A missing file is a cold start; an unreadable or
        malformed one is logged and treated the same way.
        """
        if not self.cache_file.is_file():
            log.debug(f"No hash cache at '{self.cache_file}', starting empty.")
            return HashCache()

        try:
            with open(self.cache_file, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            log.warning(
                f"[yellow]Could not read hash cache '{self.cache_file}': {e}. "
                "Starting with an empty cache.[/yellow]"
            )
            return HashCache()

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            log.warning(
                f"[yellow]Hash cache '{self.cache_file}' has an unexpected shape, "
                "ignoring it.[/yellow]"
            )
            return HashCache()

        log.debug(f"Loaded {len(data)} cached hashes from '{self.cache_file}'.")
        return HashCache(data)

    def save(self, cache: HashCache) -> None:
        """Writes the cache atomically so an interrupted save keeps the old file."""
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=".hash_cache.", suffix=".tmp", dir=self.cache_file.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(cache.as_dict(), f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.cache_file)
        except BaseException:
            with suppress(OSError):
                os.unlink(tmp_name)
            raise
        log.debug(f"Saved {len(cache)} hashes to '{self.cache_file}'.")

    def clear(self) -> bool:
        """Removes the persisted cache file."""
        try:
            self.cache_file.unlink(missing_ok=True)
            return True
        except OSError as e:
            log.error(f"Failed to clear hash cache: {e}")
            return False

