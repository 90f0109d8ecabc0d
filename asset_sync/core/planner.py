"""
Decides which packs and assets a run has to fetch.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from asset_sync.models.manifest import UpdateManifest
from asset_sync.storage.cache import HashCache
from asset_sync.utils.whitelist import Whitelist

log = logging.getLogger(__name__)

# Derived UI atlas references cannot be tracked by hash and are rebuilt on
# every incremental sync.
PURGE_DIR = Path("torappu", "dynamicassets", "arts", "charportraits", "UIAtlasTextureRef")


class SyncMode(Enum):
    """How a run selects its fetch targets."""

    COLD_START = "cold_start"  # Whole packs plus packless assets
    INCREMENTAL = "incremental"  # Every whitelisted asset


class SourceKind(Enum):
    PACK = "pack"
    LOOSE_ASSET = "loose_asset"


@dataclass(frozen=True)
class FetchTarget:
    """One archive to download; ``kind`` never changes how it is scheduled."""

    name: str
    kind: SourceKind


@dataclass
class SyncPlan:
    mode: SyncMode
    targets: list[FetchTarget] = field(default_factory=list)
    skipped_unchanged: int = 0

    @property
    def pack_count(self) -> int:
        return sum(1 for t in self.targets if t.kind is SourceKind.PACK)


def select_mode(cache: HashCache, whitelist: Whitelist) -> SyncMode:
    """Cold start only for an empty cache with no whitelist configured."""
    if cache.is_empty and not whitelist.is_configured:
        return SyncMode.COLD_START
    return SyncMode.INCREMENTAL


class DeltaPlanner:
    """Turns a manifest plus the local cache into the list of fetch targets."""

    def __init__(
        self,
        cache: HashCache,
        whitelist: Whitelist,
        skip_unchanged: bool = False,
    ):
        """
        Args:
            cache: Hashes recorded by the last successful run.
            whitelist: Restricts which asset names are eligible.
            skip_unchanged: In incremental mode, leave out assets whose manifest
                hash matches the cached one.
        """
        self.cache = cache
        self.whitelist = whitelist
        self.skip_unchanged = skip_unchanged

    def plan(self, manifest: UpdateManifest) -> SyncPlan:
        mode = select_mode(self.cache, self.whitelist)
        if mode is SyncMode.COLD_START:
            plan = self._plan_cold_start(manifest)
        else:
            plan = self._plan_incremental(manifest)

        log.info(
            f"Planned [bold]{mode.value}[/bold] sync: {len(plan.targets)} targets "
            f"({plan.pack_count} packs)."
        )
        if plan.skipped_unchanged:
            log.info(f"Skipping {plan.skipped_unchanged} unchanged assets.")
        return plan

    def _plan_cold_start(self, manifest: UpdateManifest) -> SyncPlan:
        targets = [FetchTarget(pack.name, SourceKind.PACK) for pack in manifest.packs]
        targets.extend(
            FetchTarget(asset.name, SourceKind.LOOSE_ASSET)
            for asset in manifest.packless_assets()
            if self.whitelist.passes(asset.name)
        )
        return SyncPlan(SyncMode.COLD_START, targets)

    def _plan_incremental(self, manifest: UpdateManifest) -> SyncPlan:
        plan = SyncPlan(SyncMode.INCREMENTAL)
        for asset in manifest.assets:
            if not self.whitelist.passes(asset.name):
                continue
            if self.skip_unchanged and self.cache.is_current(
                asset.name, asset.content_hash
            ):
                plan.skipped_unchanged += 1
                continue
            plan.targets.append(FetchTarget(asset.name, SourceKind.LOOSE_ASSET))
        return plan


def purge_directory(directory: Path) -> int:
    """
    Deletes the regular files directly inside ``directory``.

    Failures are logged and never raised. Returns the number of files removed.
    """
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        log.warning(f"[yellow]Could not list '{directory}' for purging: {e}[/yellow]")
        return 0

    removed = 0
    for path in entries:
        try:
            if path.is_file():
                path.unlink()
                removed += 1
        except OSError as e:
            log.warning(f"[yellow]Could not delete '{path}': {e}[/yellow]")

    log.info(f"Purged {removed} files from '{directory}'.")
    return removed
