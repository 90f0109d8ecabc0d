"""
The main orchestrator for a sync run: manifest, plan, purge, download, persist.
"""

import functools
import logging

import aiohttp
from rich.markup import escape

from asset_sync.api.client import ManifestClient
from asset_sync.cli.progress_manager import ProgressManager
from asset_sync.media.archive import ArchiveDispatcher
from asset_sync.media.downloader import Downloader
from asset_sync.media.extraction import ExtractionSink, load_sink
from asset_sync.models.config import SyncConfig
from asset_sync.models.stats import SyncStats
from asset_sync.storage.cache import HashCacheStore
from asset_sync.utils.path import build_asset_url

from .planner import PURGE_DIR, DeltaPlanner, SyncMode, SyncPlan, purge_directory
from .scheduler import DownloadScheduler

log = logging.getLogger(__name__)


class SyncManager:
    """
    Orchestrates one sync run.

    The hash cache is read once before planning and written once, only after
    the whole batch has succeeded. Any failure before that point leaves the
    persisted cache untouched, so the next run plans the same delta again.
    """

    def __init__(
        self,
        config: SyncConfig,
        session: aiohttp.ClientSession,
        cache_store: HashCacheStore | None = None,
        sink: ExtractionSink | None = None,
        progress_manager: ProgressManager | None = None,
    ):
        self.config = config
        self.cache_store = cache_store or HashCacheStore(config.cache_file)
        self.client = ManifestClient(session)
        self.downloader = Downloader(session, config.retry_policy)
        self.dispatcher = ArchiveDispatcher(
            sink if sink is not None else load_sink(config.extractor),
            config.output_dir,
        )
        self.progress_manager = progress_manager
        self.stats = SyncStats(dry_run=config.dry_run)
        self.plan: SyncPlan | None = None

    async def resolve_resource_version(self) -> str:
        """The configured version wins; otherwise ask the version endpoint."""
        if self.config.resource_version:
            return self.config.resource_version
        version = await self.client.fetch_resource_version(self.config.version_url)
        return version.res_version

    async def execute(self) -> SyncStats:
        """
        Runs the sync end to end and returns its statistics.

        Raises:
            ManifestError: The manifest or version document could not be fetched.
            RetryExhaustedError: A download failed on every attempt.
            ArchiveCorruptError: A downloaded archive was unreadable.
        """
        try:
            await self._execute()
        finally:
            self.stats.finish()
        return self.stats

    async def _execute(self) -> None:
        whitelist = self.config.whitelist
        cache = self.cache_store.load()

        manifest = await self.client.fetch_manifest(self.config.effective_manifest_url)
        planner = DeltaPlanner(cache, whitelist, self.config.skip_unchanged)
        self.plan = plan = planner.plan(manifest)

        self.stats.mode = plan.mode.value
        self.stats.targets_planned = len(plan.targets)
        self.stats.packs_planned = plan.pack_count

        if self.config.dry_run:
            for target in plan.targets:
                log.info(f"  [dim]would fetch[/dim] {target.kind.value}: {escape(target.name)}")
            return

        resource_version = await self.resolve_resource_version()
        url_for = functools.partial(
            build_asset_url, self.config.server_url, resource_version
        )

        if plan.mode is SyncMode.INCREMENTAL:
            self.stats.purged_files = purge_directory(self.config.output_dir / PURGE_DIR)

        scheduler = DownloadScheduler(
            self.downloader,
            self.dispatcher,
            url_for,
            max_workers=self.config.max_workers,
            progress_manager=self.progress_manager,
        )
        try:
            result = await scheduler.run(plan.targets)
        finally:
            self.stats.targets_completed = scheduler.result.completed
            self.stats.bytes_downloaded = scheduler.result.bytes_downloaded
            self.stats.entries_extracted = scheduler.result.entries_extracted
            self.stats.extraction_failures = scheduler.result.extraction_failures

        cache.update_from_manifest(manifest, whitelist)
        self.cache_store.save(cache)
        self.stats.cache_entries = len(cache)
        self.stats.cache_persisted = True
        log.info(
            f"[green]✓ Synced {result.completed} targets; "
            f"hash cache now tracks {len(cache)} assets.[/green]"
        )
