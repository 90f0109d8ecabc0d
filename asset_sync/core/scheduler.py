"""
Runs a batch of fetch targets concurrently and dispatches every payload.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from asset_sync.cli.progress_manager import ProgressManager
from asset_sync.media.archive import ArchiveDispatcher
from asset_sync.media.downloader import Downloader

from .planner import FetchTarget

log = logging.getLogger(__name__)


@dataclass
class BatchResult:
    completed: int = 0
    bytes_downloaded: int = 0
    entries_extracted: int = 0
    extraction_failures: int = 0


class DownloadScheduler:
    """
    Fans a batch out as one task per target, at most ``max_workers`` downloading
    at once, and waits for the whole batch.

    The batch is all-or-nothing from the caller's point of view: the first task
    that fails (retries exhausted, corrupt archive) cancels the downloads still
    running and its exception propagates out of :meth:`run`. Dispatches already
    handed to a worker thread cannot be interrupted, so :meth:`run` waits for
    them before raising. Work finished before that point is not rolled back.
    """

    def __init__(
        self,
        downloader: Downloader,
        dispatcher: ArchiveDispatcher,
        url_for: Callable[[str], str],
        max_workers: int = 8,
        progress_manager: ProgressManager | None = None,
    ):
        self.downloader = downloader
        self.dispatcher = dispatcher
        self.url_for = url_for
        self.semaphore = asyncio.Semaphore(max_workers)
        self.progress_manager = progress_manager
        self.result = BatchResult()
        self._dispatches: list[asyncio.Future] = []

    async def _process_target(self, target: FetchTarget) -> None:
        url = self.url_for(target.name)
        async with self.semaphore:
            log.debug(f"Fetching {target.kind.value} '{target.name}' from {url}")
            payload = await self.downloader.fetch_bytes(url)

        # Shielded: cancelling the task must not orphan the extraction thread.
        dispatch = asyncio.ensure_future(
            self.dispatcher.dispatch_async(payload, target.name)
        )
        self._dispatches.append(dispatch)
        dispatched = await asyncio.shield(dispatch)

        self.result.completed += 1
        self.result.bytes_downloaded += len(payload)
        self.result.entries_extracted += dispatched.extracted
        self.result.extraction_failures += dispatched.failures
        if self.progress_manager:
            self.progress_manager.advance(len(payload))

    async def run(self, targets: Sequence[FetchTarget]) -> BatchResult:
        """
        Downloads and dispatches every target.

        Raises:
            RetryExhaustedError: A download failed on every attempt.
            ArchiveCorruptError: A payload could not be read as an archive.
        """
        self.result = BatchResult()
        self._dispatches = []
        if not targets:
            return self.result

        if self.progress_manager:
            self.progress_manager.start_batch(len(targets))

        tasks = [
            asyncio.create_task(self._process_target(t), name=f"fetch:{t.name}")
            for t in targets
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            pending = [t for t in tasks if not t.done()]
            for task in pending:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            await asyncio.gather(*self._dispatches, return_exceptions=True)
            log.error(
                f"[red]Batch aborted: {self.result.completed}/{len(targets)} targets "
                f"finished, {len(pending)} cancelled.[/red]"
            )
            raise

        log.debug(f"Batch of {len(targets)} targets finished.")
        return self.result
