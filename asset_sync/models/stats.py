"""
Dataclass for tracking sync run statistics.
"""

import time
from dataclasses import dataclass, field


@dataclass
class SyncStats:
    """Counters for a single sync run."""

    mode: str = ""
    dry_run: bool = False
    targets_planned: int = 0
    packs_planned: int = 0
    targets_completed: int = 0
    bytes_downloaded: int = 0
    entries_extracted: int = 0
    extraction_failures: int = 0
    purged_files: int = 0
    cache_entries: int = 0
    cache_persisted: bool = False
    _started_at: float = field(default_factory=time.monotonic, repr=False)
    _finished_at: float | None = field(default=None, repr=False)

    def finish(self) -> None:
        self._finished_at = time.monotonic()

    @property
    def duration_seconds(self) -> float:
        end = self._finished_at if self._finished_at is not None else time.monotonic()
        return end - self._started_at
