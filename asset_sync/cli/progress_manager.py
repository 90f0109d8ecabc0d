"""
Rich progress display for a sync batch: targets finished and bytes received.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from asset_sync.utils.formatting import format_size


class ProgressManager:
    """Tracks how many fetch targets of the current batch have been dispatched."""

    def __init__(self, console: Console, enabled: bool = True):
        self.console = console
        self.enabled = enabled
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            "•",
            TextColumn("{task.fields[received]}"),
            "•",
            TimeElapsedColumn(),
            console=console,
            transient=False,
            disable=not enabled,
        )
        self._task_id: TaskID | None = None
        self._bytes_received = 0

    async def __aenter__(self) -> "ProgressManager":
        self.progress.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.progress.stop()
        return False

    def start_batch(self, total_targets: int) -> None:
        self._bytes_received = 0
        self._task_id = self.progress.add_task(
            "[cyan]Syncing assets", total=total_targets, received="0 B"
        )

    def advance(self, payload_size: int) -> None:
        if self._task_id is None:
            return
        self._bytes_received += payload_size
        self.progress.update(
            self._task_id, advance=1, received=format_size(self._bytes_received)
        )
