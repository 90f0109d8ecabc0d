"""
Opens downloaded payloads as zip archives and forwards every entry to the
extraction sink.
"""

import asyncio
import io
import logging
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from asset_sync.exceptions import ArchiveCorruptError, ExtractionError

from .extraction import ExtractionSink

log = logging.getLogger(__name__)


def entry_destination(entry_name: str) -> PurePosixPath:
    """
    Directory an entry belongs in, relative to the output root.

    The entry path is normalised first: backslashes become separators, and
    absolute prefixes, '.' and '..' components are dropped, so the result can
    never point outside the output root.
    """
    parts = [
        part
        for part in entry_name.replace("\\", "/").split("/")
        if part not in ("", ".", "..") and not part.endswith(":")
    ]
    return PurePosixPath(*parts).parent if parts else PurePosixPath()


@dataclass
class DispatchResult:
    """Outcome of dispatching one archive."""

    archive_name: str
    entries: int = 0
    extracted: int = 0
    failures: int = 0


class ArchiveDispatcher:
    """
    Streams the entries of one archive payload into an :class:`ExtractionSink`.

    A payload that is not a zip archive, or an entry that cannot be read, raises
    :class:`ArchiveCorruptError`. A sink failure only affects its own entry: it
    is logged and counted, and the remaining entries are still dispatched.
    """

    def __init__(self, sink: ExtractionSink, output_root: Path):
        self.sink = sink
        self.output_root = output_root

    def dispatch(self, payload: bytes, origin_name: str) -> DispatchResult:
        """Blocking; run it through :meth:`dispatch_async` from the event loop."""
        try:
            archive = zipfile.ZipFile(io.BytesIO(payload))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, OSError) as e:
            raise ArchiveCorruptError(origin_name, f"not a zip archive ({e})") from e

        result = DispatchResult(archive_name=origin_name)
        with archive:
            for index, info in enumerate(archive.infolist()):
                if info.is_dir():
                    continue
                result.entries += 1
                try:
                    data = archive.read(info)
                except (
                    zipfile.BadZipFile,
                    zlib.error,
                    EOFError,
                    OSError,
                    RuntimeError,
                    NotImplementedError,
                ) as e:
                    raise ArchiveCorruptError(
                        origin_name, f"cannot read '{info.filename}' ({e})", index
                    ) from e

                destination = entry_destination(info.filename)
                try:
                    self._extract(data, destination, info.filename)
                    result.extracted += 1
                except ExtractionError as e:
                    result.failures += 1
                    log.error(f"[red]✗ {e}[/red]", exc_info=e.__cause__)

        log.debug(
            f"Dispatched {result.extracted}/{result.entries} entries "
            f"from '{origin_name}'."
        )
        return result

    def _extract(self, data: bytes, destination: PurePosixPath, entry_name: str) -> None:
        try:
            self.sink.extract(data, destination, self.output_root)
        except Exception as e:
            raise ExtractionError(f"Extraction of '{entry_name}' failed: {e}") from e

    async def dispatch_async(self, payload: bytes, origin_name: str) -> DispatchResult:
        """Runs :meth:`dispatch` in a worker thread so downloads keep flowing."""
        return await asyncio.to_thread(self.dispatch, payload, origin_name)
