"""
The extraction boundary: whatever turns raw archive entries into output files.

The sync engine never interprets entry bytes itself. It hands each entry to an
``ExtractionSink``; the built-in :class:`RawDumpSink` simply stores the bytes,
and a real extractor can be plugged in with ``extractor = "pkg.module:func"``.
"""

import hashlib
import importlib
import inspect
import logging
from collections.abc import Callable
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

from asset_sync.exceptions import ConfigurationError

log = logging.getLogger(__name__)

ExtractFunc = Callable[[bytes, PurePosixPath, Path], object]


@runtime_checkable
class ExtractionSink(Protocol):
    def extract(
        self, data: bytes, destination_dir: PurePosixPath, output_root: Path
    ) -> None: ...


class RawDumpSink:
    """Writes each entry to ``<output_root>/<destination_dir>/<md5>.bin`` unchanged."""

    def extract(
        self, data: bytes, destination_dir: PurePosixPath, output_root: Path
    ) -> None:
        target_dir = output_root / destination_dir
        target_dir.mkdir(parents=True, exist_ok=True)
        digest = hashlib.md5(data).hexdigest()  # noqa: S324
        (target_dir / f"{digest}.bin").write_bytes(data)


class CallableSink:
    """Adapts a plain ``extract(data, destination_dir, output_root)`` function."""

    def __init__(self, func: ExtractFunc, name: str):
        self._func = func
        self.name = name

    def extract(
        self, data: bytes, destination_dir: PurePosixPath, output_root: Path
    ) -> None:
        self._func(data, destination_dir, output_root)

    def __repr__(self) -> str:
        return f"CallableSink({self.name})"


def load_sink(import_path: str | None) -> ExtractionSink:
    """
    Resolves the configured extractor.

    Args:
        import_path: 'package.module:function' or 'package.module:SinkClass',
            or None for the raw dump sink. A class is instantiated without
            arguments.

    Raises:
        ConfigurationError: The module or function cannot be found, or a class
            cannot be used as a sink.
    """
    if not import_path:
        return RawDumpSink()

    module_name, _, attr = import_path.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(
            f"Could not import extractor module '{module_name}': {e}"
        ) from e

    target = getattr(module, attr, None)
    if target is None:
        raise ConfigurationError(
            f"Extractor module '{module_name}' has no attribute '{attr}'."
        )
    if inspect.isclass(target):
        if not issubclass(target, ExtractionSink):
            raise ConfigurationError(
                f"Extractor class '{import_path}' has no extract() method."
            )
        try:
            sink = target()
        except Exception as e:
            raise ConfigurationError(
                f"Could not instantiate extractor '{import_path}': {e}"
            ) from e
        log.debug(f"Using extractor class '{import_path}'.")
        return sink
    if isinstance(target, ExtractionSink):
        return target
    if not callable(target):
        raise ConfigurationError(f"Extractor '{import_path}' is not callable.")

    log.debug(f"Using extractor '{import_path}'.")
    return CallableSink(target, import_path)
