"""Shared fixtures: a local content server, zip builders and config factories."""

import io
import threading
import zipfile
from collections import Counter, deque
from pathlib import Path, PurePosixPath

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from asset_sync.models.config import SyncConfig


def make_zip(entries: dict[str, bytes], compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """Builds an in-memory zip archive; names ending in '/' become directories."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as archive:
        for name, data in entries.items():
            if name.endswith("/"):
                archive.writestr(zipfile.ZipInfo(name), b"")
            else:
                archive.writestr(name, data)
    return buffer.getvalue()


class FakeContentServer:
    """
    Serves canned responses per path. A path queued with several responses
    answers them in order and then repeats the last one.
    """

    def __init__(self):
        self.responses: dict[str, deque[tuple[int, bytes]]] = {}
        self.hits: Counter[str] = Counter()
        self.base_url = ""
        self.app = web.Application()
        self.app.router.add_route("GET", "/{tail:.*}", self._handle)

    def add(self, path: str, body: bytes | str, status: int = 200) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.responses.setdefault(path, deque()).append((status, body))

    async def _handle(self, request: web.Request) -> web.Response:
        path = request.path
        self.hits[path] += 1
        queue = self.responses.get(path)
        if not queue:
            return web.Response(status=404)
        status, body = queue[0] if len(queue) == 1 else queue.popleft()
        return web.Response(status=status, body=body)


class RecordingSink:
    """Extraction sink that remembers every call."""

    def __init__(self, fail_on: set[bytes] | None = None):
        self.calls: list[tuple[bytes, PurePosixPath, Path]] = []
        self.fail_on = fail_on or set()
        self._lock = threading.Lock()

    def extract(self, data: bytes, destination_dir: PurePosixPath, output_root: Path) -> None:
        if data in self.fail_on:
            raise ValueError("cannot decode entry")
        with self._lock:
            self.calls.append((data, destination_dir, output_root))


@pytest_asyncio.fixture
async def content_server():
    server = FakeContentServer()
    test_server = TestServer(server.app)
    await test_server.start_server()
    server.base_url = str(test_server.make_url("/")).rstrip("/")
    yield server
    await test_server.close()


@pytest_asyncio.fixture
async def session():
    async with aiohttp.ClientSession() as client_session:
        yield client_session


@pytest.fixture
def make_config(tmp_path):
    """Returns a factory for SyncConfig with fast retries and temp directories."""

    def _make(**overrides) -> SyncConfig:
        values = {
            "server_url": "http://content.invalid",
            "resource_version": "24-01-01",
            "output_dir": tmp_path / "out",
            "config_path": str(tmp_path / "config"),
            "retry_base_delay": 0.0,
            "retry_max_delay": 0.0,
            "retry_max_attempts": 3,
        }
        values.update(overrides)
        return SyncConfig(**values)

    return _make
