"""Tests for fetching the manifest and version documents."""

import json
import socket

import pytest

from asset_sync.api.client import ManifestClient
from asset_sync.exceptions import DecodeError, StatusError, TransportError

MANIFEST_BODY = {
    "abInfos": [
        {"name": "a1.ab", "md5": "h1", "pid": None, "totalSize": 12},
        {"name": "arts/b.ab", "md5": "h2", "pid": "p1"},
    ],
    "packInfos": [{"name": "p1", "md5": "ignored"}],
    "versionId": "24-01-01",
}


def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestManifestClient:
    """Test manifest retrieval and error mapping."""

    @pytest.mark.asyncio
    async def test_fetch_manifest(self, content_server, session):
        content_server.add("/manifest", json.dumps(MANIFEST_BODY))
        client = ManifestClient(session)

        manifest = await client.fetch_manifest(f"{content_server.base_url}/manifest")

        assert [a.name for a in manifest.assets] == ["a1.ab", "arts/b.ab"]
        assert manifest.assets[0].content_hash == "h1"
        assert manifest.assets[0].pack_id is None
        assert manifest.assets[1].pack_id == "p1"
        assert [p.name for p in manifest.packs] == ["p1"]
        assert content_server.hits["/manifest"] == 1

    @pytest.mark.asyncio
    async def test_non_success_status(self, content_server, session):
        content_server.add("/manifest", "oops", status=500)
        client = ManifestClient(session)

        with pytest.raises(StatusError) as exc_info:
            await client.fetch_manifest(f"{content_server.base_url}/manifest")

        assert exc_info.value.status == 500
        assert content_server.hits["/manifest"] == 1

    @pytest.mark.asyncio
    async def test_invalid_json(self, content_server, session):
        content_server.add("/manifest", "<html></html>")

        with pytest.raises(DecodeError):
            await ManifestClient(session).fetch_manifest(
                f"{content_server.base_url}/manifest"
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"abInfos": [{"name": "x"}], "packInfos": []},
            {"abInfos": [{"name": "a", "md5": "h"}]},
            {"packInfos": [{"name": "p1"}]},
        ],
        ids=["asset-without-md5", "missing-pack-list", "missing-asset-list"],
    )
    async def test_wrong_schema(self, content_server, session, body):
        content_server.add("/manifest", json.dumps(body))

        with pytest.raises(DecodeError):
            await ManifestClient(session).fetch_manifest(
                f"{content_server.base_url}/manifest"
            )

    @pytest.mark.asyncio
    async def test_unreachable_server(self, session):
        url = f"http://127.0.0.1:{unused_port()}/manifest"

        with pytest.raises(TransportError):
            await ManifestClient(session).fetch_manifest(url)

    @pytest.mark.asyncio
    async def test_fetch_resource_version(self, content_server, session):
        content_server.add(
            "/version", json.dumps({"resVersion": "24-05-01", "clientVersion": "2.2.1"})
        )

        version = await ManifestClient(session).fetch_resource_version(
            f"{content_server.base_url}/version"
        )

        assert version.res_version == "24-05-01"
        assert version.client_version == "2.2.1"
