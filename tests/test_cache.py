"""Tests for the hash cache and its JSON persistence."""

import json

from asset_sync.models.manifest import UpdateManifest
from asset_sync.storage.cache import HashCache, HashCacheStore
from asset_sync.utils.whitelist import Whitelist

MANIFEST = UpdateManifest.model_validate(
    {
        "abInfos": [
            {"name": "arts/a.ab", "md5": "h-a", "pid": "p1"},
            {"name": "audio/b.ab", "md5": "h-b", "pid": None},
        ],
        "packInfos": [{"name": "p1"}],
    }
)


class TestHashCache:
    """Test in-memory cache behaviour."""

    def test_update_replaces_entries_with_manifest_assets(self):
        cache = HashCache({"removed.ab": "old"})

        cache.update_from_manifest(MANIFEST, Whitelist(None))

        assert cache.as_dict() == {"arts/a.ab": "h-a", "audio/b.ab": "h-b"}
        assert "p1" not in cache

    def test_update_applies_whitelist(self):
        cache = HashCache()

        cache.update_from_manifest(MANIFEST, Whitelist(["audio/"]))

        assert cache.as_dict() == {"audio/b.ab": "h-b"}

    def test_is_current(self):
        cache = HashCache({"arts/a.ab": "h-a"})

        assert cache.is_current("arts/a.ab", "h-a") is True
        assert cache.is_current("arts/a.ab", "h-new") is False
        assert cache.is_current("unknown.ab", "h-a") is False


class TestHashCacheStore:
    """Test loading and saving."""

    def test_missing_file_loads_empty(self, tmp_path):
        store = HashCacheStore(tmp_path / "hash_cache.json")

        assert store.load().is_empty

    def test_save_writes_flat_json_object(self, tmp_path):
        cache_file = tmp_path / "nested" / "hash_cache.json"
        store = HashCacheStore(cache_file)

        store.save(HashCache({"a1.ab": "h1"}))

        assert json.loads(cache_file.read_text(encoding="utf-8")) == {"a1.ab": "h1"}
        assert store.load() == HashCache({"a1.ab": "h1"})
        assert [p.name for p in cache_file.parent.iterdir()] == ["hash_cache.json"]

    def test_malformed_file_loads_empty(self, tmp_path):
        cache_file = tmp_path / "hash_cache.json"
        cache_file.write_text("{not json", encoding="utf-8")

        assert HashCacheStore(cache_file).load().is_empty

    def test_wrong_shape_loads_empty(self, tmp_path):
        cache_file = tmp_path / "hash_cache.json"
        cache_file.write_text(json.dumps(["a", "b"]), encoding="utf-8")

        assert HashCacheStore(cache_file).load().is_empty

    def test_clear_removes_file(self, tmp_path):
        cache_file = tmp_path / "hash_cache.json"
        store = HashCacheStore(cache_file)
        store.save(HashCache({"a": "b"}))

        assert store.clear() is True
        assert not cache_file.exists()
        assert store.clear() is True
