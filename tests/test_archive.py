"""Tests for archive dispatch and the extraction boundary."""

import zipfile
from pathlib import PurePosixPath

import pytest
from conftest import RecordingSink, make_zip

from asset_sync.exceptions import ArchiveCorruptError, ConfigurationError
from asset_sync.media.archive import ArchiveDispatcher, entry_destination
from asset_sync.media.extraction import CallableSink, RawDumpSink, load_sink


class TestEntryDestination:
    """Test normalisation of entry paths into destination directories."""

    @pytest.mark.parametrize(
        "entry, expected",
        [
            ("arts/ui/common.ab", "arts/ui"),
            ("top.ab", "."),
            ("../../escape/x.ab", "escape"),
            ("/abs/y.ab", "abs"),
            ("win\\style\\z.ab", "win/style"),
            ("a/./b/../c.ab", "a/b"),
        ],
    )
    def test_destination(self, entry, expected):
        assert entry_destination(entry) == PurePosixPath(expected)


class TestArchiveDispatcher:
    """Test forwarding entries to the sink."""

    def test_forwards_every_file_entry(self, tmp_path):
        sink = RecordingSink()
        dispatcher = ArchiveDispatcher(sink, tmp_path)
        payload = make_zip(
            {
                "arts/ui/": b"",
                "arts/ui/common.ab": b"bundle-1",
                "root.ab": b"bundle-2",
            }
        )

        result = dispatcher.dispatch(payload, "pack_ui")

        assert result.entries == 2
        assert result.extracted == 2
        assert result.failures == 0
        assert sorted(sink.calls) == sorted(
            [
                (b"bundle-1", PurePosixPath("arts/ui"), tmp_path),
                (b"bundle-2", PurePosixPath("."), tmp_path),
            ]
        )

    def test_invalid_payload_is_corrupt(self, tmp_path):
        dispatcher = ArchiveDispatcher(RecordingSink(), tmp_path)

        with pytest.raises(ArchiveCorruptError) as exc_info:
            dispatcher.dispatch(b"<html>503 Service Unavailable</html>", "a1.ab")

        assert exc_info.value.archive_name == "a1.ab"
        assert exc_info.value.entry_index is None

    def test_unreadable_entry_is_corrupt(self, tmp_path):
        """A CRC mismatch on an entry names the archive and the entry index."""
        payload = make_zip({"x.ab": b"hello world" * 10}, compression=zipfile.ZIP_STORED)
        damaged = payload.replace(b"hello world", b"jello world", 1)
        dispatcher = ArchiveDispatcher(RecordingSink(), tmp_path)

        with pytest.raises(ArchiveCorruptError) as exc_info:
            dispatcher.dispatch(damaged, "pack_x")

        assert exc_info.value.archive_name == "pack_x"
        assert exc_info.value.entry_index == 0

    def test_sink_failure_is_isolated_per_entry(self, tmp_path):
        sink = RecordingSink(fail_on={b"bad"})
        dispatcher = ArchiveDispatcher(sink, tmp_path)
        payload = make_zip({"a.ab": b"good-1", "b.ab": b"bad", "c.ab": b"good-2"})

        result = dispatcher.dispatch(payload, "p1")

        assert result.entries == 3
        assert result.extracted == 2
        assert result.failures == 1
        assert sorted(call[0] for call in sink.calls) == [b"good-1", b"good-2"]

    @pytest.mark.asyncio
    async def test_dispatch_async_runs_in_thread(self, tmp_path):
        sink = RecordingSink()
        dispatcher = ArchiveDispatcher(sink, tmp_path)

        result = await dispatcher.dispatch_async(make_zip({"a.ab": b"1"}), "a.ab")

        assert result.extracted == 1


class TestSinks:
    """Test the built-in sink and extractor loading."""

    def test_raw_dump_sink_writes_under_destination(self, tmp_path):
        RawDumpSink().extract(b"data", PurePosixPath("arts/ui"), tmp_path)

        written = list((tmp_path / "arts" / "ui").iterdir())
        assert len(written) == 1
        assert written[0].suffix == ".bin"
        assert written[0].read_bytes() == b"data"

    def test_load_sink_defaults_to_raw_dump(self):
        assert isinstance(load_sink(None), RawDumpSink)

    def test_load_sink_wraps_function(self):
        sink = load_sink("os.path:join")

        assert isinstance(sink, CallableSink)

    def test_load_sink_unknown_module(self):
        with pytest.raises(ConfigurationError):
            load_sink("no_such_module_for_asset_sync:extract")

    def test_load_sink_unknown_attribute(self):
        with pytest.raises(ConfigurationError):
            load_sink("os.path:no_such_function")

    def test_load_sink_instantiates_class(self, tmp_path):
        sink = load_sink("conftest:RecordingSink")

        result = ArchiveDispatcher(sink, tmp_path).dispatch(
            make_zip({"a/b.ab": b"payload"}), "p1"
        )

        assert result.extracted == 1
        assert result.failures == 0
        assert sink.calls == [(b"payload", PurePosixPath("a"), tmp_path)]

    def test_load_sink_rejects_class_without_extract(self):
        with pytest.raises(ConfigurationError):
            load_sink("collections:OrderedDict")
