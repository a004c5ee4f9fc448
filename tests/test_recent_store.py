"""
Tests for video_recall/recent_store.py

Exercises the list rules: cap, promote-to-front, self-healing load,
save/load round trip and graceful persistence failures.
"""

import json
import os
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from video_recall.config import Config
from video_recall.errors import SerializationFailedError, StoreError
from video_recall.file_reference import SecureFileReference
from video_recall.recent_entry import RecentEntry
from video_recall.recent_store import RecentStore
from video_recall.stores import JsonFileStore, MemoryStore


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _TickingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self):
        self.now = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


class _FailingWriteStore(MemoryStore):
    def set(self, key, value):
        raise StoreError("disk full")


def _make_video(folder: Path, name: str) -> Path:
    path = folder / name
    path.write_bytes(b"frames for " + name.encode())
    return path.resolve()


def _make_recent(store=None, **kwargs) -> RecentStore:
    kwargs.setdefault("clock", _TickingClock())
    return RecentStore(store if store is not None else MemoryStore(), **kwargs)


def _entry(path: Path, recent: RecentStore) -> RecentEntry:
    return RecentEntry.from_path(path, last_watched=recent._clock())


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestScenarios:
    def test_empty_store_loads_empty_list(self):
        assert _make_recent().load() == []

    def test_reopening_a_file_promotes_it(self, tmp_path):
        recent = _make_recent()
        file_a = _make_video(tmp_path, "a.mp4")
        file_b = _make_video(tmp_path, "b.mp4")

        first_a = _entry(file_a, recent)
        recent.add_or_promote(first_a)
        entry_b = _entry(file_b, recent)
        recent.add_or_promote(entry_b)
        result = recent.add_or_promote(_entry(file_a, recent))

        assert [e.resolved_path() for e in result] == [file_a, file_b]
        assert result[0].id == first_a.id
        assert result[0].last_watched == recent._clock.now
        assert result[0].last_watched > entry_b.last_watched
        assert recent.load() == result

    def test_eleventh_file_evicts_the_oldest(self, tmp_path):
        recent = _make_recent()
        videos = [_make_video(tmp_path, f"video{i:02d}.mp4") for i in range(11)]

        for video in videos:
            result = recent.add_or_promote(_entry(video, recent))

        assert len(result) == 10
        paths = [e.resolved_path() for e in recent.load()]
        assert videos[0] not in paths
        assert paths[0] == videos[-1]

    def test_deleted_file_is_dropped_and_stays_dropped(self, tmp_path):
        store = MemoryStore()
        recent = _make_recent(store)
        keep = _make_video(tmp_path, "keep.mp4")
        doomed = _make_video(tmp_path, "doomed.mp4")
        recent.add_or_promote(_entry(keep, recent))
        doomed_entry = _entry(doomed, recent)
        recent.add_or_promote(doomed_entry)

        doomed.unlink()
        cleaned = recent.load()
        assert [e.resolved_path() for e in cleaned] == [keep]

        recent.save(cleaned)
        persisted = json.loads(store.get(recent.key).decode("utf-8"))
        assert [item["id"] for item in persisted] == [cleaned[0].id]
        assert doomed_entry.id not in [e.id for e in recent.load()]


# ---------------------------------------------------------------------------
# List properties
# ---------------------------------------------------------------------------

class TestListProperties:
    def test_cap_holds_after_every_call(self, tmp_path):
        recent = _make_recent()
        videos = [_make_video(tmp_path, f"v{i}.mp4") for i in range(14)]
        order = videos + videos[3:8] + videos[:2]

        for video in order:
            recent.add_or_promote(_entry(video, recent))
            assert len(recent.load()) <= 10

    def test_promote_never_grows_the_list(self, tmp_path):
        recent = _make_recent()
        videos = [_make_video(tmp_path, f"v{i}.mp4") for i in range(3)]
        for video in videos:
            recent.add_or_promote(_entry(video, recent))

        before = recent.load()
        after = recent.add_or_promote(_entry(videos[1], recent))
        assert len(after) == len(before)
        assert after[0].id == before[1].id
        assert after[0].last_watched > before[1].last_watched

    def test_added_entry_is_first_after_load(self, tmp_path):
        recent = _make_recent()
        for i in range(5):
            entry = _entry(_make_video(tmp_path, f"v{i}.mp4"), recent)
            recent.add_or_promote(entry)
            assert recent.load()[0].matches(entry)

    def test_promote_by_id(self, tmp_path):
        recent = _make_recent()
        first = _entry(_make_video(tmp_path, "a.mp4"), recent)
        recent.add_or_promote(first)
        recent.add_or_promote(_entry(_make_video(tmp_path, "b.mp4"), recent))

        result = recent.add_or_promote(recent.load()[1])
        assert [e.id for e in result][0] == first.id
        assert len(result) == 2

    def test_save_load_round_trip(self, tmp_path):
        recent = _make_recent()
        entries = [
            RecentEntry.from_path(
                _make_video(tmp_path, f"ep{i}.mkv"),
                name=f"Episode {i}",
                last_watched=datetime(2025, 5, i + 1, 20, 15, tzinfo=timezone.utc),
            )
            for i in range(10)
        ]

        recent.save(entries)
        assert recent.load() == entries

    def test_duplicate_ids_in_storage_are_collapsed(self, tmp_path):
        store = MemoryStore()
        recent = _make_recent(store)
        entry = _entry(_make_video(tmp_path, "a.mp4"), recent)
        raw = json.dumps([entry.to_dict(), entry.to_dict()]).encode("utf-8")
        store.set(recent.key, raw)

        assert [e.id for e in recent.load()] == [entry.id]


# ---------------------------------------------------------------------------
# Failure handling
# ---------------------------------------------------------------------------

class TestCorruptState:
    @pytest.mark.parametrize("raw", [
        b"not json at all",
        b"\xff\xfe\xfd",
        b'{"id": "x"}',
        b'[{"id": "x"}]',
        b'[42]',
    ])
    def test_undecodable_state_loads_as_empty(self, raw):
        store = MemoryStore({RecentStore.DEFAULT_KEY: raw})
        assert _make_recent(store).load() == []

    def test_unreadable_store_loads_as_empty(self):
        class _BrokenStore(MemoryStore):
            def get(self, key):
                raise StoreError("cannot read")

        assert _make_recent(_BrokenStore()).load() == []

    def test_entry_with_invalid_bookmark_path_is_dropped(self, tmp_path):
        bookmark = json.dumps({
            "version": 1, "path": "/tmp/bad\x00name.mp4", "device": 1, "inode": 7,
        }).encode("utf-8")
        bad = RecentEntry(file_ref=SecureFileReference(bookmark_data=bookmark),
                          display_name="bad.mp4")
        recent = _make_recent()
        recent.save([bad])

        assert recent.load() == []

        good = _entry(_make_video(tmp_path, "good.mp4"), recent)
        assert recent.add_or_promote(good) == [good]

    def test_permission_error_reading_store_file_loads_as_empty(self, tmp_path, monkeypatch):
        def _denied(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        store = JsonFileStore(tmp_path / "recent.json")
        monkeypatch.setattr("video_recall.stores.open", _denied, raising=False)
        recent = _make_recent(store)

        assert recent.load() == []
        entry = _entry(_make_video(tmp_path, "a.mp4"), recent)
        assert recent.add_or_promote(entry) == [entry]

    def test_save_failure_raises_serialization_error(self, tmp_path):
        recent = _make_recent(_FailingWriteStore())
        entry = _entry(_make_video(tmp_path, "a.mp4"), recent)
        with pytest.raises(SerializationFailedError):
            recent.save([entry])

    def test_add_returns_list_even_if_save_fails(self, tmp_path):
        recent = _make_recent(_FailingWriteStore())
        entry = _entry(_make_video(tmp_path, "a.mp4"), recent)
        assert recent.add_or_promote(entry) == [entry]


class TestStaleReferences:
    def test_renamed_file_is_kept_and_reminted(self, tmp_path):
        recent = _make_recent()
        video = _make_video(tmp_path, "draft.mp4")
        entry = _entry(video, recent)
        recent.add_or_promote(entry)

        renamed = video.with_name("final.mp4")
        os.rename(video, renamed)

        loaded = recent.load()
        assert len(loaded) == 1
        assert loaded[0].id == entry.id
        assert loaded[0].display_name == "draft.mp4"
        assert loaded[0].last_watched == entry.last_watched
        resolved = loaded[0].file_ref.resolve()
        assert resolved.path == renamed
        assert not resolved.is_stale

    def test_stale_reference_kept_as_is_without_remint(self, tmp_path):
        recent = _make_recent(remint_stale=False)
        video = _make_video(tmp_path, "draft.mp4")
        entry = _entry(video, recent)
        recent.add_or_promote(entry)
        os.rename(video, video.with_name("final.mp4"))

        loaded = recent.load()
        assert loaded[0].file_ref == entry.file_ref
        assert loaded[0].file_ref.resolve().is_stale


# ---------------------------------------------------------------------------
# Remove / clear / construction
# ---------------------------------------------------------------------------

class TestRemoveAndClear:
    def _filled(self, tmp_path, count=3):
        recent = _make_recent()
        for i in range(count):
            recent.add_or_promote(_entry(_make_video(tmp_path, f"v{i}.mp4"), recent))
        return recent, recent.load()

    def test_remove_persists(self, tmp_path):
        recent, entries = self._filled(tmp_path)
        updated = recent.remove(entries, 1)
        assert [e.id for e in updated] == [entries[0].id, entries[2].id]
        assert recent.load() == updated

    @pytest.mark.parametrize("index", [3, 100, -1])
    def test_remove_out_of_bounds_is_noop(self, tmp_path, index):
        recent, entries = self._filled(tmp_path)
        assert recent.remove(entries, index) == entries
        assert recent.load() == entries

    def test_clear_forgets_everything(self, tmp_path):
        recent, _ = self._filled(tmp_path)
        assert recent.clear() == []
        assert recent.load() == []


class TestConstruction:
    def test_rejects_non_positive_cap(self):
        with pytest.raises(ValueError):
            RecentStore(MemoryStore(), max_entries=0)

    def test_from_config(self):
        config = Config()
        config.recent.max_entries = 3
        config.recent.store_key = "videos"
        recent = RecentStore.from_config(config, MemoryStore())
        assert recent.max_entries == 3
        assert recent.key == "videos"

    def test_custom_cap(self, tmp_path):
        recent = _make_recent(max_entries=2)
        for i in range(4):
            result = recent.add_or_promote(_entry(_make_video(tmp_path, f"v{i}.mp4"), recent))
        assert len(result) == 2


def test_concurrent_adds_keep_invariants(tmp_path):
    recent = RecentStore(MemoryStore())
    videos = [_make_video(tmp_path, f"v{i}.mp4") for i in range(6)]

    def worker():
        for video in videos * 2:
            recent.add_or_promote(RecentEntry.from_path(video))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    loaded = recent.load()
    assert len(loaded) == len(videos)
    assert len({e.id for e in loaded}) == len(loaded)
    assert {e.resolved_path() for e in loaded} == set(videos)
