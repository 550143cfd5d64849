"""Tests for refreshing a cache entry's last access time by renaming."""

from __future__ import annotations

from pathlib import Path

import msgspec
import pytest

from span_cache.codec import SpanCodec, create_cache_entry
from span_cache.errors import InvalidSpanError, SpanRenameError
from span_cache.spans import CacheEntry, create_closed_hole, create_lookup, touch_span
from span_cache.storage import LocalSpanStorage
from tests.test_helpers.span_storage import CACHE_DIR, FixedClock, MemorySpanStorage


def _stored_entry(storage: MemorySpanStorage, *, timestamp: int = 1_000) -> CacheEntry:
    file = CACHE_DIR / f"video%2f1.1024E.{timestamp}.v2.exo"
    storage.files[file] = 300
    return CacheEntry(
        key="video/1",
        position=1024,
        length=300,
        file=file,
        last_access_timestamp=timestamp,
        is_eos=True,
    )


def test_touch_renames_to_current_time(
    memory_codec: SpanCodec,
    memory_storage: MemorySpanStorage,
) -> None:
    """The new entry carries the clock time and the matching file."""
    entry = _stored_entry(memory_storage)
    touched = memory_codec.touch(entry)
    assert touched.last_access_timestamp == 5_000_000
    assert touched.file == CACHE_DIR / "video%2f1.1024E.5000000.v2.exo"
    assert (touched.key, touched.position, touched.length, touched.is_eos) == (
        entry.key,
        entry.position,
        entry.length,
        entry.is_eos,
    )
    assert set(memory_storage.files) == {touched.file}


def test_touch_leaves_original_value_untouched(
    memory_codec: SpanCodec,
    memory_storage: MemorySpanStorage,
) -> None:
    """Touching produces a new value."""
    entry = _stored_entry(memory_storage)
    memory_codec.touch(entry)
    assert entry.last_access_timestamp == 1_000


def test_touch_never_moves_timestamp_backwards(memory_storage: MemorySpanStorage) -> None:
    """A clock behind the stored timestamp keeps the stored value."""
    codec = SpanCodec(storage=memory_storage, clock=FixedClock(10))
    entry = _stored_entry(memory_storage, timestamp=1_000)
    assert codec.touch(entry).last_access_timestamp == 1_000


def test_failed_touch_raises_and_keeps_file(clock: FixedClock) -> None:
    """A failed rename surfaces as SpanRenameError and changes nothing."""
    storage = MemorySpanStorage(fail_renames=True)
    entry = _stored_entry(storage)
    codec = SpanCodec(storage=storage, clock=clock)
    with pytest.raises(SpanRenameError) as exc_info:
        codec.touch(entry)
    assert exc_info.value.source == entry.file
    assert set(storage.files) == {entry.file}


def test_touch_on_local_filesystem(local_codec: SpanCodec, tmp_path: Path) -> None:
    """Only the new name exists on disk after a touch."""
    old = tmp_path / "video.0.1.v2.exo"
    old.write_bytes(b"payload")
    entry = create_cache_entry(old, codec=local_codec)
    assert entry is not None
    touched = entry.touch(local_codec)
    assert not old.exists()
    assert touched.file.read_bytes() == b"payload"
    assert [path.name for path in tmp_path.iterdir()] == ["video.0.5000000.v2.exo"]
    reloaded = create_cache_entry(touched.file, codec=local_codec)
    assert reloaded is not None
    assert msgspec.structs.astuple(reloaded) == msgspec.structs.astuple(touched)


def test_touch_with_default_codec(tmp_path: Path) -> None:
    """Entries can be touched through the shared local codec."""
    old = tmp_path / "video.0.1.v2.exo"
    old.write_bytes(b"x")
    entry = create_cache_entry(old)
    assert entry is not None
    touched = entry.touch()
    assert touched.last_access_timestamp >= entry.last_access_timestamp
    assert touched.file.exists()


def test_touch_span_dispatches_to_entries(
    memory_codec: SpanCodec,
    memory_storage: MemorySpanStorage,
) -> None:
    """touch_span touches cache entries."""
    entry = _stored_entry(memory_storage)
    assert touch_span(entry, memory_codec).last_access_timestamp == 5_000_000


@pytest.mark.parametrize("span", [create_lookup("k", 0), create_closed_hole("k", 0, 4)])
def test_touch_span_rejects_uncached_spans(
    span: object,
    memory_codec: SpanCodec,
) -> None:
    """Spans without a backing file cannot be touched."""
    with pytest.raises(InvalidSpanError):
        touch_span(span, memory_codec)  # type: ignore[arg-type]


def test_local_rename_across_directories_fails(tmp_path: Path) -> None:
    """Renames stay within one directory."""
    source = tmp_path / "a.0.1.v2.exo"
    source.write_bytes(b"x")
    (tmp_path / "other").mkdir()
    with pytest.raises(SpanRenameError):
        LocalSpanStorage().rename(source, tmp_path / "other" / "a.0.2.v2.exo")
    assert source.exists()


def test_local_rename_of_missing_file_fails(tmp_path: Path) -> None:
    """Renaming a file that is gone raises SpanRenameError."""
    with pytest.raises(SpanRenameError):
        LocalSpanStorage().rename(tmp_path / "a.0.1.v2.exo", tmp_path / "a.0.2.v2.exo")
