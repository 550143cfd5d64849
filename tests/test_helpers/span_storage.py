"""In-memory span storage and clock doubles for codec tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from span_cache.errors import SpanRenameError, SpanStorageError

CACHE_DIR = Path("/cache")


class MemorySpanStorage:
    """``SpanStorage`` that keeps file sizes in a dict.

    Parameters
    ----------
    files
        Initial files mapped to their sizes.
    fail_renames
        When set, every rename raises ``SpanRenameError`` and leaves the
        source in place.
    fail_removes
        When set, every removal raises ``SpanStorageError``.
    """

    def __init__(
        self,
        files: dict[Path, int] | None = None,
        *,
        fail_renames: bool = False,
        fail_removes: bool = False,
    ) -> None:
        self.files: dict[Path, int] = dict(files or {})
        self.fail_renames = fail_renames
        self.fail_removes = fail_removes
        self.renames: list[tuple[Path, Path]] = []

    def rename(self, source: Path, target: Path) -> None:
        if self.fail_renames:
            raise SpanRenameError(source, target, "rename disabled")
        if source not in self.files:
            raise SpanRenameError(source, target, "no such file")
        self.files[target] = self.files.pop(source)
        self.renames.append((source, target))

    def size(self, file: Path) -> int:
        try:
            return self.files[file]
        except KeyError:
            raise FileNotFoundError(file) from None

    def list_files(self, directory: Path) -> Iterator[Path]:
        yield from sorted(path for path in self.files if path.parent == directory)

    def remove(self, file: Path) -> None:
        if self.fail_removes:
            msg = f"Cannot remove cache file {file}: permission denied"
            raise SpanStorageError(msg)
        self.files.pop(file, None)


class FixedClock:
    """Millisecond clock returning a settable value."""

    def __init__(self, now_ms: int) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


__all__ = ["CACHE_DIR", "FixedClock", "MemorySpanStorage"]
