"""Storage naming interface used by the span codec."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

from span_cache.errors import SpanRenameError, SpanStorageError

_LOGGER = logging.getLogger(__name__)


@runtime_checkable
class SpanStorage(Protocol):
    """Operations the codec needs from the storage holding cache files."""

    def rename(self, source: Path, target: Path) -> None:
        """Atomically rename ``source`` to ``target`` within one directory.

        Raises
        ------
        SpanRenameError
            Raised when the rename did not happen.
        """
        ...

    def size(self, file: Path) -> int:
        """Return the size of ``file`` in bytes."""
        ...

    def list_files(self, directory: Path) -> Iterator[Path]:
        """Yield the regular files directly inside ``directory``."""
        ...

    def remove(self, file: Path) -> None:
        """Delete ``file``."""
        ...


class LocalSpanStorage:
    """``SpanStorage`` backed by the local filesystem."""

    def rename(self, source: Path, target: Path) -> None:
        """Rename ``source`` to ``target`` with ``os.replace``.

        Raises
        ------
        SpanRenameError
            Raised when the parent directories differ or the rename fails.
        """
        if source.parent != target.parent:
            raise SpanRenameError(source, target, "source and target directories differ")
        try:
            os.replace(source, target)
        except OSError as exc:
            raise SpanRenameError(source, target, exc.strerror or str(exc)) from exc

    def size(self, file: Path) -> int:
        """Return the size of ``file`` in bytes.

        Returns
        -------
        int
            File size in bytes.
        """
        return file.stat().st_size

    def list_files(self, directory: Path) -> Iterator[Path]:
        """Yield regular files in ``directory``, sorted by name.

        Yields
        ------
        Path
            Regular file inside ``directory``.

        Raises
        ------
        SpanStorageError
            Raised when the directory cannot be listed.
        """
        try:
            children = sorted(directory.iterdir())
        except OSError as exc:
            msg = f"Cannot list cache directory {directory}: {exc}"
            raise SpanStorageError(msg) from exc
        for child in children:
            if child.is_file():
                yield child

    def remove(self, file: Path) -> None:
        """Delete ``file``; a file that is already gone is not an error."""
        try:
            file.unlink()
        except FileNotFoundError:
            _LOGGER.debug("Cache file already removed: %s", file)
        except OSError as exc:
            msg = f"Cannot remove cache file {file}: {exc}"
            raise SpanStorageError(msg) from exc


__all__ = ["LocalSpanStorage", "SpanStorage"]
