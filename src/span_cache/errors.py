"""Exception hierarchy for the span cache."""

from __future__ import annotations

from pathlib import Path


class SpanCacheError(RuntimeError):
    """Base error for span cache failures."""


class InvalidSpanError(SpanCacheError, ValueError):
    """Operation requested on a span variant that does not support it."""


class SpanStorageError(SpanCacheError):
    """Storage collaborator failure."""


class SpanRenameError(SpanStorageError):
    """Renaming a cache file failed; the source name is still authoritative."""

    def __init__(self, source: Path, target: Path, reason: str = "") -> None:
        self.source = source
        self.target = target
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to rename {source.name!r} to {target.name!r}{detail}")


__all__ = [
    "InvalidSpanError",
    "SpanCacheError",
    "SpanRenameError",
    "SpanStorageError",
]
