"""Directory-scan entry point for recovering cache entries from file names."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from obs.otel.constants import AttributeName
from obs.otel.storage import storage_span
from obs.otel.tracing import set_span_attributes
from serde_msgspec import StructBaseStrict
from span_cache.codec import SpanCodec, default_codec
from span_cache.errors import SpanStorageError
from span_cache.settings import SpanCacheSettings, default_span_cache_settings
from span_cache.spans import CacheEntry

_LOGGER = logging.getLogger(__name__)


class SpanScanResult(StructBaseStrict, frozen=True):
    """Outcome of scanning one cache directory.

    ``entries`` is sorted by key, then position. ``upgraded`` lists the new
    names of files renamed from a legacy grammar, ``rejected`` the files left
    in place that are not cache entries, and ``removed`` the files deleted
    because they are not cache entries.
    """

    directory: Path
    entries: tuple[CacheEntry, ...] = ()
    upgraded: tuple[Path, ...] = ()
    rejected: tuple[Path, ...] = ()
    removed: tuple[Path, ...] = ()

    def by_key(self) -> Mapping[str, tuple[CacheEntry, ...]]:
        """Group entries by cache key, keeping position order.

        Returns
        -------
        Mapping[str, tuple[CacheEntry, ...]]
            Entries per key, sorted by position.
        """
        grouped: dict[str, list[CacheEntry]] = {}
        for entry in self.entries:
            grouped.setdefault(entry.key, []).append(entry)
        return {key: tuple(values) for key, values in grouped.items()}

    @property
    def total_bytes(self) -> int:
        """Return the number of cached bytes across all entries."""
        return sum(entry.length for entry in self.entries)


def scan_cache_directory(
    directory: Path | None = None,
    *,
    codec: SpanCodec | None = None,
    settings: SpanCacheSettings | None = None,
) -> SpanScanResult:
    """Recover the cache entries stored in ``directory``.

    Every regular file is loaded through the codec: legacy names are upgraded
    (unless disabled), version 2 names are decoded, and anything else is
    reported as rejected or, when ``settings.delete_invalid`` is set, removed.
    A file that cannot be removed is reported as rejected.

    Parameters
    ----------
    directory
        Cache directory; defaults to ``settings.root``.
    codec
        Codec used to decode and upgrade names.
    settings
        Scan settings; defaults to the environment-resolved settings.

    Returns
    -------
    SpanScanResult
        Entries and per-file outcomes of the scan.
    """
    resolved = settings or default_span_cache_settings()
    target = directory if directory is not None else resolved.root
    span_codec = codec or default_codec()
    entries: list[CacheEntry] = []
    upgraded: list[Path] = []
    rejected: list[Path] = []
    removed: list[Path] = []
    with storage_span(
        "span_cache.scan",
        operation="scan",
        attributes={AttributeName.DIRECTORY: target},
    ) as (span, _set_result):
        for file in span_codec.storage.list_files(target):
            entry = span_codec.load_entry(file, upgrade=resolved.upgrade_legacy)
            if entry is not None:
                entries.append(entry)
                if entry.file != file:
                    upgraded.append(entry.file)
                continue
            if not resolved.delete_invalid:
                rejected.append(file)
                continue
            try:
                span_codec.storage.remove(file)
            except SpanStorageError as exc:
                _LOGGER.warning("Leaving non-cache file %s in place: %s", file, exc)
                rejected.append(file)
                continue
            _LOGGER.info("Removed non-cache file %s", file)
            removed.append(file)
        set_span_attributes(
            span,
            {
                "spancache.entries": len(entries),
                "spancache.upgraded": len(upgraded),
                "spancache.rejected": len(rejected),
                "spancache.removed": len(removed),
            },
        )
    entries.sort()
    _LOGGER.debug(
        "Scanned %s: %d entries, %d upgraded, %d rejected, %d removed",
        target,
        len(entries),
        len(upgraded),
        len(rejected),
        len(removed),
    )
    return SpanScanResult(
        directory=target,
        entries=tuple(entries),
        upgraded=tuple(upgraded),
        rejected=tuple(rejected),
        removed=tuple(removed),
    )


__all__ = ["SpanScanResult", "scan_cache_directory"]
