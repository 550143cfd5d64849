"""File name codec for persisted cache spans.

A cached span's identity and recency live in the name of its backing file::

    <escapedKey>.<position>[E].<lastAccessTimestamp>.v2.exo

Version 1 names (``<rawKey>.<position>.<lastAccessTimestamp>.v1.exo``, key not
escaped, no end-of-stream marker) are still recognised and renamed to the
version 2 grammar when encountered. Additional legacy grammars are supported
by appending a ``FileNameFormat`` to the codec's legacy formats.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import cache
from typing import TypeAlias
from pathlib import Path

import msgspec

from obs.otel.constants import AttributeName
from obs.otel.metrics import record_rejected_name
from obs.otel.storage import storage_span
from obs.otel.tracing import record_exception
from serde_msgspec import StructBaseStrict
from span_cache.constants import (
    CACHE_FILE_PATTERN_V1,
    CACHE_FILE_PATTERN_V2,
    EOS_MARKER,
    FIELD_DELIMITER,
    MAX_INT64,
    V2_SUFFIX,
)
from span_cache.errors import InvalidSpanError, SpanRenameError
from span_cache.spans import CacheEntry
from span_cache.storage import LocalSpanStorage, SpanStorage
from utils.file_names import escape_file_name, unescape_file_name

_LOGGER = logging.getLogger(__name__)

KeyEscaper: TypeAlias = Callable[[str], str]
KeyUnescaper: TypeAlias = Callable[[str], str | None]
Clock: TypeAlias = Callable[[], int]


class FileNameFields(StructBaseStrict, frozen=True):
    """Span metadata decoded from a cache file name."""

    key: str
    position: int
    last_access_timestamp: int
    is_eos: bool = False
    version: int = 2


def _parse_int64(text: str) -> int | None:
    value = int(text)
    if value > MAX_INT64:
        return None
    return value


@dataclass(frozen=True)
class FileNameFormat:
    """One generation of the cache file name grammar."""

    version: int
    pattern: re.Pattern[str]
    escaped_keys: bool

    def matches(self, name: str) -> bool:
        """Return whether ``name`` has the shape of this grammar."""
        return self.pattern.fullmatch(name) is not None

    def parse(self, name: str, *, unescape: KeyUnescaper) -> FileNameFields | None:
        """Decode ``name`` under this grammar.

        Returns
        -------
        FileNameFields | None
            Decoded fields, or ``None`` when the name does not match, the key
            cannot be unescaped, or a numeric field overflows 64 bits.
        """
        match = self.pattern.fullmatch(name)
        if match is None:
            return None
        raw_key = match.group("key")
        key = unescape(raw_key) if self.escaped_keys else raw_key
        if not key:
            return None
        position = _parse_int64(match.group("position"))
        timestamp = _parse_int64(match.group("timestamp"))
        if position is None or timestamp is None:
            return None
        groups = match.groupdict()
        return FileNameFields(
            key=key,
            position=position,
            last_access_timestamp=timestamp,
            is_eos=groups.get("eos") == EOS_MARKER,
            version=self.version,
        )


FORMAT_V1 = FileNameFormat(version=1, pattern=CACHE_FILE_PATTERN_V1, escaped_keys=False)
FORMAT_V2 = FileNameFormat(version=2, pattern=CACHE_FILE_PATTERN_V2, escaped_keys=True)
LEGACY_FORMATS: tuple[FileNameFormat, ...] = (FORMAT_V1,)


def wall_clock_ms() -> int:
    """Return the current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class SpanCodec:
    """Encode span metadata into cache file names and decode it back.

    Parameters
    ----------
    storage
        Storage naming collaborator used for renames and size queries.
    escape, unescape
        Reversible key escaping pair. ``unescape`` must return ``None`` for
        malformed input.
    clock
        Millisecond wall clock used by ``touch``.
    legacy_formats
        Older grammars tried in order by ``upgrade``.
    """

    def __init__(
        self,
        *,
        storage: SpanStorage | None = None,
        escape: KeyEscaper = escape_file_name,
        unescape: KeyUnescaper = unescape_file_name,
        clock: Clock = wall_clock_ms,
        legacy_formats: Sequence[FileNameFormat] = LEGACY_FORMATS,
    ) -> None:
        self._storage = storage if storage is not None else LocalSpanStorage()
        self._escape = escape
        self._unescape = unescape
        self._clock = clock
        self._legacy_formats = tuple(legacy_formats)

    @property
    def storage(self) -> SpanStorage:
        """Return the storage collaborator."""
        return self._storage

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def file_name(
        self,
        key: str,
        position: int,
        last_access_timestamp: int,
        *,
        is_eos: bool = False,
    ) -> str:
        """Return the version 2 file name for a cached span.

        Returns
        -------
        str
            ``<escapedKey>.<position>[E].<lastAccessTimestamp>.v2.exo``.

        Raises
        ------
        InvalidSpanError
            Raised for an empty key, or a position or timestamp outside
            ``[0, 2**63 - 1]``.
        """
        if not key:
            msg = "Cache key must be non-empty."
            raise InvalidSpanError(msg)
        if not (0 <= position <= MAX_INT64 and 0 <= last_access_timestamp <= MAX_INT64):
            msg = (
                f"Position and last access timestamp must be in [0, {MAX_INT64}], got "
                f"{position} and {last_access_timestamp}."
            )
            raise InvalidSpanError(msg)
        eos = EOS_MARKER if is_eos else ""
        return (
            f"{self._escape(key)}{FIELD_DELIMITER}{position}{eos}"
            f"{FIELD_DELIMITER}{last_access_timestamp}{V2_SUFFIX}"
        )

    def cache_file(
        self,
        directory: Path,
        key: str,
        position: int,
        last_access_timestamp: int,
        *,
        is_eos: bool = False,
    ) -> Path:
        """Return the path of the version 2 cache file inside ``directory``."""
        return directory / self.file_name(key, position, last_access_timestamp, is_eos=is_eos)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode_name(self, name: str) -> FileNameFields | None:
        """Decode a version 2 file name without touching storage.

        Returns
        -------
        FileNameFields | None
            Decoded fields, or ``None`` when ``name`` is not a version 2 cache
            file name.
        """
        fields = FORMAT_V2.parse(name, unescape=self._unescape)
        if fields is None:
            reason = "fields" if FORMAT_V2.matches(name) else "format"
            _LOGGER.debug("Not a cache file name (%s): %r", reason, name)
            record_rejected_name(reason)
        return fields

    def decode_entry(self, file: Path) -> CacheEntry | None:
        """Decode the cache entry stored in ``file``.

        Returns
        -------
        CacheEntry | None
            Entry whose ``length`` is the file size, or ``None`` when the name
            is not a version 2 cache file name or the file has disappeared.
        """
        fields = self.decode_name(file.name)
        if fields is None:
            return None
        return self._entry_from_fields(file, fields)

    def _entry_from_fields(self, file: Path, fields: FileNameFields) -> CacheEntry | None:
        try:
            length = self._storage.size(file)
        except FileNotFoundError:
            _LOGGER.debug("Cache file vanished before it could be sized: %s", file)
            record_rejected_name("missing")
            return None
        return CacheEntry(
            key=fields.key,
            position=fields.position,
            length=length,
            file=file,
            last_access_timestamp=fields.last_access_timestamp,
            is_eos=fields.is_eos,
        )

    def _match_legacy(self, name: str) -> FileNameFields | None:
        for legacy in self._legacy_formats:
            fields = legacy.parse(name, unescape=self._unescape)
            if fields is not None:
                return fields
        return None

    # ------------------------------------------------------------------
    # Storage side effects
    # ------------------------------------------------------------------

    def upgrade(self, file: Path) -> Path:
        """Rename a legacy cache file to the version 2 grammar.

        Parameters
        ----------
        file
            Cache file of any grammar.

        Returns
        -------
        Path
            The renamed file, or ``file`` itself when it is not a legacy name
            or the rename failed. A failed upgrade is retried on a later call.
        """
        fields = self._match_legacy(file.name)
        if fields is None:
            return file
        target = self.cache_file(
            file.parent,
            fields.key,
            fields.position,
            fields.last_access_timestamp,
            is_eos=False,
        )
        with storage_span(
            "span_cache.upgrade",
            operation="upgrade",
            attributes={AttributeName.FORMAT_VERSION: fields.version},
        ) as (span, set_result):
            try:
                self._storage.rename(file, target)
            except SpanRenameError as exc:
                set_result("error")
                record_exception(span, exc)
                _LOGGER.warning("Leaving legacy cache file %s in place: %s", file.name, exc)
                return file
        _LOGGER.info("Upgraded cache file %s to %s", file.name, target.name)
        return target

    def load_entry(self, file: Path, *, upgrade: bool = True) -> CacheEntry | None:
        """Load a cache entry at directory-scan time.

        Legacy names are upgraded first when ``upgrade`` is set. A legacy file
        that was not (or could not be) renamed is returned under its legacy
        name so it stays usable for the current session.

        Returns
        -------
        CacheEntry | None
            The decoded entry, or ``None`` when ``file`` is not a cache file.
        """
        if upgrade:
            upgraded = self.upgrade(file)
            if upgraded != file:
                return self.decode_entry(upgraded)
        legacy = self._match_legacy(file.name)
        if legacy is not None:
            return self._entry_from_fields(file, legacy)
        return self.decode_entry(file)

    def touch(self, entry: CacheEntry) -> CacheEntry:
        """Rename ``entry``'s file to record the current time as its last access.

        The new timestamp never goes below the entry's current one. No new
        value is produced unless the rename succeeded.

        Returns
        -------
        CacheEntry
            Entry with the new timestamp and file.

        Raises
        ------
        SpanRenameError
            Raised when the rename fails; ``entry`` remains valid.
        """
        now = max(self._clock(), entry.last_access_timestamp)
        target = self.cache_file(
            entry.file.parent,
            entry.key,
            entry.position,
            now,
            is_eos=entry.is_eos,
        )
        with storage_span("span_cache.touch", operation="touch"):
            self._storage.rename(entry.file, target)
        return msgspec.structs.replace(entry, file=target, last_access_timestamp=now)


@cache
def default_codec() -> SpanCodec:
    """Return the shared codec backed by the local filesystem.

    Returns
    -------
    SpanCodec
        Codec with the default escaper, wall clock and legacy formats.
    """
    return SpanCodec()


def create_cache_entry(file: Path, *, codec: SpanCodec | None = None) -> CacheEntry | None:
    """Create a cache entry from an existing version 2 cache file.

    Returns
    -------
    CacheEntry | None
        The entry, or ``None`` when the file name is not correctly formatted.
    """
    return (codec or default_codec()).decode_entry(file)


__all__ = [
    "FORMAT_V1",
    "FORMAT_V2",
    "LEGACY_FORMATS",
    "FileNameFields",
    "FileNameFormat",
    "SpanCodec",
    "create_cache_entry",
    "default_codec",
    "wall_clock_ms",
]
