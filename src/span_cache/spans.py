"""Span value types for the byte-range cache.

A span is one of four tagged variants:

- ``LookupKey``: a comparison probe used to query the cache index.
- ``OpenHole``: a range known not to be cached whose extent is unknown.
- ``ClosedHole``: a range known not to be cached with a known extent.
- ``CacheEntry``: a range whose bytes are stored in a local file.

All variants expose the same attribute surface (``key``, ``position``,
``length``, ``is_cached``, ``file``, ``last_access_timestamp``, ``is_eos``) and
share a total ordering on ``(key, position)``. Values are immutable; operations
that change a span return a new value.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

from serde_msgspec import StructBaseHotPath
from span_cache.constants import MAX_INT64, OPEN_ENDED, UNSET_TIMESTAMP
from span_cache.errors import InvalidSpanError

if TYPE_CHECKING:
    from span_cache.codec import SpanCodec


def _require_non_negative(name: str, value: int) -> None:
    if value < 0 or value > MAX_INT64:
        msg = f"{name} must be in [0, {MAX_INT64}], got {value}."
        raise InvalidSpanError(msg)


class _SpanBase(StructBaseHotPath, tag=True, tag_field="kind", frozen=True, cache_hash=False):
    """Fields and ordering shared by every span variant.

    Equality and hashing follow the ordering: spans with the same key and
    position are equal whatever their variant or remaining fields, so a
    lookup probe finds the entry it addresses in a sorted container.
    """

    key: str
    position: int

    def __post_init__(self) -> None:
        if not self.key:
            msg = "Span key must be non-empty."
            raise InvalidSpanError(msg)
        _require_non_negative("position", self.position)

    def is_open_ended(self) -> bool:
        """Return whether the span has no known extent.

        Returns
        -------
        bool
            ``True`` when ``length`` is the open-ended sentinel.
        """
        return self.length == OPEN_ENDED  # type: ignore[attr-defined]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _SpanBase):
            return NotImplemented
        return span_sort_key(self) == span_sort_key(other)

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, _SpanBase):
            return NotImplemented
        return span_sort_key(self) != span_sort_key(other)

    def __hash__(self) -> int:
        return hash(span_sort_key(self))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, _SpanBase):
            return NotImplemented
        return span_sort_key(self) < span_sort_key(other)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, _SpanBase):
            return NotImplemented
        return span_sort_key(self) <= span_sort_key(other)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, _SpanBase):
            return NotImplemented
        return span_sort_key(self) > span_sort_key(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, _SpanBase):
            return NotImplemented
        return span_sort_key(self) >= span_sort_key(other)


class _UncachedSpan(_SpanBase, frozen=True):
    """Span variants that have no backing file."""

    @property
    def is_cached(self) -> bool:
        return False

    @property
    def file(self) -> Path | None:
        return None

    @property
    def last_access_timestamp(self) -> int:
        return UNSET_TIMESTAMP

    @property
    def is_eos(self) -> bool:
        return False


class LookupKey(_UncachedSpan, tag="lookup", frozen=True):
    """Probe used to look up spans of a key at a position; never persisted."""

    @property
    def length(self) -> int:
        return OPEN_ENDED


class OpenHole(_UncachedSpan, tag="open_hole", frozen=True):
    """Uncached range extending to the next known span or the end of stream."""

    @property
    def length(self) -> int:
        return OPEN_ENDED


class ClosedHole(_UncachedSpan, tag="closed_hole", frozen=True):
    """Uncached range with a known extent."""

    length: int

    def __post_init__(self) -> None:
        super().__post_init__()
        _require_non_negative("length", self.length)


class CacheEntry(_SpanBase, tag="cache_entry", frozen=True):
    """Range whose bytes are stored in ``file``.

    The file name encodes ``key``, ``position``, ``last_access_timestamp`` and
    ``is_eos``; ``length`` is the size of the file.
    """

    length: int
    file: Path
    last_access_timestamp: int
    is_eos: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        _require_non_negative("length", self.length)
        _require_non_negative("last_access_timestamp", self.last_access_timestamp)

    @property
    def is_cached(self) -> bool:
        return True

    def touch(self, codec: SpanCodec | None = None) -> CacheEntry:
        """Rename the backing file to record a new last access time.

        Parameters
        ----------
        codec
            Codec used to build the new name and perform the rename. Defaults
            to the shared local-filesystem codec.

        Returns
        -------
        CacheEntry
            Entry pointing at the renamed file. ``self`` is left untouched and
            remains valid if the rename fails.
        """
        if codec is None:
            from span_cache.codec import default_codec

            codec = default_codec()
        return codec.touch(self)


Span: TypeAlias = LookupKey | OpenHole | ClosedHole | CacheEntry


def create_lookup(key: str, position: int) -> LookupKey:
    """Return a lookup probe for ``key`` at ``position``."""
    return LookupKey(key=key, position=position)


def create_open_hole(key: str, position: int) -> OpenHole:
    """Return an open-ended hole for ``key`` starting at ``position``."""
    return OpenHole(key=key, position=position)


def create_closed_hole(key: str, position: int, length: int) -> ClosedHole:
    """Return a hole of known ``length`` for ``key`` starting at ``position``."""
    return ClosedHole(key=key, position=position, length=length)


def span_sort_key(span: Span | _SpanBase) -> tuple[str, int]:
    """Return the ordering key of a span.

    Returns
    -------
    tuple[str, int]
        ``(key, position)``; keys compare lexicographically, positions
        numerically.
    """
    return span.key, span.position


def compare_spans(left: Span, right: Span) -> int:
    """Three-way comparison of two spans by key, then position.

    Returns
    -------
    int
        Negative, zero or positive. Spans with equal key and position compare
        equal whatever their variant or remaining fields.
    """
    left_key = span_sort_key(left)
    right_key = span_sort_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def touch_span(span: Span, codec: SpanCodec | None = None) -> CacheEntry:
    """Touch ``span`` when it is a cache entry.

    Returns
    -------
    CacheEntry
        Entry with the refreshed last access timestamp.

    Raises
    ------
    InvalidSpanError
        Raised when ``span`` has no backing file.
    """
    if not isinstance(span, CacheEntry):
        msg = f"Cannot touch a {type(span).__name__}; only cache entries have a backing file."
        raise InvalidSpanError(msg)
    return span.touch(codec)


__all__ = [
    "CacheEntry",
    "ClosedHole",
    "LookupKey",
    "OpenHole",
    "Span",
    "compare_spans",
    "create_closed_hole",
    "create_lookup",
    "create_open_hole",
    "span_sort_key",
    "touch_span",
]
