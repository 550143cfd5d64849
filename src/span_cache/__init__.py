"""Span descriptors for a byte-range media cache persisted in file names."""

from span_cache.codec import (
    FORMAT_V1,
    FORMAT_V2,
    FileNameFields,
    FileNameFormat,
    SpanCodec,
    create_cache_entry,
    default_codec,
)
from span_cache.errors import (
    InvalidSpanError,
    SpanCacheError,
    SpanRenameError,
    SpanStorageError,
)
from span_cache.scan import SpanScanResult, scan_cache_directory
from span_cache.settings import SpanCacheSettings, default_span_cache_settings
from span_cache.spans import (
    CacheEntry,
    ClosedHole,
    LookupKey,
    OpenHole,
    Span,
    compare_spans,
    create_closed_hole,
    create_lookup,
    create_open_hole,
    span_sort_key,
    touch_span,
)
from span_cache.storage import LocalSpanStorage, SpanStorage

__all__ = [
    "FORMAT_V1",
    "FORMAT_V2",
    "CacheEntry",
    "ClosedHole",
    "FileNameFields",
    "FileNameFormat",
    "InvalidSpanError",
    "LocalSpanStorage",
    "LookupKey",
    "OpenHole",
    "Span",
    "SpanCacheError",
    "SpanCacheSettings",
    "SpanCodec",
    "SpanRenameError",
    "SpanScanResult",
    "SpanStorage",
    "SpanStorageError",
    "compare_spans",
    "create_cache_entry",
    "create_closed_hole",
    "create_lookup",
    "create_open_hole",
    "default_codec",
    "default_span_cache_settings",
    "scan_cache_directory",
    "span_sort_key",
    "touch_span",
]
