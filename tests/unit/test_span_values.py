"""Tests for span variants and their shared attribute surface."""

from __future__ import annotations

from pathlib import Path
from typing import TypeAlias

import msgspec
import pytest

from serde_msgspec import dumps_json, loads_json
from span_cache.constants import OPEN_ENDED, UNSET_TIMESTAMP
from span_cache.errors import InvalidSpanError
from span_cache.spans import (
    CacheEntry,
    ClosedHole,
    LookupKey,
    OpenHole,
    create_closed_hole,
    create_lookup,
    create_open_hole,
)

AnySpan: TypeAlias = LookupKey | OpenHole | ClosedHole | CacheEntry


def _entry(**overrides: object) -> CacheEntry:
    values: dict[str, object] = {
        "key": "video",
        "position": 1024,
        "length": 300,
        "file": Path("/cache/video.1024.5000000.v2.exo"),
        "last_access_timestamp": 5_000_000,
    }
    values.update(overrides)
    return CacheEntry(**values)  # type: ignore[arg-type]


def test_lookup_is_uncached_and_open_ended() -> None:
    """Lookup probes carry no file and an open-ended length."""
    span = create_lookup("video", 10)
    assert isinstance(span, LookupKey)
    assert span.length == OPEN_ENDED
    assert span.is_open_ended()
    assert not span.is_cached
    assert span.file is None
    assert span.last_access_timestamp == UNSET_TIMESTAMP
    assert not span.is_eos


def test_open_hole_is_uncached_and_open_ended() -> None:
    """Open holes have no known extent."""
    span = create_open_hole("video", 0)
    assert isinstance(span, OpenHole)
    assert span.is_open_ended()
    assert not span.is_cached
    assert span.file is None


def test_closed_hole_has_known_length() -> None:
    """Closed holes report their extent and are not open-ended."""
    span = create_closed_hole("video", 100, 50)
    assert span.length == 50
    assert not span.is_open_ended()
    assert not span.is_cached
    assert span.last_access_timestamp == UNSET_TIMESTAMP


def test_zero_length_closed_hole_is_allowed() -> None:
    """A closed hole may be empty."""
    assert create_closed_hole("video", 0, 0).length == 0


def test_cache_entry_is_cached() -> None:
    """Cache entries expose their backing file and timestamp."""
    entry = _entry(is_eos=True)
    assert entry.is_cached
    assert not entry.is_open_ended()
    assert entry.file == Path("/cache/video.1024.5000000.v2.exo")
    assert entry.last_access_timestamp == 5_000_000
    assert entry.is_eos


@pytest.mark.parametrize(
    "factory",
    [
        lambda: create_lookup("", 0),
        lambda: create_open_hole("video", -1),
        lambda: create_closed_hole("video", 0, -1),
        lambda: create_closed_hole("video", 2**63, 1),
        lambda: _entry(length=-5),
        lambda: _entry(last_access_timestamp=-1),
    ],
)
def test_invalid_spans_are_rejected(factory: object) -> None:
    """Empty keys and out-of-range numbers fail construction."""
    with pytest.raises(InvalidSpanError):
        factory()  # type: ignore[operator]


def test_spans_are_immutable() -> None:
    """Span values cannot be mutated in place."""
    entry = _entry()
    with pytest.raises(AttributeError):
        entry.position = 0  # type: ignore[misc]


def test_spans_are_hashable_values() -> None:
    """Spans at one key and position hash equally and collapse in sets."""
    assert len({create_closed_hole("k", 1, 2), create_closed_hole("k", 1, 2)}) == 1


def test_span_json_carries_variant_tag() -> None:
    """Serialized spans name their variant and decode back to it."""
    spans: list[AnySpan] = [
        create_lookup("k", 1),
        create_open_hole("k", 2),
        create_closed_hole("k", 3, 4),
        _entry(),
    ]
    payload = dumps_json(spans)
    assert b'"kind":"open_hole"' in payload
    assert b'"kind":"cache_entry"' in payload
    decoded = loads_json(payload, target_type=list[LookupKey | OpenHole | ClosedHole | CacheEntry])
    assert [type(span) for span in decoded] == [type(span) for span in spans]
    assert [msgspec.structs.astuple(span) for span in decoded] == [
        msgspec.structs.astuple(span) for span in spans
    ]
