"""Tests for shared msgspec JSON helpers."""

from __future__ import annotations

from pathlib import Path

from serde_msgspec import dumps_json, encode_json_lines, loads_json
from span_cache.scan import SpanScanResult
from span_cache.spans import CacheEntry


def _entry(position: int) -> CacheEntry:
    return CacheEntry(
        key="video",
        position=position,
        length=1,
        file=Path(f"/cache/video.{position}.1.v2.exo"),
        last_access_timestamp=1,
    )


def test_paths_encode_as_strings() -> None:
    """Paths are written as plain strings."""
    assert b'"file":"/cache/video.0.1.v2.exo"' in dumps_json(_entry(0))


def test_scan_result_decodes_with_paths() -> None:
    """Scan results decode back with Path fields restored."""
    result = SpanScanResult(
        directory=Path("/cache"),
        entries=(_entry(0),),
        rejected=(Path("/cache/notes.txt"),),
    )
    decoded = loads_json(dumps_json(result), target_type=SpanScanResult)
    assert decoded == result
    assert isinstance(decoded.entries[0].file, Path)


def test_default_fields_are_omitted() -> None:
    """Default-valued fields are left out of the payload."""
    payload = dumps_json(SpanScanResult(directory=Path("/cache")))
    assert payload == b'{"directory":"/cache"}'


def test_json_lines_emit_one_line_per_item() -> None:
    """Each item is written on its own line."""
    payload = encode_json_lines([_entry(0), _entry(5)])
    lines = payload.decode("utf-8").splitlines()
    assert len(lines) == 2
    assert '"position":5' in lines[1]
