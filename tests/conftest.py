"""Shared pytest fixtures for span cache tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from span_cache.codec import SpanCodec
from tests.obs._support.otel_harness import get_otel_harness
from tests.test_helpers.span_storage import FixedClock, MemorySpanStorage

get_otel_harness()


@pytest.fixture
def clock() -> FixedClock:
    """Return a clock fixed at 5_000_000 ms."""
    return FixedClock(5_000_000)


@pytest.fixture
def memory_storage() -> MemorySpanStorage:
    """Return an empty in-memory storage."""
    return MemorySpanStorage()


@pytest.fixture
def memory_codec(memory_storage: MemorySpanStorage, clock: FixedClock) -> SpanCodec:
    """Return a codec backed by in-memory storage and a fixed clock."""
    return SpanCodec(storage=memory_storage, clock=clock)


@pytest.fixture
def local_codec(clock: FixedClock) -> SpanCodec:
    """Return a codec backed by the local filesystem and a fixed clock."""
    return SpanCodec(clock=clock)


@pytest.fixture(autouse=True)
def _isolated_cache_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("SPANCACHE_DIR", "SPANCACHE_UPGRADE_LEGACY", "SPANCACHE_DELETE_INVALID"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
