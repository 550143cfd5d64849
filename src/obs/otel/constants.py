"""Canonical OpenTelemetry constants for the span cache."""

from __future__ import annotations

from enum import StrEnum


class MetricName(StrEnum):
    """Canonical metric names."""

    STORAGE_OPERATION_COUNT = "spancache.storage.operation.count"
    STORAGE_OPERATION_DURATION = "spancache.storage.operation.duration"
    REJECTED_NAME_COUNT = "spancache.codec.rejected_name.count"


class AttributeName(StrEnum):
    """Canonical attribute names."""

    STORAGE_OPERATION = "storage.operation"
    STORAGE_RESULT = "storage.result"
    FORMAT_VERSION = "spancache.format_version"
    REJECT_REASON = "spancache.reject_reason"
    DIRECTORY = "spancache.directory"


class ScopeName(StrEnum):
    """Canonical instrumentation scope names."""

    ROOT = "spancache"
    STORAGE = "spancache.storage"
    CLI = "spancache.cli"


__all__ = [
    "AttributeName",
    "MetricName",
    "ScopeName",
]
