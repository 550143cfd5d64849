"""Metrics catalog and helpers for span cache telemetry."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass

from opentelemetry import metrics
from opentelemetry.sdk.metrics.view import ExplicitBucketHistogramAggregation, View

from obs.otel.attributes import normalize_attributes
from obs.otel.constants import AttributeName, MetricName
from obs.otel.scope_metadata import instrumentation_schema_url, instrumentation_version
from obs.otel.scopes import SCOPE_ROOT

_STORAGE_OPERATION_COUNT = MetricName.STORAGE_OPERATION_COUNT.value
_STORAGE_OPERATION_DURATION = MetricName.STORAGE_OPERATION_DURATION.value
_REJECTED_NAME_COUNT = MetricName.REJECTED_NAME_COUNT.value
_OPERATION_KEY = AttributeName.STORAGE_OPERATION.value
_RESULT_KEY = AttributeName.STORAGE_RESULT.value
_REASON_KEY = AttributeName.REJECT_REASON.value

_DEFAULT_BUCKETS_S = (
    0.0005,
    0.001,
    0.0025,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    5.0,
)


@dataclass
class MetricsRegistry:
    """Registry for span cache metric instruments."""

    storage_operation_count: metrics.Counter
    storage_operation_duration: metrics.Histogram
    rejected_name_count: metrics.Counter


_REGISTRY_CACHE: dict[str, MetricsRegistry | None] = {"value": None}
_REGISTRY_LOCK = threading.Lock()


def _meter() -> metrics.Meter:
    version_value = instrumentation_version()
    version = version_value if version_value is not None else "unknown"
    return metrics.get_meter(
        SCOPE_ROOT,
        version,
        schema_url=instrumentation_schema_url(),
    )


def metric_views() -> list[View]:
    """Return default metric Views for the OTel MeterProvider.

    Returns
    -------
    list[View]
        Configured metric views for span cache instruments.
    """
    histogram = ExplicitBucketHistogramAggregation(list(_DEFAULT_BUCKETS_S))
    return [
        View(
            instrument_name=_STORAGE_OPERATION_DURATION,
            aggregation=histogram,
            attribute_keys={_OPERATION_KEY, _RESULT_KEY},
        ),
        View(
            instrument_name=_STORAGE_OPERATION_COUNT,
            attribute_keys={_OPERATION_KEY, _RESULT_KEY},
        ),
        View(
            instrument_name=_REJECTED_NAME_COUNT,
            attribute_keys={_REASON_KEY},
        ),
    ]


def reset_metrics_registry() -> None:
    """Reset cached metric instruments so they can be re-created."""
    with _REGISTRY_LOCK:
        _REGISTRY_CACHE["value"] = None


def _registry() -> MetricsRegistry:
    with _REGISTRY_LOCK:
        cached = _REGISTRY_CACHE["value"]
        if cached is not None:
            return cached
        meter = _meter()
        registry = MetricsRegistry(
            storage_operation_count=meter.create_counter(
                _STORAGE_OPERATION_COUNT,
                unit="1",
                description="Storage side effects performed by the span codec.",
            ),
            storage_operation_duration=meter.create_histogram(
                _STORAGE_OPERATION_DURATION,
                unit="s",
                description="Storage operation duration (seconds).",
            ),
            rejected_name_count=meter.create_counter(
                _REJECTED_NAME_COUNT,
                unit="1",
                description="File names that did not decode to a cache entry.",
            ),
        )
        _REGISTRY_CACHE["value"] = registry
        return registry


def record_storage_operation(
    operation: str,
    *,
    result: str,
    duration_s: float,
    attributes: Mapping[str, object] | None = None,
) -> None:
    """Record the count and duration of one storage operation."""
    registry = _registry()
    payload: dict[str, object] = {
        _OPERATION_KEY: operation,
        _RESULT_KEY: result,
    }
    if attributes:
        payload.update(attributes)
    normalized = normalize_attributes(payload)
    registry.storage_operation_count.add(1, normalized)
    registry.storage_operation_duration.record(duration_s, normalized)


def record_rejected_name(reason: str) -> None:
    """Count a file name that was not recognised as a cache entry."""
    registry = _registry()
    registry.rejected_name_count.add(
        1,
        normalize_attributes({_REASON_KEY: reason}),
    )


__all__ = [
    "MetricsRegistry",
    "metric_views",
    "record_rejected_name",
    "record_storage_operation",
    "reset_metrics_registry",
]
