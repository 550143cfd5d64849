"""OpenTelemetry helpers for span cache observability."""

from __future__ import annotations

from obs.otel.logging import TraceContextFilter, configure_logging
from obs.otel.metrics import (
    metric_views,
    record_rejected_name,
    record_storage_operation,
    reset_metrics_registry,
)
from obs.otel.storage import storage_span
from obs.otel.tracing import get_tracer, record_exception, set_span_attributes

__all__ = [
    "TraceContextFilter",
    "configure_logging",
    "get_tracer",
    "metric_views",
    "record_exception",
    "record_rejected_name",
    "record_storage_operation",
    "reset_metrics_registry",
    "set_span_attributes",
    "storage_span",
]
