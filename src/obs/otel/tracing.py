"""Tracing helpers for span cache instrumentation."""

from __future__ import annotations

from collections.abc import Mapping

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode
from opentelemetry.util.types import AttributeValue

from obs.otel.attributes import normalize_attributes
from obs.otel.scope_metadata import instrumentation_schema_url, instrumentation_version


def get_tracer(scope_name: str) -> trace.Tracer:
    """Return a tracer for the given instrumentation scope.

    Parameters
    ----------
    scope_name
        Instrumentation scope name.

    Returns
    -------
    opentelemetry.trace.Tracer
        Tracer bound to the requested scope.
    """
    version_value = instrumentation_version()
    version = version_value if version_value is not None else "unknown"
    return trace.get_tracer(
        scope_name,
        instrumenting_library_version=version,
        schema_url=instrumentation_schema_url(),
    )


def set_span_attributes(span: Span, attrs: Mapping[str, object] | None) -> None:
    """Attach normalized attributes to a span.

    Parameters
    ----------
    span
        Span to update.
    attrs
        Raw attributes to normalize and attach.
    """
    normalized = normalize_attributes(attrs)
    for key, value in normalized.items():
        span.set_attribute(key, value)


def record_exception(span: Span, exc: Exception) -> None:
    """Record an exception on a span and mark it as error.

    Parameters
    ----------
    span
        Span to annotate.
    exc
        Exception to record.
    """
    span.record_exception(exc)
    span.set_status(Status(StatusCode.ERROR))


def span_attributes(*, attrs: Mapping[str, object] | None = None) -> dict[str, AttributeValue]:
    """Return normalized attributes for direct use in span creation.

    Returns
    -------
    dict[str, AttributeValue]
        Normalized attributes for span creation.
    """
    return normalize_attributes(attrs)


__all__ = [
    "get_tracer",
    "record_exception",
    "set_span_attributes",
    "span_attributes",
]
