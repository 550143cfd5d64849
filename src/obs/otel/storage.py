"""Telemetry for storage side effects performed by the span codec."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager

from opentelemetry.trace import Span

from obs.otel.attributes import normalize_attributes
from obs.otel.constants import AttributeName
from obs.otel.metrics import record_storage_operation
from obs.otel.scopes import SCOPE_STORAGE
from obs.otel.tracing import get_tracer, record_exception, set_span_attributes, span_attributes

StorageResultSetter = Callable[[str], None]


@contextmanager
def storage_span(
    name: str,
    *,
    operation: str,
    attributes: Mapping[str, object] | None = None,
) -> Iterator[tuple[Span, StorageResultSetter]]:
    """Create a storage span and record storage operation metrics.

    The result defaults to ``"ok"``, becomes ``"error"`` when the body raises,
    and can be overridden through the yielded setter when a failure is
    handled inside the body.

    Parameters
    ----------
    name
        Span name.
    operation
        Storage operation (touch/upgrade/scan/remove).
    attributes
        Optional span attributes.

    Yields
    ------
    tuple[Span, StorageResultSetter]
        The active span and a setter for the operation result.
    """
    base_attrs: dict[str, object] = {AttributeName.STORAGE_OPERATION: operation}
    if attributes:
        base_attrs.update(attributes)
    tracer = get_tracer(SCOPE_STORAGE)
    start = time.monotonic()
    result = "ok"

    def set_result(value: str) -> None:
        nonlocal result
        result = value

    with tracer.start_as_current_span(name, attributes=span_attributes(attrs=base_attrs)) as span:
        try:
            yield span, set_result
        except Exception as exc:
            result = "error"
            record_exception(span, exc)
            raise
        finally:
            duration_s = time.monotonic() - start
            set_span_attributes(
                span,
                {
                    AttributeName.STORAGE_RESULT: result,
                    "duration_s": duration_s,
                },
            )
            record_storage_operation(operation, result=result, duration_s=duration_s)
            span.add_event(
                "storage.end",
                attributes=normalize_attributes({AttributeName.STORAGE_RESULT: result}),
            )


__all__ = ["StorageResultSetter", "storage_span"]
