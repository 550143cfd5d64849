"""Contract tests for trace-correlated logging."""

from __future__ import annotations

import logging

from obs.otel.logging import TraceContextFilter, configure_logging
from obs.otel.scopes import SCOPE_STORAGE
from obs.otel.tracing import get_tracer
from tests.obs._support.otel_harness import get_otel_harness


def _record() -> logging.LogRecord:
    return logging.LogRecord("spancache.test", logging.INFO, __file__, 1, "msg", None, None)


def test_filter_injects_active_span_ids() -> None:
    """Records inside a span carry its trace and span ids."""
    get_otel_harness()
    record = _record()
    with get_tracer(SCOPE_STORAGE).start_as_current_span("logging.test") as span:
        assert TraceContextFilter.filter(record)
        context = span.get_span_context()
    assert getattr(record, "trace_id", None) == f"{context.trace_id:032x}"
    assert getattr(record, "span_id", None) == f"{context.span_id:016x}"


def test_filter_outside_span_sets_none() -> None:
    """Records outside a span carry empty ids."""
    record = _record()
    assert TraceContextFilter.filter(record)
    assert getattr(record, "trace_id", "unset") is None


def test_configure_logging_installs_one_handler() -> None:
    """Repeated configuration does not stack handlers."""
    logger = logging.getLogger("spancache.test.configure")
    logger.propagate = False
    try:
        configure_logging("debug", logger=logger)
        configure_logging("info", logger=logger)
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO
    finally:
        logger.handlers.clear()
        logger.propagate = True
