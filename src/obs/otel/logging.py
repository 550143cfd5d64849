"""Logging helpers for trace correlation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from opentelemetry import trace

if TYPE_CHECKING:

    class _TraceRecord(logging.LogRecord):
        trace_id: str | None
        span_id: str | None


TRACE_LOG_FORMAT = (
    "%(asctime)s %(levelname)s [trace_id=%(trace_id)s span_id=%(span_id)s] %(name)s: %(message)s"
)


class TraceContextFilter(logging.Filter):
    """Attach trace/span IDs to log records when available."""

    @staticmethod
    def filter(record: logging.LogRecord) -> bool:
        """Inject trace/span IDs into the log record when available.

        Returns
        -------
        bool
            True to keep the log record.
        """
        context = trace.get_current_span().get_span_context()
        trace_record = cast("_TraceRecord", record)
        if context is None or not context.is_valid:
            trace_record.trace_id = None
            trace_record.span_id = None
            return True
        trace_record.trace_id = f"{context.trace_id:032x}"
        trace_record.span_id = f"{context.span_id:016x}"
        return True


def configure_logging(level: str, *, logger: logging.Logger | None = None) -> None:
    """Install a trace-correlated stream handler on ``logger``.

    Parameters
    ----------
    level
        Logging level name.
    logger
        Target logger; the root logger by default.
    """
    target = logger or logging.getLogger()
    target.setLevel(level.upper())
    for handler in target.handlers:
        if any(isinstance(existing, TraceContextFilter) for existing in handler.filters):
            return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(TRACE_LOG_FORMAT))
    handler.addFilter(TraceContextFilter())
    target.addHandler(handler)


__all__ = [
    "TRACE_LOG_FORMAT",
    "TraceContextFilter",
    "configure_logging",
]
