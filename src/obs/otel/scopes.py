"""Canonical OpenTelemetry instrumentation scopes for the span cache."""

from __future__ import annotations

from obs.otel.constants import ScopeName

SCOPE_ROOT = ScopeName.ROOT
SCOPE_STORAGE = ScopeName.STORAGE
SCOPE_CLI = ScopeName.CLI

__all__ = [
    "SCOPE_CLI",
    "SCOPE_ROOT",
    "SCOPE_STORAGE",
]
