"""Observability for the span cache."""
