"""Shared utilities for the span cache."""

from utils.file_names import escape_file_name, unescape_file_name

__all__ = [
    "escape_file_name",
    "unescape_file_name",
]
