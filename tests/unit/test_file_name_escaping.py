"""Tests for reversible file name escaping."""

from __future__ import annotations

import pytest

from utils.file_names import escape_file_name, unescape_file_name


def test_safe_text_is_unchanged() -> None:
    """Text without reserved characters passes through."""
    assert escape_file_name("video-1_a.b") == "video-1_a.b"
    assert unescape_file_name("video-1_a.b") == "video-1_a.b"


def test_reserved_characters_are_hex_escaped() -> None:
    """Reserved characters become % plus lowercase hex."""
    assert escape_file_name("video/1") == "video%2f1"
    assert escape_file_name("a%b") == "a%25b"
    assert escape_file_name('<>:"\\|?*') == "%3c%3e%3a%22%5c%7c%3f%2a"


@pytest.mark.parametrize(
    "text",
    ["http://host/path?q=1", "100%", "plain", "été/中"],
)
def test_unescape_reverses_escape(text: str) -> None:
    """Escaping is reversible."""
    assert unescape_file_name(escape_file_name(text)) == text


def test_unescape_accepts_uppercase_hex() -> None:
    """Hex digits are case-insensitive on the way back."""
    assert unescape_file_name("video%2F1") == "video/1"


@pytest.mark.parametrize("text", ["bad%", "bad%2", "bad%zz1"])
def test_malformed_escapes_are_rejected(text: str) -> None:
    """A % not followed by two hex digits is not a valid escape."""
    assert unescape_file_name(text) is None
