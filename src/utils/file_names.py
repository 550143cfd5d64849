"""Reversible escaping of arbitrary text into file-name-safe form."""

from __future__ import annotations

from typing import Final

_ESCAPE_PREFIX: Final = "%"
_RESERVED: Final = frozenset('<>:"/\\|?*%')
_HEX_DIGITS: Final = frozenset("0123456789abcdefABCDEF")


def escape_file_name(name: str) -> str:
    """Escape characters that are unsafe in file names.

    Each reserved character (``< > : " / \\ | ? * %``) is written as ``%``
    followed by its two-digit lowercase hex code.

    Parameters
    ----------
    name
        Arbitrary text, typically a cache key.

    Returns
    -------
    str
        Escaped text; ``name`` itself when nothing needs escaping.
    """
    if not any(char in _RESERVED for char in name):
        return name
    return "".join(f"%{ord(char):02x}" if char in _RESERVED else char for char in name)


def unescape_file_name(name: str) -> str | None:
    """Reverse :func:`escape_file_name`.

    Parameters
    ----------
    name
        Escaped text.

    Returns
    -------
    str | None
        Original text, or ``None`` when ``name`` contains a ``%`` that is not
        followed by two hex digits.
    """
    if _ESCAPE_PREFIX not in name:
        return name
    parts: list[str] = []
    index = 0
    length = len(name)
    while index < length:
        char = name[index]
        if char != _ESCAPE_PREFIX:
            parts.append(char)
            index += 1
            continue
        digits = name[index + 1 : index + 3]
        if len(digits) != 2 or not set(digits) <= _HEX_DIGITS:
            return None
        parts.append(chr(int(digits, 16)))
        index += 3
    return "".join(parts)


__all__ = ["escape_file_name", "unescape_file_name"]
