"""Shared msgspec policy and helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, TypeVar

import msgspec


class StructBaseStrict(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=True,
):
    """Base struct for strict contracts."""


class StructBaseHotPath(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=False,
    gc=False,
    cache_hash=True,
):
    """Base struct for high-volume, immutable values."""


def _json_enc_hook(obj: object) -> object:
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj).hex()
    raise TypeError


def _dec_hook(type_hint: Any, obj: object) -> object:
    if not isinstance(obj, str):
        return obj
    converters: dict[object, Callable[[str], object]] = {
        Path: Path,
    }
    handler = converters.get(type_hint)
    if handler is None:
        return obj
    return handler(obj)


JSON_ENCODER = msgspec.json.Encoder(enc_hook=_json_enc_hook, order="deterministic")


def dumps_json(obj: object, *, pretty: bool = False) -> bytes:
    """Serialize an object to JSON bytes.

    Parameters
    ----------
    obj
        Object to serialize.
    pretty
        Whether to format with indentation.

    Returns
    -------
    bytes
        JSON payload.
    """
    raw = JSON_ENCODER.encode(obj)
    if not pretty:
        return raw
    return msgspec.json.format(raw, indent=2)


T = TypeVar("T")


def loads_json(buf: bytes | str, *, target_type: type[T], strict: bool = True) -> T:
    """Deserialize JSON bytes into the requested type.

    Parameters
    ----------
    buf
        JSON payload.
    target_type
        Target type for decoding.
    strict
        Whether to enforce strict decoding.

    Returns
    -------
    T
        Decoded payload.
    """
    decoder = msgspec.json.Decoder(
        type=target_type,
        dec_hook=_dec_hook,
        strict=strict,
    )
    return decoder.decode(buf)


def encode_json_lines(items: Iterable[object]) -> bytes:
    """Serialize items to JSON Lines bytes.

    Returns
    -------
    bytes
        JSON Lines payload.
    """
    return JSON_ENCODER.encode_lines(list(items))


__all__ = [
    "JSON_ENCODER",
    "StructBaseHotPath",
    "StructBaseStrict",
    "dumps_json",
    "encode_json_lines",
    "loads_json",
]
