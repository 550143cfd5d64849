"""Environment-driven settings for span cache directories."""

from __future__ import annotations

from pathlib import Path

import msgspec

from serde_msgspec import StructBaseStrict
from utils.env_utils import env_bool, env_value

ROOT_ENV = "SPANCACHE_DIR"
UPGRADE_LEGACY_ENV = "SPANCACHE_UPGRADE_LEGACY"
DELETE_INVALID_ENV = "SPANCACHE_DELETE_INVALID"


def _default_cache_root() -> Path:
    """Return the default span cache directory.

    Returns
    -------
    pathlib.Path
        ``$SPANCACHE_DIR`` when set, else ``~/.cache/spancache/spans``.
    """
    root = env_value(ROOT_ENV)
    if root:
        return Path(root).expanduser()
    return Path.home() / ".cache" / "spancache" / "spans"


class SpanCacheSettings(StructBaseStrict, frozen=True):
    """Settings for scanning and maintaining a span cache directory."""

    root: Path = msgspec.field(default_factory=_default_cache_root)
    upgrade_legacy: bool = True
    delete_invalid: bool = False


def default_span_cache_settings() -> SpanCacheSettings:
    """Return settings resolved from the environment.

    Returns
    -------
    SpanCacheSettings
        Settings with environment overrides applied.
    """
    return SpanCacheSettings(
        root=_default_cache_root(),
        upgrade_legacy=env_bool(UPGRADE_LEGACY_ENV, default=True),
        delete_invalid=env_bool(DELETE_INVALID_ENV, default=False),
    )


__all__ = [
    "DELETE_INVALID_ENV",
    "ROOT_ENV",
    "UPGRADE_LEGACY_ENV",
    "SpanCacheSettings",
    "default_span_cache_settings",
]
