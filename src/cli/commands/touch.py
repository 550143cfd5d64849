"""Touch command: refresh the last access time of one cache file."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from cli.exit_codes import ExitCode
from span_cache.codec import default_codec

_LOGGER = logging.getLogger(__name__)


def touch_command(file: Path) -> int:
    """Rename a cache file to record the current time as its last access.

    Legacy file names are upgraded first.

    Returns
    -------
    int
        Exit status code.
    """
    entry = default_codec().load_entry(file)
    if entry is None:
        _LOGGER.error("Not a cache file: %s", file)
        return ExitCode.VALIDATION_ERROR
    touched = entry.touch()
    sys.stdout.write(touched.file.name + "\n")
    return ExitCode.SUCCESS


__all__ = ["touch_command"]
