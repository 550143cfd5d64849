"""Name command: print the cache file name for span metadata."""

from __future__ import annotations

import sys
from typing import Annotated

from cyclopts import Parameter

from cli.exit_codes import ExitCode
from span_cache.codec import default_codec


def name_command(
    key: str,
    position: int,
    timestamp: int,
    *,
    eos: Annotated[
        bool,
        Parameter(name="--eos", help="Mark the span as reaching the end of the stream."),
    ] = False,
) -> int:
    """Print the version 2 file name for a cached span.

    Returns
    -------
    int
        Exit status code.
    """
    name = default_codec().file_name(key, position, timestamp, is_eos=eos)
    sys.stdout.write(name + "\n")
    return ExitCode.SUCCESS


__all__ = ["name_command"]
