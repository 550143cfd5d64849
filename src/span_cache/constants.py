"""File name grammar constants for persisted cache spans."""

from __future__ import annotations

import re
from typing import Final

OPEN_ENDED: Final = -1
UNSET_TIMESTAMP: Final = -1
MAX_INT64: Final = 2**63 - 1

FIELD_DELIMITER: Final = "."
EOS_MARKER: Final = "E"

V1_SUFFIX: Final = ".v1.exo"
V2_SUFFIX: Final = ".v2.exo"

# Keys may contain the delimiter; the greedy key group backtracks until the
# anchored numeric fields and the suffix match.
CACHE_FILE_PATTERN_V1: Final = re.compile(
    r"(?P<key>.+)\.(?P<position>[0-9]+)\.(?P<timestamp>[0-9]+)\.v1\.exo",
    re.DOTALL,
)
CACHE_FILE_PATTERN_V2: Final = re.compile(
    r"(?P<key>.+)\.(?P<position>[0-9]+)(?P<eos>E?)\.(?P<timestamp>[0-9]+)\.v2\.exo",
    re.DOTALL,
)

__all__ = [
    "CACHE_FILE_PATTERN_V1",
    "CACHE_FILE_PATTERN_V2",
    "EOS_MARKER",
    "FIELD_DELIMITER",
    "MAX_INT64",
    "OPEN_ENDED",
    "UNSET_TIMESTAMP",
    "V1_SUFFIX",
    "V2_SUFFIX",
]
