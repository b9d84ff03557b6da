"""
Basic region file classification.

Goal: a fast, side-effect-free size check that decides whether a region file
is worth opening at all. We DO NOT parse the header tables here; the
compactor does that.
"""

from __future__ import annotations

import os
from typing import Literal, Tuple

from ..dto import RegionHandle
from ..header import HEADER_SIZE

Classification = Literal["empty", "header_missing", "ok"]


def classify_region(region: RegionHandle) -> Tuple[Classification, int]:
    """
    Classify a region file by size.

    - 0 bytes              -> "empty" (never generated, safe to drop)
    - 1 .. 8191 bytes      -> "header_missing" (both 4 KiB tables must be present)
    - 8192 bytes or more   -> "ok"

    Returns the classification together with the observed size.
    """
    size = os.stat(region.path).st_size
    if size == 0:
        return "empty", size
    if size < HEADER_SIZE:
        return "header_missing", size
    return "ok", size
