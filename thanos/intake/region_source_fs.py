"""
Filesystem-backed RegionSource adapter.

It enumerates region files from a single flat directory:
  <world>/region/r.<x>.<z>.mca

This module is intentionally simple:
- It does NOT open files; size checks happen in validator.py.
- Filenames that don't look like `r.<int32>.<int32>.<ext>` are skipped
  silently, never reported as errors.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

from ..dto import RegionHandle
from ..ports import RegionSourcePort

REGION_PREFIX = "r"
DEFAULT_EXTENSION = "mca"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def parse_region_name(name: str, extension: str = DEFAULT_EXTENSION) -> Optional[Tuple[int, int]]:
    """
    Return the region coordinates encoded in `name`, or None if it is not a
    region filename. Exactly four dot-separated parts are required.
    """
    parts = name.split(".")
    if len(parts) != 4:
        return None
    prefix, sx, sz, ext = parts
    if prefix != REGION_PREFIX or ext != extension:
        return None
    x = _parse_int32(sx)
    z = _parse_int32(sz)
    if x is None or z is None:
        return None
    return x, z


@dataclass(frozen=True)
class FilesystemRegionSource(RegionSourcePort):
    """
    Enumerate region files from one directory.

    Parameters
    ----------
    root : str | os.PathLike
        Directory holding the region files (usually `<world>/region`).
    extension : str
        Region file extension without the dot.
    """

    root: str | os.PathLike
    extension: str = DEFAULT_EXTENSION

    def fetch(self) -> Iterable[RegionHandle]:
        """Yield one RegionHandle per qualifying regular file, sorted by name."""
        root_path = Path(self.root)

        if not root_path.is_dir():
            return []

        def _iter() -> Iterator[RegionHandle]:
            for p in sorted(root_path.iterdir()):
                if not p.is_file():
                    continue
                coords = parse_region_name(p.name, self.extension)
                if coords is None:
                    continue
                yield RegionHandle(name=p.name, path=p, region_x=coords[0], region_z=coords[1])

        return _iter()


# === Helpers ===


def _parse_int32(text: str) -> Optional[int]:
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    if not _INT32_MIN <= value <= _INT32_MAX:
        return None
    return value
