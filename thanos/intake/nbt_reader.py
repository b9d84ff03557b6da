"""
NBT field reader: the default FieldReaderPort adapter.

Parses a decompressed chunk with nbtlib and returns one named TAG_Long.

Implementation notes:
- Chunks written by 1.18+ keep `InhabitedTime` on the root compound; older
  chunks nest everything under a `Level` compound. Both are checked, root first.
  Nothing deeper is searched.
"""

from __future__ import annotations

import io
from typing import Optional

import nbtlib  # type: ignore

from ..errors import FieldReadError
from ..ports import FieldReaderPort

LEGACY_LEVEL_KEY = "Level"


class NbtFieldReader(FieldReaderPort):
    """Look up a named TAG_Long in an uncompressed, big-endian NBT payload."""

    def read_long(self, payload: bytes, key: str) -> int:
        try:
            root = nbtlib.File.parse(io.BytesIO(payload))
        except Exception as exc:
            # nbtlib surfaces truncation/garbage as struct, type or lookup errors
            raise FieldReadError(key, f"unparseable NBT payload ({exc})") from exc

        value = _lookup(root, key)
        if value is None:
            raise FieldReadError(key, "field not present")
        if not isinstance(value, nbtlib.Long):
            raise FieldReadError(key, f"expected TAG_Long, got {type(value).__name__}")
        return int(value)


def _lookup(root, key: str) -> Optional[object]:
    if not isinstance(root, nbtlib.Compound):
        return None
    if key in root:
        return root[key]

    level = root.get(LEGACY_LEVEL_KEY)
    if isinstance(level, nbtlib.Compound) and key in level:
        return level[key]
    return None
