"""
Hexagonal interfaces (Ports) for the pruner.

These define the boundary between core domain logic and I/O adapters.
Keep them small and implementation-agnostic so they're easy to fake in tests.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from .dto import RegionHandle


class RegionSourcePort(Protocol):
    """
    Supplies the region files to prune.
    Implementations decide which directory entries qualify; anything they
    don't yield is never touched.
    """

    def fetch(self) -> Iterable[RegionHandle]:
        """Return an iterable of RegionHandle items, one per region file."""
        ...


class FieldReaderPort(Protocol):
    """
    Narrow view of a structured-payload parser: look up one named 64-bit
    integer in a decompressed chunk. The pruner never needs more than this.
    """

    def read_long(self, payload: bytes, key: str) -> int:
        """
        Return the signed 64-bit value stored under `key`.
        MUST raise FieldReadError if the payload is unparseable, the key is
        absent, or the value is not a 64-bit integer.
        """
        ...
