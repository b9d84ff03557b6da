"""
Chunk selection by age.

A chunk survives only if its `InhabitedTime` is strictly greater than the
threshold; a chunk whose age equals the threshold is removed. All ages are
game ticks.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ports import FieldReaderPort

DEFAULT_AGE_FIELD = "InhabitedTime"


def extract_age(payload: bytes, reader: FieldReaderPort, field: str = DEFAULT_AGE_FIELD) -> int:
    """Read the age field from a decompressed chunk; FieldReadError propagates."""
    return reader.read_long(payload, field)


def include(age: int, threshold: int) -> bool:
    """
    Return True if a chunk of this age is kept.

    The comparison is strict: `threshold` is the largest age that is dropped.
    """
    return age > threshold


@dataclass(frozen=True)
class AgeFilter:
    """Threshold, reader and field name bound together for the compactor."""
    threshold: int
    reader: FieldReaderPort
    field: str = DEFAULT_AGE_FIELD

    def age_of(self, payload: bytes) -> int:
        return extract_age(payload, self.reader, self.field)

    def keeps(self, age: int) -> bool:
        return include(age, self.threshold)
