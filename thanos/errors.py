"""
Exception hierarchy for the region pruner.

Three tiers, matching how far an error is allowed to travel:
- StartupError   aborts the whole run before any region is touched.
- RegionError    aborts one region file; siblings keep going.
- ChunkError     drops one chunk; the rest of its region is still processed.
"""

from __future__ import annotations


class ThanosError(Exception):
    """Base class for all pruner exceptions."""


class StartupError(ThanosError):
    """Raised for missing/duplicate directories or a failed world copy."""


# === Per-region (fatal for one file) ===


class RegionError(ThanosError):
    """Base class for errors that abort processing of a single region file."""


class TruncatedHeader(RegionError):
    """Raised when fewer than 4096 bytes of location table can be read."""

    def __init__(self, available: int = 0) -> None:
        super().__init__(f"location table truncated: {available} of 4096 bytes available")
        self.available = available


class FieldReadError(RegionError):
    """Raised when the age field cannot be read from a decompressed chunk."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"cannot read field '{field}': {reason}")
        self.field = field
        self.reason = reason


class SectorOverflowError(RegionError):
    """Raised when an offset or sector count does not fit the 24/8-bit encoding."""

    def __init__(self, sector_offset: int = 0, sector_count: int = 0) -> None:
        super().__init__(
            f"location does not fit 24-bit offset / 8-bit count: "
            f"offset={sector_offset} count={sector_count}"
        )
        self.sector_offset = sector_offset
        self.sector_count = sector_count


# === Per-chunk (recoverable) ===


class ChunkError(ThanosError):
    """Base class for errors that only drop the offending chunk."""


class UnsupportedCompressionScheme(ChunkError):
    def __init__(self, tag: int) -> None:
        super().__init__(f"unknown chunk data compression method: {tag}")
        self.tag = tag


class DecompressionFailure(ChunkError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"error decompressing chunk data: {reason}")
        self.reason = reason


class MalformedChunk(ChunkError):
    """Raised when a chunk record points into the header or is cut short."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
