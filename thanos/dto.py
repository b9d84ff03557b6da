"""
Data Transfer Objects (DTOs) used across the pruner.

These are intentionally small, immutable, and independent of any I/O or
parsing libraries. Everything here is built fresh per region file and thrown
away once the rewritten file is on disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Literal, Optional

Outcome = Literal[
    "written",          # survivors repacked into a new file
    "empty_removed",    # zero-length input deleted (in place)
    "empty_skipped",    # zero-length input ignored (distinct output dir)
    "header_missing",   # 0 < length < 8192; left untouched
    "fully_pruned",     # no chunk survived; nothing written
    "failed",           # RegionError or unexpected exception
]

OUTCOMES: tuple[Outcome, ...] = (
    "written",
    "empty_removed",
    "empty_skipped",
    "header_missing",
    "fully_pruned",
    "failed",
)


# === Intake ===
@dataclass(frozen=True)
class RegionHandle:
    """One region file `r.<x>.<z>.<ext>` selected for pruning."""
    name: str        # bare filename, reused for the output file
    path: Path
    region_x: int
    region_z: int


# === Header ===
@dataclass(frozen=True)
class LocationEntry:
    """Decoded location table entry (24-bit sector offset, 8-bit sector count)."""
    sector_offset: int
    sector_count: int

    @property
    def is_empty(self) -> bool:
        return self.sector_offset == 0 and self.sector_count == 0


# === Chunk record ===
@dataclass(frozen=True)
class ChunkRecord:
    """
    A stored chunk as read from disk. Survivors of filtering are kept in this
    form; `body` is never recompressed, and `slot` is where the rewritten
    location entry goes.
    """
    slot: int
    location: LocationEntry
    compression: int
    body: bytes


# === Results ===
@dataclass(frozen=True)
class RegionReport:
    name: str
    outcome: Outcome
    chunks_total: int = 0      # non-empty slots in the input
    chunks_kept: int = 0
    chunks_skipped: int = 0    # dropped because of a ChunkError
    bytes_before: int = 0
    bytes_after: int = 0
    error: Optional[str] = None


@dataclass
class RunSummary:
    """Everything a finished run produced; consumed by the CLI."""
    reports: List[RegionReport] = field(default_factory=list)

    @property
    def counts(self) -> Dict[str, int]:
        out = {o: 0 for o in OUTCOMES}
        for r in self.reports:
            out[r.outcome] += 1
        return out

    @property
    def bytes_before(self) -> int:
        return sum(r.bytes_before for r in self.reports)

    @property
    def bytes_after(self) -> int:
        return sum(r.bytes_after for r in self.reports)

    @property
    def failed(self) -> List[RegionReport]:
        return [r for r in self.reports if r.outcome == "failed"]
