"""
Region compactor: prune one region file end to end.

Phases (run once each, in order):
  1. classify  - size check; empty and header-less files stop here
  2. scan      - read every occupied slot, decompress, keep chunks older
                 than the threshold
  3. prune     - nothing survived: write nothing (and drop the input when
                 working in place)
  4. repack    - write survivors into a gap-free file via the packer

A ChunkError drops one chunk and scanning continues. A RegionError
(FieldReadError, SectorOverflowError) propagates to the caller with the
input file untouched and no output written.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, List, Tuple

from ..dto import ChunkRecord, RegionHandle, RegionReport
from ..errors import ChunkError, TruncatedHeader
from ..header import GRID_SIZE, read_location_table, slot_index
from ..intake.chunk_reader import read_chunk
from ..intake.decompress import decompress_payload
from ..intake.validator import classify_region
from .packer import write_region
from .selection import AgeFilter

logger = logging.getLogger(__name__)


class RegionCompactor:
    """
    Prunes region files one at a time. Instances hold configuration only and
    can be shared across worker threads.

    Parameters
    ----------
    output_dir : Path
        Directory the rewritten region files go to.
    in_place : bool
        True when `output_dir` is the input directory; empty and fully
        pruned inputs are then deleted instead of skipped.
    age_filter : AgeFilter
        Decides which chunks survive.
    """

    def __init__(self, *, output_dir: Path, in_place: bool, age_filter: AgeFilter) -> None:
        self._output_dir = Path(output_dir)
        self._in_place = bool(in_place)
        self._filter = age_filter

    def compact(self, region: RegionHandle) -> RegionReport:
        # --- classify ---
        kind, size = classify_region(region)

        if kind == "empty":
            if self._in_place:
                logger.info("Removing empty region file %s", region.name)
                region.path.unlink()
                return RegionReport(region.name, "empty_removed")
            logger.info("Skipping empty region file %s", region.name)
            return RegionReport(region.name, "empty_skipped")

        if kind == "header_missing":
            logger.warning("Missing headers in region file %s (%d bytes)", region.name, size)
            return RegionReport(region.name, "header_missing", bytes_before=size)

        # --- scan ---
        try:
            survivors, total, skipped = self._scan(region)
        except TruncatedHeader as exc:
            logger.warning("Missing headers in region file %s: %s", region.name, exc)
            return RegionReport(region.name, "header_missing", bytes_before=size)

        # --- prune ---
        if not survivors:
            if self._in_place:
                region.path.unlink()
            logger.debug("Region file %s has no chunks left after pruning", region.name)
            return RegionReport(
                region.name,
                "fully_pruned",
                chunks_total=total,
                chunks_skipped=skipped,
                bytes_before=size,
            )

        # --- repack ---
        dest = self._output_dir / region.name
        written = write_region(dest, survivors, mode_from=region.path)
        logger.info(
            "Rewrote region file %s: kept %d of %d chunks (%d -> %d bytes)",
            region.name, len(survivors), total, size, written,
        )
        return RegionReport(
            region.name,
            "written",
            chunks_total=total,
            chunks_kept=len(survivors),
            chunks_skipped=skipped,
            bytes_before=size,
            bytes_after=written,
        )

    # === Helpers ===

    def _scan(self, region: RegionHandle) -> Tuple[List[ChunkRecord], int, int]:
        """Return (survivors in visit order, occupied slots, skipped chunks)."""
        survivors: List[ChunkRecord] = []
        total = 0
        skipped = 0

        with open(region.path, "rb") as f:
            table = read_location_table(f)

            for x in range(GRID_SIZE):
                for z in range(GRID_SIZE):
                    slot = slot_index(x, z)
                    location = table[slot]
                    if location.is_empty:
                        continue
                    total += 1

                    try:
                        chunk, payload = self._load(f, slot, location)
                    except ChunkError as exc:
                        skipped += 1
                        logger.warning(
                            "Skipping chunk (%d, %d) in %s: %s",
                            region.region_x * GRID_SIZE + x,
                            region.region_z * GRID_SIZE + z,
                            region.name,
                            exc,
                        )
                        continue

                    age = self._filter.age_of(payload)
                    if self._filter.keeps(age):
                        survivors.append(chunk)

        return survivors, total, skipped

    @staticmethod
    def _load(f: BinaryIO, slot: int, location) -> Tuple[ChunkRecord, bytes]:
        chunk = read_chunk(f, slot, location)
        return chunk, decompress_payload(chunk.compression, chunk.body)
