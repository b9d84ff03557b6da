"""
Sector allocation and output writer for rewritten region files.

Surviving chunks are laid out back to back starting right after the two
header tables, in the order they were collected. Each record is padded to a
whole number of sectors, so every offset is sector aligned and the file ends
exactly on a sector boundary.

The output is built in a temporary file next to the destination and moved
into place with os.replace, so readers only ever see a complete file.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..dto import ChunkRecord
from ..errors import SectorOverflowError
from ..header import (
    HEADER_SECTORS,
    MAX_SECTOR_COUNT,
    SECTOR_SIZE,
    write_empty_header,
    write_location_entry,
)
from ..intake.chunk_reader import RECORD_HEADER_SIZE, encode_record_header


@dataclass(frozen=True)
class Placement:
    chunk: ChunkRecord
    sector_offset: int
    sector_count: int


def sectors_for(body_len: int) -> int:
    """Sectors needed for one record: 5-byte record header plus body, rounded up."""
    return -(-(body_len + RECORD_HEADER_SIZE) // SECTOR_SIZE)


def plan_layout(chunks: Sequence[ChunkRecord]) -> Tuple[List[Placement], int]:
    """
    Assign gap-free sector offsets to `chunks` in order.

    Returns the placements and the first free sector after the last record
    (i.e. the output length in sectors).
    """
    placements: List[Placement] = []
    sector = HEADER_SECTORS
    for chunk in chunks:
        count = sectors_for(len(chunk.body))
        if count > MAX_SECTOR_COUNT:
            raise SectorOverflowError(sector, count)
        placements.append(Placement(chunk=chunk, sector_offset=sector, sector_count=count))
        sector += count
    return placements, sector


def write_region(
    dest: Path,
    chunks: Sequence[ChunkRecord],
    *,
    mode_from: Optional[Path] = None,
) -> int:
    """
    Write `chunks` as a fresh region file at `dest` and return its size in bytes.

    Only location entries for `chunks` are written (at each chunk's own slot);
    every other entry and the whole timestamp table stay zero. If `mode_from`
    is given, its permission bits are copied onto the new file.
    """
    placements, end_sector = plan_layout(chunks)
    end = end_sector * SECTOR_SIZE

    fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".tmp", dir=dest.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            write_empty_header(f)
            for p in placements:
                write_location_entry(f, p.chunk.slot, p.sector_offset, p.sector_count)
                f.seek(p.sector_offset * SECTOR_SIZE)
                f.write(encode_record_header(len(p.chunk.body), p.chunk.compression))
                f.write(p.chunk.body)
            # Pads the last record to a full sector and drops anything beyond it
            f.truncate(end)
            f.flush()
            os.fsync(f.fileno())
        if mode_from is not None:
            shutil.copymode(mode_from, tmp)
        os.replace(tmp, dest)
    finally:
        tmp.unlink(missing_ok=True)
    return end
