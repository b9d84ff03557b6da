"""
Region file header codec.

Layout (all integers big-endian):
  [0x0000-0x0FFF] Location table: 1024 x u32, (sector_offset << 8) | sector_count
  [0x1000-0x1FFF] Timestamp table: 1024 x u32, opaque to the pruner
  [0x2000-......] Chunk records, each starting on a 4096-byte sector boundary

Rewritten files get an all-zero timestamp table; only location entries for
surviving chunks are ever written.
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Final, List

from .dto import LocationEntry
from .errors import SectorOverflowError, TruncatedHeader

SECTOR_SIZE: Final[int] = 4096
HEADER_SECTORS: Final[int] = 2
HEADER_SIZE: Final[int] = HEADER_SECTORS * SECTOR_SIZE

GRID_SIZE: Final[int] = 32
SLOT_COUNT: Final[int] = GRID_SIZE * GRID_SIZE
ENTRY_SIZE: Final[int] = 4

MAX_SECTOR_OFFSET: Final[int] = (1 << 24) - 1
MAX_SECTOR_COUNT: Final[int] = 0xFF

_TABLE = struct.Struct(f">{SLOT_COUNT}I")
_ENTRY = struct.Struct(">I")


def slot_index(x: int, z: int) -> int:
    """Index of chunk (x, z) in the location table; coordinates wrap to the 32x32 grid."""
    return (x & 31) + (z & 31) * GRID_SIZE


def pack_location(sector_offset: int, sector_count: int) -> int:
    if not (0 <= sector_offset <= MAX_SECTOR_OFFSET and 0 <= sector_count <= MAX_SECTOR_COUNT):
        raise SectorOverflowError(sector_offset, sector_count)
    return (sector_offset << 8) | sector_count


def unpack_location(raw: int) -> LocationEntry:
    return LocationEntry(sector_offset=raw >> 8, sector_count=raw & 0xFF)


def read_location_table(f: BinaryIO) -> List[LocationEntry]:
    """Read and decode the 1024 location entries in slot order."""
    f.seek(0)
    raw = f.read(SECTOR_SIZE)
    if len(raw) < SECTOR_SIZE:
        raise TruncatedHeader(len(raw))
    return [unpack_location(v) for v in _TABLE.unpack(raw)]


def write_empty_header(f: BinaryIO) -> None:
    """Zero both header tables; a fresh file is not guaranteed to be zero-filled."""
    f.seek(0)
    f.write(bytes(HEADER_SIZE))


def write_location_entry(f: BinaryIO, slot: int, sector_offset: int, sector_count: int) -> None:
    """Overwrite exactly the 4 bytes of one slot's location entry."""
    if not 0 <= slot < SLOT_COUNT:
        raise IndexError(f"slot index out of range: {slot}")
    value = pack_location(sector_offset, sector_count)
    f.seek(slot * ENTRY_SIZE)
    f.write(_ENTRY.pack(value))
