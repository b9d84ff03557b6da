"""
Chunk record reader: pulls one stored chunk out of an open region file.

A record sits at `sector_offset * 4096`:
  u32 length   (big-endian; counts the tag byte plus the body)
  u8  tag      (compression scheme)
  ... body     (length - 1 bytes, still compressed)

No decompression happens here; see decompress.py.
"""

from __future__ import annotations

import struct
from typing import BinaryIO

from ..dto import ChunkRecord, LocationEntry
from ..errors import MalformedChunk
from ..header import HEADER_SECTORS, SECTOR_SIZE

_RECORD_HEADER = struct.Struct(">iB")
RECORD_HEADER_SIZE = _RECORD_HEADER.size  # 5


def read_chunk(f: BinaryIO, slot: int, location: LocationEntry) -> ChunkRecord:
    """
    Read the record referenced by `location` (which must not be empty).

    Raises MalformedChunk if the location points into the header tables or
    the record is cut short by the end of the file.
    """
    if location.sector_offset < HEADER_SECTORS:
        raise MalformedChunk(
            f"slot {slot}: sector offset {location.sector_offset} points into the header"
        )

    f.seek(location.sector_offset * SECTOR_SIZE)
    head = f.read(RECORD_HEADER_SIZE)
    if len(head) < RECORD_HEADER_SIZE:
        raise MalformedChunk(f"slot {slot}: chunk header truncated")

    length, tag = _RECORD_HEADER.unpack(head)
    if length < 1:
        raise MalformedChunk(f"slot {slot}: invalid chunk length {length}")

    body = f.read(length - 1)
    if len(body) != length - 1:
        raise MalformedChunk(
            f"slot {slot}: chunk data truncated ({len(body)} of {length - 1} bytes)"
        )

    return ChunkRecord(slot=slot, location=location, compression=tag, body=body)


def encode_record_header(body_len: int, tag: int) -> bytes:
    """Inverse of the record header parse above; used by the packer."""
    return _RECORD_HEADER.pack(body_len + 1, tag)
