"""
Hand-built NBT payloads and region files for tests.

Everything is assembled with struct/gzip/zlib so the code under test never
reads a fixture it helped produce.
"""

from __future__ import annotations

import gzip
import random
import struct
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

SECTOR = 4096

TAG_END = 0
TAG_INT = 3
TAG_LONG = 4
TAG_BYTE_ARRAY = 7
TAG_STRING = 8
TAG_COMPOUND = 10


# === NBT ===


def _named(tag_id: int, name: str, payload: bytes) -> bytes:
    raw = name.encode("utf-8")
    return struct.pack(">BH", tag_id, len(raw)) + raw + payload


def nbt_long(name: str, value: int) -> bytes:
    return _named(TAG_LONG, name, struct.pack(">q", value))


def nbt_int(name: str, value: int) -> bytes:
    return _named(TAG_INT, name, struct.pack(">i", value))


def nbt_string(name: str, value: str) -> bytes:
    raw = value.encode("utf-8")
    return _named(TAG_STRING, name, struct.pack(">H", len(raw)) + raw)


def nbt_byte_array(name: str, data: bytes) -> bytes:
    return _named(TAG_BYTE_ARRAY, name, struct.pack(">i", len(data)) + data)


def nbt_compound(name: str, *entries: bytes) -> bytes:
    return _named(TAG_COMPOUND, name, b"".join(entries) + bytes([TAG_END]))


def chunk_nbt(age: Optional[int], *, legacy: bool = False, filler: int = 0, seed: int = 0) -> bytes:
    """
    A minimal chunk compound. `age=None` leaves InhabitedTime out; `legacy`
    nests it under `Level`; `filler` adds that many random bytes so the
    compressed size can be steered.
    """
    fields = [nbt_int("xPos", 0), nbt_string("Status", "minecraft:full")]
    if age is not None:
        fields.append(nbt_long("InhabitedTime", age))
    if filler:
        fields.append(nbt_byte_array("Filler", random.Random(seed).randbytes(filler)))
    if legacy:
        return nbt_compound("", nbt_int("DataVersion", 1343), nbt_compound("Level", *fields))
    return nbt_compound("", nbt_int("DataVersion", 3465), *fields)


def compress(tag: int, data: bytes) -> bytes:
    if tag == 1:
        return gzip.compress(data, mtime=0)
    if tag == 2:
        return zlib.compress(data)
    return data


# === Region files ===


@dataclass
class Chunk:
    x: int
    z: int
    age: Optional[int] = 100
    tag: int = 2
    filler: int = 0
    body: Optional[bytes] = None  # overrides the generated, compressed NBT

    @property
    def slot(self) -> int:
        return (self.x & 31) + (self.z & 31) * 32

    def stored_body(self) -> bytes:
        if self.body is not None:
            return self.body
        return compress(self.tag, chunk_nbt(self.age, filler=self.filler, seed=self.slot))


def build_region(path: Path, chunks: List[Chunk], *, gap_sectors: int = 1) -> Path:
    """
    Write a region file holding `chunks`. A free gap of `gap_sectors` is left
    before each record and every slot gets a non-zero timestamp, so a
    compacted rewrite is always distinguishable from the input.
    """
    locations = bytearray(SECTOR)
    timestamps = bytearray(SECTOR)
    data = bytearray()
    sector = 2

    for chunk in chunks:
        sector += gap_sectors
        data.extend(bytes(gap_sectors * SECTOR))
        body = chunk.stored_body()
        record = struct.pack(">iB", len(body) + 1, chunk.tag) + body
        count = -(-len(record) // SECTOR)
        record += bytes(count * SECTOR - len(record))
        struct.pack_into(">I", locations, chunk.slot * 4, (sector << 8) | count)
        struct.pack_into(">I", timestamps, chunk.slot * 4, 1_700_000_000 + chunk.slot)
        data.extend(record)
        sector += count

    path.write_bytes(bytes(locations) + bytes(timestamps) + bytes(data))
    return path


@dataclass(frozen=True)
class StoredChunk:
    slot: int
    sector_offset: int
    sector_count: int
    tag: int
    body: bytes


def read_region(path: Path) -> Dict[int, StoredChunk]:
    """Independent decoder for assertions; returns occupied slots only."""
    raw = path.read_bytes()
    out: Dict[int, StoredChunk] = {}
    for slot in range(1024):
        (loc,) = struct.unpack_from(">I", raw, slot * 4)
        if loc == 0:
            continue
        offset, count = loc >> 8, loc & 0xFF
        length, tag = struct.unpack_from(">iB", raw, offset * SECTOR)
        start = offset * SECTOR + 5
        out[slot] = StoredChunk(slot, offset, count, tag, raw[start:start + length - 1])
    return out


def timestamp_table(path: Path) -> bytes:
    return path.read_bytes()[SECTOR:2 * SECTOR]
