"""
thanos: prune rarely visited chunks from region files.

Public API (stable):
- PruneConfig              (configuration)
- run                      (prunes one world)
- prune_regions            (dispatches region files over an executor)
- RegionCompactor          (prunes one region file)
- AgeFilter                (chunk selection)
- RegionSourcePort         (input adapter interface)
- FieldReaderPort          (payload field lookup interface)
- FilesystemRegionSource   (filesystem-backed region source)
- NbtFieldReader           (nbtlib-backed field reader)
- DTOs: RegionHandle, LocationEntry, ChunkRecord, RegionReport, RunSummary

This package intentionally exposes a small surface area so callers can wire
sources and readers without depending on internals.
"""

from __future__ import annotations

# Configuration
from .config import PruneConfig

# Orchestration
from .orchestration.runner import prune_regions, run

# Pipeline
from .pipeline.compactor import RegionCompactor
from .pipeline.selection import AgeFilter

# Ports
from .ports import FieldReaderPort, RegionSourcePort

# Adapters
from .intake.nbt_reader import NbtFieldReader
from .intake.region_source_fs import FilesystemRegionSource

# DTOs
from .dto import (
    ChunkRecord,
    LocationEntry,
    RegionHandle,
    RegionReport,
    RunSummary,
)

__all__ = [
    "PruneConfig",
    "run",
    "prune_regions",
    "RegionCompactor",
    "AgeFilter",
    "FieldReaderPort",
    "RegionSourcePort",
    "NbtFieldReader",
    "FilesystemRegionSource",
    "ChunkRecord",
    "LocationEntry",
    "RegionHandle",
    "RegionReport",
    "RunSummary",
]
