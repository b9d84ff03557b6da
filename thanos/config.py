"""
Configuration schema for a pruning run.

Keep this lean and opinionated: only the knobs the pruner actually reads.
Logging defaults come from the environment (see LogSettings) so operators
can set them once without touching the command line.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class PruneConfig(BaseModel):
    """
    Centralized, validated configuration for one run over one world.
    Ages are game ticks.
    """

    model_config = ConfigDict(frozen=True)  # safe to share across worker threads

    # === Directories ===
    input_dir: Path = Field(
        description="World directory to prune; must exist.",
    )
    output_dir: Optional[Path] = Field(
        default=None,
        description="Where the pruned world goes. None (or the input dir) prunes in place; "
        "otherwise it must not exist yet and is created.",
    )
    region_dirname: str = Field(
        default="region",
        min_length=1,
        description="Subdirectory of the world holding the region files.",
    )
    extension: str = Field(
        default="mca",
        min_length=1,
        description="Region file extension, without the dot.",
    )

    # === Selection ===
    inhabited_time_threshold: int = Field(
        default=0,
        ge=INT64_MIN,
        le=INT64_MAX,
        description="Chunks with an age at or below this value are deleted.",
    )
    age_field: str = Field(
        default="InhabitedTime",
        min_length=1,
        description="Name of the TAG_Long holding a chunk's age.",
    )

    # === Workers ===
    threads: int = Field(
        default=4,
        ge=1,
        le=256,
        description="Size of the worker pool; one region file per worker at a time.",
    )

    # --- derived ---

    @property
    def resolved_output_dir(self) -> Path:
        return self.output_dir if self.output_dir is not None else self.input_dir

    @property
    def in_place(self) -> bool:
        """True when output and input are the same directory."""
        if self.output_dir is None:
            return True
        return self.output_dir.resolve() == self.input_dir.resolve()

    @property
    def input_region_dir(self) -> Path:
        return self.input_dir / self.region_dirname

    @property
    def output_region_dir(self) -> Path:
        return self.resolved_output_dir / self.region_dirname


class LogSettings:
    """Environment-driven defaults for the CLI (safe defaults)."""

    LOG_LEVEL = os.getenv("THANOS_LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("THANOS_LOG_FILE") or None
    THREADS = int(os.getenv("THANOS_THREADS", "4"))
