"""
World directory preparation: startup checks and the whole-tree copy.

When pruning into a new directory, everything except the region files is
duplicated first so the output is a complete world; the region directory
itself is created empty and filled by the pruner.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .config import PruneConfig
from .errors import StartupError

logger = logging.getLogger(__name__)


def copy_except_region(input_dir: Path, output_dir: Path, region_dirname: str = "region") -> int:
    """
    Recursively copy `input_dir` into `output_dir`, skipping every directory
    named `region_dirname` at any depth. Returns the number of files copied.

    Raises StartupError naming the path that could not be read or written.
    """
    input_dir = Path(input_dir)
    output_dir = Path(output_dir)
    copied = 0
    pending = [input_dir]

    while pending:
        current = pending.pop()
        try:
            entries = sorted(current.iterdir())
        except OSError as exc:
            raise StartupError(f"failed to read directory '{current}': {exc}") from exc

        for path in entries:
            destination = output_dir / path.relative_to(input_dir)
            if path.is_dir():
                if path.name == region_dirname or path.resolve() == output_dir.resolve():
                    continue
                pending.append(path)
                try:
                    destination.mkdir(parents=True, exist_ok=True)
                except OSError as exc:
                    raise StartupError(
                        f"failed to create directory '{destination}': {exc}"
                    ) from exc
            else:
                try:
                    shutil.copyfile(path, destination)
                except OSError as exc:
                    raise StartupError(
                        f"failed to copy file '{path}' to '{destination}': {exc}"
                    ) from exc
                copied += 1

    return copied


def prepare_output(cfg: PruneConfig) -> None:
    """
    Validate directories and, for a distinct output dir, build it.

    Raises StartupError before anything is written if the input world or its
    region directory is missing, or the output directory already exists.
    """
    if not cfg.input_dir.is_dir():
        raise StartupError(f"input directory does not exist: {cfg.input_dir}")
    if not cfg.input_region_dir.is_dir():
        raise StartupError(f"input region directory does not exist: {cfg.input_region_dir}")

    if cfg.in_place:
        return

    out = cfg.resolved_output_dir
    if out.exists():
        raise StartupError(f"output directory already exists: {out}")

    try:
        out.mkdir(parents=True)
    except OSError as exc:
        raise StartupError(f"couldn't create output directory - {exc}") from exc

    logger.info("Copying world files from '%s' to '%s'", cfg.input_dir, out)
    copied = copy_except_region(cfg.input_dir, out, cfg.region_dirname)
    logger.info("Copied %d world files", copied)

    try:
        cfg.output_region_dir.mkdir()
    except OSError as exc:
        raise StartupError(f"couldn't create region directory - {exc}") from exc
