"""
Command-line entry point.

  thanos WORLD_DIR [OUTPUT_DIR] [-i TICKS] [-t THREADS]

Without OUTPUT_DIR the world is pruned in place: stale chunks are deleted
and empty region files removed. With OUTPUT_DIR a pruned copy is written
there and the input world is left alone.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from tqdm import tqdm

from .config import LogSettings, PruneConfig
from .dto import RunSummary
from .errors import StartupError
from .orchestration.runner import run
from .utils import format_bytes, init_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thanos",
        description="Delete rarely visited chunks from a world's region files.",
    )
    parser.add_argument("input_dir", type=Path, help="Path to the world directory")
    parser.add_argument(
        "output_dir",
        type=Path,
        nargs="?",
        default=None,
        help="Path to the output directory (default: prune the input world in place)",
    )
    parser.add_argument(
        "-i",
        "--inhabited-time",
        dest="inhabited_time",
        type=int,
        default=0,
        help="Maximum Inhabited Time, in ticks, of chunks to delete (default: 0)",
    )
    parser.add_argument(
        "-t",
        "--threads",
        type=int,
        default=LogSettings.THREADS,
        help="Number of threads to use for processing (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        default=LogSettings.LOG_LEVEL,
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=LogSettings.LOG_FILE,
        help="Also write logs to this rotating file",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )
    return parser


def print_summary(summary: RunSummary) -> None:
    counts = summary.counts
    print(f"Region files processed: {len(summary.reports)}")
    for outcome, n in counts.items():
        if n:
            print(f"  {outcome.replace('_', ' ')}: {n}")
    print(
        f"Size: {format_bytes(summary.bytes_before)} -> {format_bytes(summary.bytes_after)}"
    )
    for r in summary.failed:
        print(f"  failed: {r.name}: {r.error}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    init_logging(args.log_level, args.log_file)

    try:
        cfg = PruneConfig(
            input_dir=args.input_dir,
            output_dir=args.output_dir,
            inhabited_time_threshold=args.inhabited_time,
            threads=args.threads,
        )
    except ValidationError as exc:
        print(f"error: invalid configuration - {exc}", file=sys.stderr)
        return 1

    pbar = tqdm(desc="Pruning regions", unit="file", disable=args.no_progress)
    try:
        summary = run(cfg, pbar=pbar)
    except StartupError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        pbar.close()

    print_summary(summary)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
