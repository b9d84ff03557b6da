"""
Run orchestration: startup checks, world copy, and parallel region pruning.

`prune_regions` is the dispatcher: it fans region files out over a
caller-owned executor and turns each file's failure into a report instead of
letting it reach sibling workers. `run` wires it up for one whole world.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional

from ..config import PruneConfig
from ..dto import RegionHandle, RegionReport, RunSummary
from ..errors import RegionError
from ..intake.nbt_reader import NbtFieldReader
from ..intake.region_source_fs import FilesystemRegionSource
from ..pipeline.compactor import RegionCompactor
from ..pipeline.selection import AgeFilter
from ..ports import FieldReaderPort, RegionSourcePort
from ..world import prepare_output

logger = logging.getLogger(__name__)


def prune_regions(
    *,
    source: RegionSourcePort,
    compactor: RegionCompactor,
    executor: Executor,
    pbar=None,
) -> List[RegionReport]:
    """
    Compact every region file from `source` on `executor` and wait for all.

    Parameters
    ----------
    pbar : tqdm-like, optional
        Reset to the number of files, then advanced once per finished file.

    Returns
    -------
    List[RegionReport]
        One report per file, sorted by name. Files whose compaction raised
        are reported with outcome "failed".
    """
    handles = list(source.fetch())
    if pbar is not None:
        pbar.reset(total=len(handles))

    futures: Dict[Future, RegionHandle] = {
        executor.submit(compactor.compact, h): h for h in handles
    }

    reports: List[RegionReport] = []
    for fut in as_completed(futures):
        handle = futures[fut]
        try:
            report = fut.result()
        except RegionError as exc:
            logger.error("Skipping region file %s: %s", handle.name, exc)
            report = RegionReport(handle.name, "failed", error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while pruning region file %s", handle.name)
            report = RegionReport(handle.name, "failed", error=f"{type(exc).__name__}: {exc}")
        reports.append(report)
        if pbar is not None:
            pbar.update(1)

    reports.sort(key=lambda r: r.name)
    return reports


def run(
    cfg: PruneConfig,
    *,
    executor: Optional[Executor] = None,
    field_reader: Optional[FieldReaderPort] = None,
    pbar=None,
) -> RunSummary:
    """
    Prune one world according to `cfg`.

    Raises StartupError (before any region is touched) for missing or
    duplicate directories. Per-region failures end up in the summary.

    If `executor` is None, a ThreadPoolExecutor of `cfg.threads` workers is
    created for this run and shut down when it finishes.
    """
    prepare_output(cfg)

    source = FilesystemRegionSource(cfg.input_region_dir, extension=cfg.extension)
    compactor = RegionCompactor(
        output_dir=cfg.output_region_dir,
        in_place=cfg.in_place,
        age_filter=AgeFilter(
            threshold=cfg.inhabited_time_threshold,
            reader=field_reader or NbtFieldReader(),
            field=cfg.age_field,
        ),
    )

    if executor is not None:
        reports = prune_regions(source=source, compactor=compactor, executor=executor, pbar=pbar)
    else:
        with ThreadPoolExecutor(max_workers=cfg.threads, thread_name_prefix="thanos") as pool:
            reports = prune_regions(source=source, compactor=compactor, executor=pool, pbar=pbar)

    summary = RunSummary(reports=reports)
    logger.info(
        "Pruned %d region files (%s)",
        len(reports),
        ", ".join(f"{k}={v}" for k, v in summary.counts.items() if v),
    )
    return summary
