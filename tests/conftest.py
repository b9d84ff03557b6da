from __future__ import annotations

import logging
from pathlib import Path

import pytest

from thanos.intake.nbt_reader import NbtFieldReader
from thanos.pipeline.compactor import RegionCompactor
from thanos.pipeline.selection import AgeFilter


@pytest.fixture(autouse=True)
def _reset_thanos_logger():
    """The CLI configures the package logger; undo that so caplog keeps working."""
    yield
    logger = logging.getLogger("thanos")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def reader() -> NbtFieldReader:
    return NbtFieldReader()


@pytest.fixture
def region_dir(tmp_path: Path) -> Path:
    d = tmp_path / "world" / "region"
    d.mkdir(parents=True)
    return d


@pytest.fixture
def make_compactor(reader):
    def _make(output_dir: Path, *, in_place: bool, threshold: int = 0) -> RegionCompactor:
        return RegionCompactor(
            output_dir=output_dir,
            in_place=in_place,
            age_filter=AgeFilter(threshold=threshold, reader=reader),
        )
    return _make
