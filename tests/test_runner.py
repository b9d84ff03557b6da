from concurrent.futures import ThreadPoolExecutor

import pytest

from thanos.config import PruneConfig
from thanos.errors import StartupError
from thanos.intake.region_source_fs import FilesystemRegionSource
from thanos.orchestration.runner import prune_regions, run
from region_helpers import Chunk, build_region, read_region


class CountingBar:
    def __init__(self):
        self.total = None
        self.n = 0

    def reset(self, total=None):
        self.total = total
        self.n = 0

    def update(self, n=1):
        self.n += n


def _world(tmp_path):
    world = tmp_path / "world"
    region = world / "region"
    region.mkdir(parents=True)
    (world / "level.dat").write_bytes(b"level")
    (world / "data").mkdir()
    (world / "data" / "raids.dat").write_bytes(b"raids")
    (world / "DIM-1" / "region").mkdir(parents=True)
    (world / "DIM-1" / "region" / "r.0.0.mca").write_bytes(b"nether")

    build_region(region / "r.0.0.mca", [Chunk(0, 0, age=0), Chunk(1, 1, age=50)])
    build_region(region / "r.-1.0.mca", [Chunk(0, 0, age=0)])
    build_region(region / "r.0.-1.mca", [Chunk(2, 2, age=None)])  # unreadable age
    (region / "r.1.1.mca").write_bytes(b"")
    (region / "r.1.2.3.mca").write_bytes(b"not a region")
    (region / "notes.txt").write_bytes(b"hello")
    return world


def test_prune_regions_isolates_failures(tmp_path, make_compactor):
    world = _world(tmp_path)
    region = world / "region"
    bar = CountingBar()

    with ThreadPoolExecutor(max_workers=1) as pool:
        reports = prune_regions(
            source=FilesystemRegionSource(region),
            compactor=make_compactor(region, in_place=True),
            executor=pool,
            pbar=bar,
        )

    outcomes = {r.name: r.outcome for r in reports}
    assert outcomes == {
        "r.-1.0.mca": "fully_pruned",
        "r.0.-1.mca": "failed",
        "r.0.0.mca": "written",
        "r.1.1.mca": "empty_removed",
    }
    assert [r.name for r in reports] == sorted(outcomes)
    failed = next(r for r in reports if r.outcome == "failed")
    assert "InhabitedTime" in failed.error
    assert (bar.total, bar.n) == (4, 4)


def test_prune_regions_reports_unexpected_errors(tmp_path, region_dir):
    build_region(region_dir / "r.0.0.mca", [Chunk(0, 0)])

    class Boom:
        def compact(self, region):
            raise RuntimeError("disk on fire")

    with ThreadPoolExecutor(max_workers=2) as pool:
        (report,) = prune_regions(
            source=FilesystemRegionSource(region_dir), compactor=Boom(), executor=pool
        )
    assert report.outcome == "failed"
    assert report.error == "RuntimeError: disk on fire"


def test_run_in_place(tmp_path):
    world = _world(tmp_path)
    region = world / "region"

    summary = run(PruneConfig(input_dir=world, threads=2))

    assert summary.counts["written"] == 1
    assert summary.counts["failed"] == 1
    assert sorted(p.name for p in region.iterdir()) == [
        "notes.txt",
        "r.0.-1.mca",
        "r.0.0.mca",
        "r.1.2.3.mca",
    ]
    assert set(read_region(region / "r.0.0.mca")) == {1 + 32}
    assert (region / "r.1.2.3.mca").read_bytes() == b"not a region"


def test_run_into_new_directory(tmp_path):
    world = _world(tmp_path)
    before = {p: p.read_bytes() for p in (world / "region").iterdir()}
    out = tmp_path / "pruned"

    with ThreadPoolExecutor(max_workers=1) as pool:
        summary = run(PruneConfig(input_dir=world, output_dir=out), executor=pool)

    assert summary.counts["empty_skipped"] == 1
    assert {p: p.read_bytes() for p in (world / "region").iterdir()} == before
    assert sorted(p.name for p in (out / "region").iterdir()) == ["r.0.0.mca"]
    assert (out / "level.dat").read_bytes() == b"level"
    assert (out / "data" / "raids.dat").read_bytes() == b"raids"
    assert not (out / "DIM-1" / "region").exists()
    assert (out / "DIM-1").is_dir()


def test_run_threshold_from_config(tmp_path):
    world = _world(tmp_path)
    summary = run(PruneConfig(input_dir=world, inhabited_time_threshold=50))
    assert summary.counts["fully_pruned"] == 2
    assert not (world / "region" / "r.0.0.mca").exists()


def test_run_missing_input(tmp_path):
    with pytest.raises(StartupError, match="input directory does not exist"):
        run(PruneConfig(input_dir=tmp_path / "nope"))


def test_run_missing_region_dir(tmp_path):
    with pytest.raises(StartupError, match="region directory"):
        run(PruneConfig(input_dir=tmp_path))


def test_run_existing_output(tmp_path):
    world = _world(tmp_path)
    out = tmp_path / "pruned"
    out.mkdir()
    with pytest.raises(StartupError, match="already exists"):
        run(PruneConfig(input_dir=world, output_dir=out))
    assert list(out.iterdir()) == []
