"""
Unit tests for ResultAggregator and the ScanResult query surface.
Uses hand-built sessions so timestamps and digests are fully controlled.
"""
import time
from datetime import datetime

import pytest

from fastscan.core.aggregator import ResultAggregator
from fastscan.core.models import (
    FileRecord, HashRecord, HashMethod, ScanParams, SessionState
)
from fastscan.core.session import ScanSession


def record(path, size, created):
    return FileRecord(path=path, size=size, create_time=created, modify_time=created, access_time=created)


@pytest.fixture
def session():
    s = ScanSession("/virtual/root", ScanParams(enable_hash=True))
    for rec in [
        record("c.bin", 300, 30.0),
        record("a.bin", 100, 10.0),
        record("b.bin", 500, 10.0),   # same creation time as a.bin
        record("d.bin", 200, 40.0),
        record("e.bin", 500, 50.0),
    ]:
        s.add_file(rec)
    s.add_hash(HashRecord("a.bin", "000000000000000a", HashMethod.FULL, 0.001))
    s.add_hash(HashRecord("c.bin", "000000000000000a", HashMethod.SAMPLED, 0.002))
    s.add_hash(HashRecord("d.bin", "000000000000000d", HashMethod.FULL, 0.001))
    return s


@pytest.fixture
def result(session):
    return ResultAggregator(session).compile(time.perf_counter())


class TestSorting:

    def test_sorted_by_creation_time_then_path(self, result):
        assert [f.path for f in result.files] == ["a.bin", "b.bin", "c.bin", "d.bin", "e.bin"]

    def test_tie_break_is_independent_of_insertion_order(self):
        first = ResultAggregator.sort_files([record("y", 1, 5.0), record("x", 1, 5.0)])
        second = ResultAggregator.sort_files([record("x", 1, 5.0), record("y", 1, 5.0)])
        assert [f.path for f in first] == [f.path for f in second] == ["x", "y"]

    def test_sort_is_idempotent(self, result):
        assert ResultAggregator.sort_files(result.files) == result.files


class TestCompile:

    def test_session_is_completed(self, session):
        ResultAggregator(session).compile(time.perf_counter())
        assert session.state is SessionState.COMPLETED

    def test_totals(self, result):
        assert result.total_files == 5
        assert result.total_size == 1600

    def test_hash_stats(self, result):
        hs = result.hash_stats
        assert hs.full_hashed == 2
        assert hs.sampled_hashed == 1
        assert hs.files_hashed == 3
        assert hs.duplicate_count == 2
        assert hs.duplicate_groups == 1

    def test_hash_timings(self, result):
        assert result.timings.hash_time == pytest.approx(0.004)
        assert result.timings.average_hash_time == pytest.approx(0.004 / 3)

    def test_result_is_detached_from_session(self, session, result):
        session.add_file(record("late.bin", 1, 99.0))
        session.add_hash(HashRecord("late.bin", "000000000000000a", HashMethod.FULL))
        assert result.get_file("late.bin") is None
        assert result.paths_by_digest("000000000000000a") == ["a.bin", "c.bin"]

    def test_context_is_passed_through(self):
        playback = {"order": "random", "source": "/videos"}
        s = ScanSession("/virtual", ScanParams(context=playback))
        res = ResultAggregator(s).compile(time.perf_counter())
        assert res.context is playback


class TestQueries:

    def test_largest_files(self, result):
        assert [f.path for f in result.largest_files(3)] == ["b.bin", "e.bin", "c.bin"]
        assert len(result.largest_files(100)) == 5
        assert result.largest_files(0) == []

    def test_files_in_half_open_range(self, result):
        assert [f.path for f in result.files_in_range(10.0, 40.0)] == ["a.bin", "b.bin", "c.bin"]
        assert [f.path for f in result.files_in_range(40.0, 50.0)] == ["d.bin"]
        assert result.files_in_range(60.0, 70.0) == []

    def test_files_in_range_accepts_datetimes(self, result):
        start = datetime.fromtimestamp(30.0)
        end = datetime.fromtimestamp(50.0)
        assert [f.path for f in result.files_in_range(start, end)] == ["c.bin", "d.bin"]

    def test_hash_lookup(self, result):
        assert result.digest_for("a.bin") == "000000000000000a"
        assert result.get_hash("c.bin").method is HashMethod.SAMPLED
        assert result.digest_for("b.bin") is None
        assert result.get_hash("nope") is None

    def test_duplicate_groups(self, result):
        groups = result.duplicate_groups()
        assert len(groups) == 1
        assert groups[0].digest == "000000000000000a"
        assert groups[0].paths == ["a.bin", "c.bin"]
        assert groups[0].is_duplicate()
        assert all("d.bin" not in g.paths for g in groups)

    def test_paths_by_digest(self, result):
        assert result.paths_by_digest("000000000000000d") == ["d.bin"]
        assert result.paths_by_digest("ffffffffffffffff") == []

    def test_get_file(self, result):
        assert result.get_file("e.bin").size == 500
        assert result.get_file("missing") is None
