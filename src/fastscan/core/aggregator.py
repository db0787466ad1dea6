"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/aggregator.py
Turns a finished session into a ScanResult: final sort, stage timings,
averages and hashing statistics.
"""

import logging
import time
from typing import Iterable, List, Optional

from fastscan.core.models import (
    FileRecord, HashMethod, HashStats, ScanResult, StageTimings
)

logger = logging.getLogger(__name__)


def _average(total: float, count: int) -> float:
    return total / count if count > 0 else 0.0


class ResultAggregator:

    def __init__(self, session):
        self.session = session

    @staticmethod
    def sort_files(files: Iterable[FileRecord]) -> List[FileRecord]:
        """Ascending creation time; equal times ordered by path."""
        return sorted(files, key=lambda f: (f.create_time, f.path))

    def compile(self, scan_started: float) -> ScanResult:
        """
        Sorts the collected files and freezes the session.
        `scan_started` is the perf_counter() value taken when traversal began.
        """
        session = self.session

        sort_start = time.perf_counter()
        files = self.sort_files(session.files.values())
        sort_time = time.perf_counter() - sort_start
        scan_duration = time.perf_counter() - scan_started

        stats = session.stats.copy()
        total_files = len(files)
        timings = StageTimings(
            scan_duration=scan_duration,
            pure_scan_time=scan_duration - sort_time,
            stat_time=stats.stat_time,
            hash_time=stats.hash_time,
            sort_time=sort_time,
            average_stat_time=_average(stats.stat_time, total_files),
            average_sort_time=_average(sort_time, total_files),
            average_hash_time=_average(stats.hash_time, stats.files_with_hash),
        )

        session.complete()
        logger.debug(
            f"Scan of {session.root} completed: {total_files} files, "
            f"{stats.directories_scanned} directories in {scan_duration:.3f}s "
            f"(sort {sort_time:.4f}s, peak concurrency {stats.max_concurrent})"
        )

        return ScanResult(
            root=session.root,
            params=session.params,
            files=files,
            timings=timings,
            stats=stats,
            warnings=list(session.warnings),
            hash_stats=self._hash_stats(),
            cancelled=session.cancelled,
            _file_map=dict(session.files),
            _hash_map=dict(session.hashes),
            _groups=session.index.snapshot(),
        )

    def _hash_stats(self) -> Optional[HashStats]:
        session = self.session
        if not session.params.enable_hash:
            return None
        hash_stats = HashStats(
            duplicate_count=session.index.duplicate_count,
            duplicate_groups=len(session.index.groups()),
            hash_errors=session.stats.hash_errors,
        )
        for record in session.hashes.values():
            if record.method is HashMethod.FULL:
                hash_stats.full_hashed += 1
            else:
                hash_stats.sampled_hashed += 1
        return hash_stats
