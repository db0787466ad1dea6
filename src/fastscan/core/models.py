"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for directory scanning, fingerprinting and duplicate grouping.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import List, Dict, Optional, Any, Union
from enum import Enum
import heapq

from fastscan.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class HashMethod(str, Enum):
    """How a fingerprint was produced."""
    FULL = "full"
    SAMPLED = "sampled"


class WarningKind(str, Enum):
    """Kind of a recovered, per-item failure."""
    DIRECTORY_READ = "directory-read"
    FILE_STAT = "file-stat"
    HASH_COMPUTE = "hash-compute"

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            WarningKind.DIRECTORY_READ: "Unreadable directory",
            WarningKind.FILE_STAT: "Stat failed",
            WarningKind.HASH_COMPUTE: "Hash failed",
        }
        return mapping.get(self, self.value)


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


# ======================
#  Core Data Models
# ======================

@dataclass
class FileRecord:
    """
    Metadata of a single regular file found during a scan.
    `path` is relative to the scan root and unique within a session.
    """
    path: str
    size: int  # in bytes
    create_time: float
    modify_time: float
    access_time: float
    stat_duration: float = 0.0  # seconds spent in stat()

    @property
    def formatted_size(self) -> str:
        return ConvertUtils.bytes_to_human(self.size)

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass
class HashRecord:
    path: str
    digest: str  # 16 lowercase hex chars
    method: HashMethod
    compute_duration: float = 0.0

    def __repr__(self):
        return f"<HashRecord path={self.path}, digest={self.digest}, method={self.method.value}>"


@dataclass
class DuplicateGroup:
    """
    Files sharing one fingerprint.
    Membership means equal fingerprints only: for sampled files this is a
    candidate relation, not proof of identical content.
    """
    digest: str
    paths: List[str]
    size: Optional[int] = None

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.paths)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def __repr__(self):
        return f"<DuplicateGroup digest={self.digest}, count={len(self.paths)}>"


@dataclass
class ScanWarning:
    kind: WarningKind
    path: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "path": self.path, "message": self.message}


@dataclass
class ScanStats:
    """Running counters of a session. Mutated only from the event loop thread."""
    directories_scanned: int = 0
    files_scanned: int = 0
    active_tasks: int = 0
    max_concurrent: int = 0
    files_with_hash: int = 0
    duplicate_count: int = 0
    hash_errors: int = 0
    stat_time: float = 0.0
    hash_time: float = 0.0

    def task_started(self) -> None:
        self.active_tasks += 1
        if self.active_tasks > self.max_concurrent:
            self.max_concurrent = self.active_tasks

    def task_finished(self) -> None:
        self.active_tasks -= 1

    def copy(self) -> "ScanStats":
        return ScanStats(**asdict(self))


@dataclass
class StageTimings:
    """Per-stage elapsed times in seconds."""
    scan_duration: float = 0.0   # wall clock, sort included
    pure_scan_time: float = 0.0  # wall clock, sort excluded
    stat_time: float = 0.0       # cumulative per-file stat cost
    hash_time: float = 0.0       # cumulative per-file hash cost
    sort_time: float = 0.0
    average_stat_time: float = 0.0
    average_sort_time: float = 0.0
    average_hash_time: float = 0.0


@dataclass
class HashStats:
    full_hashed: int = 0
    sampled_hashed: int = 0
    duplicate_count: int = 0
    duplicate_groups: int = 0
    hash_errors: int = 0

    @property
    def files_hashed(self) -> int:
        return self.full_hashed + self.sampled_hashed


# =============================
# Parameters
# =============================

DEFAULT_MAX_CONCURRENCY = 200
DEFAULT_BATCH_SIZE = 50
DEFAULT_HASH_THRESHOLD = 10 * 1024
DEFAULT_HASH_SAMPLE_SIZE = 2 * 1024


@dataclass
class ScanParams:
    """Parameters for a scan with built-in validation. Used by both library and CLI."""
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    batch_size: int = DEFAULT_BATCH_SIZE
    enable_hash: bool = False
    hash_threshold: int = DEFAULT_HASH_THRESHOLD
    hash_sample_size: int = DEFAULT_HASH_SAMPLE_SIZE
    full_hash: bool = False  # ignore the threshold and always hash whole files; implies enable_hash
    io_timeout: Optional[float] = None
    context: Any = None  # opaque, carried through to ScanResult

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.hash_threshold < 0:
            raise ValueError("hash_threshold cannot be negative")
        if self.hash_sample_size < 1:
            raise ValueError("hash_sample_size must be at least 1")
        if self.io_timeout is not None and self.io_timeout <= 0:
            raise ValueError("io_timeout must be positive")
        if self.full_hash:
            self.enable_hash = True

    @staticmethod
    def from_human_readable(
            enable_hash: bool = False,
            hash_threshold_str: str = "10KB",
            sample_size_str: str = "2KB",
            max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
            batch_size: int = DEFAULT_BATCH_SIZE,
            full_hash: bool = False,
            io_timeout: Optional[float] = None,
    ) -> 'ScanParams':
        """Factory for CLI input such as '10KB' or '2K'."""
        return ScanParams(
            max_concurrency=max_concurrency,
            batch_size=batch_size,
            enable_hash=enable_hash or full_hash,
            hash_threshold=ConvertUtils.human_to_bytes(hash_threshold_str),
            hash_sample_size=ConvertUtils.human_to_bytes(sample_size_str),
            full_hash=full_hash,
            io_timeout=io_timeout,
        )


# =============================
# Result
# =============================

TimeBound = Union[float, int, datetime]


def _to_timestamp(value: TimeBound) -> float:
    if isinstance(value, datetime):
        return value.timestamp()
    return float(value)


@dataclass
class ScanResult:
    """
    Frozen outcome of a completed scan plus read-only queries over it.
    `files` is ordered by (create_time, path).
    """
    root: str
    params: ScanParams
    files: List[FileRecord]
    timings: StageTimings
    stats: ScanStats
    warnings: List[ScanWarning] = field(default_factory=list)
    hash_stats: Optional[HashStats] = None
    cancelled: bool = False
    _file_map: Dict[str, FileRecord] = field(default_factory=dict, repr=False)
    _hash_map: Dict[str, HashRecord] = field(default_factory=dict, repr=False)
    _groups: Dict[str, List[str]] = field(default_factory=dict, repr=False)

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.files)

    @property
    def context(self) -> Any:
        return self.params.context

    # ---- queries ----

    def get_file(self, path: str) -> Optional[FileRecord]:
        return self._file_map.get(path)

    def largest_files(self, count: int = 10) -> List[FileRecord]:
        """Top `count` files by size, largest first; ties ordered by path."""
        if count <= 0:
            return []
        return heapq.nsmallest(count, self.files, key=lambda f: (-f.size, f.path))

    def files_in_range(self, start: TimeBound, end: TimeBound) -> List[FileRecord]:
        """Files whose creation time lies in [start, end), in sorted order."""
        lo, hi = _to_timestamp(start), _to_timestamp(end)
        return [f for f in self.files if lo <= f.create_time < hi]

    def get_hash(self, path: str) -> Optional[HashRecord]:
        return self._hash_map.get(path)

    def digest_for(self, path: str) -> Optional[str]:
        record = self._hash_map.get(path)
        return record.digest if record else None

    def duplicate_groups(self) -> List[DuplicateGroup]:
        """All digests shared by two or more files."""
        groups = []
        for digest, paths in self._groups.items():
            if len(paths) < 2:
                continue
            first = self._file_map.get(paths[0])
            groups.append(DuplicateGroup(digest=digest, paths=list(paths),
                                         size=first.size if first else None))
        return groups

    def paths_by_digest(self, digest: str) -> List[str]:
        return list(self._groups.get(digest, []))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready view of the result (files and duplicate groups included)."""
        data = {
            "root": self.root,
            "total_files": self.total_files,
            "total_size": self.total_size,
            "formatted_total_size": ConvertUtils.bytes_to_human(self.total_size),
            "cancelled": self.cancelled,
            "timings": asdict(self.timings),
            "stats": asdict(self.stats),
            "warnings": [w.to_dict() for w in self.warnings],
            "files": [asdict(f) for f in self.files],
            "hash_stats": None,
            "duplicate_groups": [],
        }
        if self.hash_stats is not None:
            data["hash_stats"] = dict(asdict(self.hash_stats), files_hashed=self.hash_stats.files_hashed)
            data["duplicate_groups"] = [
                {"digest": g.digest, "size": g.size, "paths": g.paths}
                for g in self.duplicate_groups()
            ]
        return data
