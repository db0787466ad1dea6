"""
Core scanning engine: traversal, metadata collection, fingerprinting and duplicate indexing.

This package contains the performance-critical foundation of fastscan:
- TraversalScheduler: bounded worker pool over a directory-task queue with quiescence tracking
- StatCollectorImpl: batched concurrent stat() of the files of one directory
- HasherImpl + XXHashAlgorithmImpl: full or head/mid/tail sampled fingerprints with size mixing
- DuplicateIndex: digest -> paths, discovery order
- ResultAggregator: final sort, timings and the frozen ScanResult

All components are pure Python on top of asyncio: suitable for CLI and server usage.
"""

from .scanner import scan, scan_async, TraversalScheduler, list_directory
from .collector import StatCollectorImpl
from .hasher import (
    HasherImpl, XXHashAlgorithmImpl, Fnv1a64AlgorithmImpl, compute_digest, sample_windows
)
from .index import DuplicateIndex
from .aggregator import ResultAggregator
from .session import ScanSession
from .exceptions import (
    ScanError, DirectoryReadError, FileStatError, HashComputeError, FatalRootError
)
from .models import (
    FileRecord, HashRecord, HashMethod, DuplicateGroup, ScanWarning, WarningKind,
    ScanParams, ScanResult, ScanStats, StageTimings, HashStats, SessionState
)

__all__ = [
    "scan",
    "scan_async",
    "TraversalScheduler",
    "list_directory",
    "StatCollectorImpl",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "Fnv1a64AlgorithmImpl",
    "compute_digest",
    "sample_windows",
    "DuplicateIndex",
    "ResultAggregator",
    "ScanSession",
    "ScanError",
    "DirectoryReadError",
    "FileStatError",
    "HashComputeError",
    "FatalRootError",
    "FileRecord",
    "HashRecord",
    "HashMethod",
    "DuplicateGroup",
    "ScanWarning",
    "WarningKind",
    "ScanParams",
    "ScanResult",
    "ScanStats",
    "StageTimings",
    "HashStats",
    "SessionState",
]
