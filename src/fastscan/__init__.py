"""
fastscan: bounded-concurrency directory scanner with sampled-hash duplicate detection.

Core features:
- Concurrent traversal capped by max_concurrency, with exact completion detection
- Per-file metadata (size, creation/modification/access time) in batched stat calls
- Optional fingerprints: full content for small files, head/middle/tail samples for large ones
- Candidate-duplicate groups and read-only queries over the finished scan
- CLI interface for headless usage
"""

from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("fastscan")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API, only what users should import directly
from fastscan.commands import ScanCommand
from fastscan.core import (
    scan, scan_async, ScanParams, ScanResult, FileRecord, HashRecord, HashMethod,
    DuplicateGroup, ScanWarning, WarningKind, FatalRootError
)
from fastscan.utils.convert_utils import ConvertUtils

__all__ = [
    "ScanCommand",
    "scan",
    "scan_async",
    "ScanParams",
    "ScanResult",
    "FileRecord",
    "HashRecord",
    "HashMethod",
    "DuplicateGroup",
    "ScanWarning",
    "WarningKind",
    "FatalRootError",
    "ConvertUtils",
    "__version__",
]
