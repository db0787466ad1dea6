"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/exceptions.py
Error taxonomy of a scan. Everything except FatalRootError is recovered in
place and reported as a ScanWarning.
"""

from fastscan.core.models import ScanWarning, WarningKind


class ScanError(Exception):
    """Base class for scan errors bound to one path."""
    kind: WarningKind = None

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message

    def to_warning(self) -> ScanWarning:
        return ScanWarning(kind=self.kind, path=self.path, message=self.message)


class DirectoryReadError(ScanError):
    """Directory could not be listed (permissions, removed mid-scan)."""
    kind = WarningKind.DIRECTORY_READ


class FileStatError(ScanError):
    kind = WarningKind.FILE_STAT


class HashComputeError(ScanError):
    kind = WarningKind.HASH_COMPUTE


class FatalRootError(ScanError):
    """Root path missing or inaccessible. Aborts the scan; no result is produced."""
