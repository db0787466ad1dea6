"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the scanning system.

Key Components:
---------------
- HashStream / HashAlgorithm: pluggable mixing function (xxHash64, FNV-1a-64, ...).
- Fingerprinter: computes a file fingerprint from its size and bytes.
- StatCollector: fetches metadata for the files of one directory.
"""

from typing import Protocol, List, Tuple
from fastscan.core.models import HashRecord


class HashStream(Protocol):
    """Incremental, order-sensitive 64-bit hash state."""
    def update(self, data: bytes) -> None: ...
    def intdigest(self) -> int: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic 64-bit hash algorithms.

    Allows plugging in different mixing functions without affecting
    sampling, size-mixing or grouping.
    """
    name: str

    def create(self, seed: int = 0) -> HashStream:
        """Returns a fresh hash state seeded with `seed` (unsigned 64-bit)."""
        ...


class Fingerprinter(Protocol):
    """Interface for computing a content fingerprint of one file."""
    async def fingerprint(self, full_path: str, relative_path: str, size: int) -> HashRecord:
        """
        Raises:
            HashComputeError: if any byte range cannot be read.
        """
        ...


class StatCollector(Protocol):
    async def collect(self, entries: List[Tuple[str, str]]) -> None:
        """
        Fetch metadata for (full_path, relative_path) pairs of one directory
        and record them in the session.
        """
        ...
