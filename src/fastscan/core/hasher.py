"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file fingerprinting using pluggable 64-bit hash algorithms.

Small files (size <= threshold) are hashed in full. Larger files are hashed
from three windows (head, middle, tail). In both cases the file size is mixed
in afterwards by hashing it with the same algorithm, seeded with the content
hash, so files whose samples coincide but whose sizes differ never collide.
"""

import asyncio
import struct
import time
from typing import Iterable, List, Optional, Tuple

import xxhash

from fastscan.core.exceptions import HashComputeError
from fastscan.core.interfaces import Fingerprinter, HashAlgorithm, HashStream
from fastscan.core.models import HashMethod, HashRecord

READ_BLOCK_SIZE = 64 * 1024

FNV64_OFFSET_BASIS = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
MASK64 = 0xFFFFFFFFFFFFFFFF


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    name = "xxh64"

    def create(self, seed: int = 0) -> HashStream:
        return xxhash.xxh64(seed=seed)


class _Fnv1a64Stream:
    __slots__ = ("_state",)

    def __init__(self, seed: int):
        self._state = FNV64_OFFSET_BASIS ^ (seed & MASK64)

    def update(self, data: bytes) -> None:
        state = self._state
        for byte in data:
            state = ((state ^ byte) * FNV64_PRIME) & MASK64
        self._state = state

    def intdigest(self) -> int:
        return self._state


class Fnv1a64AlgorithmImpl(HashAlgorithm):
    """
    FNV-1a 64-bit in pure Python. Much slower than xxh64; useful when digests
    must match another implementation that uses FNV-1a.
    The seed is folded into the offset basis, so seed 0 is plain FNV-1a.
    """
    name = "fnv1a64"

    def create(self, seed: int = 0) -> HashStream:
        return _Fnv1a64Stream(seed)


# =============================
# Pure helpers
# =============================

def sample_windows(size: int, sample_size: int) -> List[Tuple[int, int]]:
    """
    Returns (offset, length) of the head, middle and tail windows.
    Windows may overlap; a window starting at or beyond EOF is dropped.
    """
    offsets = (
        0,
        max(0, size // 2 - sample_size // 2),
        max(0, size - sample_size),
    )
    return [(offset, min(sample_size, size - offset)) for offset in offsets if offset < size]


def mix_size(algorithm: HashAlgorithm, content_hash: int, size: int) -> str:
    """Second pass: hash the size (8 bytes, little-endian) seeded with the content hash."""
    stream = algorithm.create(seed=content_hash)
    stream.update(struct.pack("<Q", size))
    return format(stream.intdigest(), "016x")


def content_hash(algorithm: HashAlgorithm, chunks: Iterable[bytes]) -> int:
    """First pass: running hash over the chunks, in order."""
    stream = algorithm.create()
    for chunk in chunks:
        stream.update(chunk)
    return stream.intdigest()


def compute_digest(algorithm: HashAlgorithm, chunks: Iterable[bytes], size: int) -> str:
    """Digest of the given byte chunks (in order) and the file size."""
    return mix_size(algorithm, content_hash(algorithm, chunks), size)


def read_chunk(path: str, offset: int, length: int) -> bytes:
    """Reads `length` bytes at `offset` (blocking)."""
    with open(path, 'rb') as f:
        f.seek(offset)
        return f.read(length)


def hash_whole_file(path: str, algorithm: HashAlgorithm, block_size: int = READ_BLOCK_SIZE) -> int:
    """First pass over the entire file content (blocking)."""
    stream = algorithm.create()
    with open(path, 'rb') as f:
        for block in iter(lambda: f.read(block_size), b''):
            stream.update(block)
    return stream.intdigest()


# =============================
# Fingerprinter
# =============================

class HasherImpl(Fingerprinter):
    """
    Computes fingerprints for a session. Reads and hashing both run on the
    session's thread pool; window reads of one file are issued together
    and joined before hashing.
    """

    def __init__(self, session, algorithm: Optional[HashAlgorithm] = None):
        self.session = session
        self.algorithm = algorithm or XXHashAlgorithmImpl()

    def select_method(self, size: int) -> HashMethod:
        params = self.session.params
        if params.full_hash or size <= params.hash_threshold:
            return HashMethod.FULL
        return HashMethod.SAMPLED

    def digest_whole_file(self, full_path: str, size: int) -> str:
        """Blocking: full first pass, then the size pass."""
        return mix_size(self.algorithm, hash_whole_file(full_path, self.algorithm), size)

    async def fingerprint(self, full_path: str, relative_path: str, size: int) -> HashRecord:
        start = time.perf_counter()
        method = self.select_method(size)
        try:
            if method is HashMethod.FULL:
                digest = await self.session.run_blocking(self.digest_whole_file, full_path, size)
            else:
                chunks = await self._read_samples(full_path, size)
                digest = await self.session.run_blocking(compute_digest, self.algorithm, chunks, size)
        except OSError as e:
            raise HashComputeError(relative_path, e.strerror or str(e)) from e

        return HashRecord(
            path=relative_path,
            digest=digest,
            method=method,
            compute_duration=time.perf_counter() - start
        )

    async def _read_samples(self, full_path: str, size: int) -> List[bytes]:
        """Window reads are issued together and joined in head/mid/tail order."""
        windows = sample_windows(size, self.session.params.hash_sample_size)
        return await asyncio.gather(*(
            self.session.run_blocking(read_chunk, full_path, offset, length)
            for offset, length in windows
        ))
