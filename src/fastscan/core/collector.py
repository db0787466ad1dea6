"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/collector.py
Fetches file metadata for one directory in fixed-size batches. Files inside a
batch are stat'ed concurrently; batches run one after another so a huge
directory never fans out more than `batch_size` calls at once.
"""

import asyncio
import logging
import os
import time
from typing import List, Optional, Tuple

from fastscan.core.exceptions import FileStatError, HashComputeError
from fastscan.core.interfaces import Fingerprinter, StatCollector
from fastscan.core.models import FileRecord

logger = logging.getLogger(__name__)


def creation_time(stat_result: os.stat_result) -> float:
    """Birth time where the platform reports it, inode change time otherwise."""
    birth = getattr(stat_result, "st_birthtime", None)
    return float(birth) if birth is not None else float(stat_result.st_ctime)


class StatCollectorImpl(StatCollector):
    """
    Records metadata (and, with a fingerprinter, the fingerprint) of every
    file handed over by the traversal.
    """

    def __init__(self, session, fingerprinter: Optional[Fingerprinter] = None):
        self.session = session
        self.fingerprinter = fingerprinter

    async def collect(self, entries: List[Tuple[str, str]]) -> None:
        batch_size = self.session.params.batch_size
        for i in range(0, len(entries), batch_size):
            batch = entries[i:i + batch_size]
            logger.debug(f"Stat batch of {len(batch)} files starting at {batch[0][1]}")
            await asyncio.gather(*(self._process_file(full, rel) for full, rel in batch))

    async def _process_file(self, full_path: str, relative_path: str) -> None:
        try:
            record = await self.stat_file(full_path, relative_path)
        except FileStatError as e:
            self.session.record_error(e)
            return

        if not self.session.add_file(record) or self.fingerprinter is None:
            return

        try:
            hash_record = await self.fingerprinter.fingerprint(full_path, relative_path, record.size)
        except HashComputeError as e:
            self.session.record_error(e)
            return
        self.session.add_hash(hash_record)

    async def stat_file(self, full_path: str, relative_path: str) -> FileRecord:
        """
        Raises:
            FileStatError: if the file cannot be stat'ed (removed, no permission, timeout).
        """
        start = time.perf_counter()
        try:
            st = await self.session.run_blocking(os.stat, full_path)
        except OSError as e:
            raise FileStatError(relative_path, e.strerror or str(e)) from e
        duration = time.perf_counter() - start
        self.session.stats.stat_time += duration

        return FileRecord(
            path=relative_path,
            size=st.st_size,
            create_time=creation_time(st),
            modify_time=float(st.st_mtime),
            access_time=float(st.st_atime),
            stat_duration=duration
        )
