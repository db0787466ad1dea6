"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/session.py
Per-invocation scan state. A session owns the file map, hash map, duplicate
index, warnings and counters, plus the thread pool that runs every blocking
filesystem call. Nothing here outlives one scan.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Dict, List, Optional, Callable, Any

from fastscan.core.exceptions import ScanError
from fastscan.core.index import DuplicateIndex
from fastscan.core.models import (
    FileRecord, HashRecord, ScanParams, ScanStats, ScanWarning, SessionState, WarningKind
)

logger = logging.getLogger(__name__)


class ScanSession:
    """
    Mutable state of one scan. All mutation happens on the event loop thread,
    so no locking is needed; worker threads only run the blocking calls.
    """

    def __init__(self, root: str, params: ScanParams):
        self.root = root
        self.params = params
        self.state = SessionState.IDLE
        self.files: Dict[str, FileRecord] = {}
        self.hashes: Dict[str, HashRecord] = {}
        self.index = DuplicateIndex()
        self.warnings: List[ScanWarning] = []
        self.stats = ScanStats()
        self.cancelled = False
        self._executor: Optional[ThreadPoolExecutor] = None

    # ---- lifecycle ----

    def open(self) -> None:
        if self.state is not SessionState.IDLE:
            raise RuntimeError(f"Session already {self.state.value}")
        self._executor = ThreadPoolExecutor(
            max_workers=self.params.max_concurrency,
            thread_name_prefix="fastscan-io"
        )
        self.state = SessionState.RUNNING
        logger.debug(f"Session opened for {self.root}")

    def complete(self) -> None:
        self.state = SessionState.COMPLETED

    def fail(self) -> None:
        self.state = SessionState.FAILED

    def close(self) -> None:
        if self._executor is not None:
            # Timed-out calls may still hold threads; do not wait for them.
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    # ---- blocking I/O ----

    async def run_blocking(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Runs a blocking filesystem call on the session thread pool.
        Raises TimeoutError (an OSError) when `io_timeout` elapses first.
        """
        if self._executor is None:
            raise RuntimeError("Session is not open")
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self._executor, partial(func, *args, **kwargs))
        timeout = self.params.io_timeout
        if timeout is None:
            return await future
        try:
            return await asyncio.wait_for(future, timeout)
        except asyncio.TimeoutError:
            name = getattr(func, "__name__", "I/O call")
            raise TimeoutError(f"{name} timed out after {timeout}s") from None

    # ---- recording ----

    def add_file(self, record: FileRecord) -> bool:
        """Stores a file record; a path already present is ignored."""
        if record.path in self.files:
            logger.debug(f"Ignoring repeated path: {record.path}")
            return False
        self.files[record.path] = record
        self.stats.files_scanned += 1
        return True

    def add_hash(self, record: HashRecord) -> bool:
        if record.path in self.hashes:
            logger.debug(f"Fingerprint already computed for {record.path}")
            return False
        self.hashes[record.path] = record
        self.stats.files_with_hash += 1
        self.stats.hash_time += record.compute_duration
        self.index.add(record.digest, record.path)
        self.stats.duplicate_count = self.index.duplicate_count
        return True

    def record_error(self, error: ScanError) -> None:
        """Turns a recovered error into a structured warning."""
        warning = error.to_warning()
        self.warnings.append(warning)
        if warning.kind is WarningKind.HASH_COMPUTE:
            self.stats.hash_errors += 1
        logger.warning(f"{warning.kind.display_name}: {warning.path} ({warning.message})")
