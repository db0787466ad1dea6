"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Bounded-concurrency directory traversal.

A fixed pool of `max_concurrency` workers pulls directory tasks from a queue.
Every enqueue increments an outstanding-work counter; every finished task
decrements it and checks for zero in the same step. A task enqueues its
subdirectories before it is counted as finished, so the counter can only
reach zero once no task is running and nothing is queued.

Symbolic links are neither followed nor reported.
"""

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from fastscan.core.aggregator import ResultAggregator
from fastscan.core.collector import StatCollectorImpl
from fastscan.core.exceptions import DirectoryReadError, FatalRootError
from fastscan.core.hasher import HasherImpl
from fastscan.core.interfaces import HashAlgorithm, StatCollector
from fastscan.core.models import ScanParams, ScanResult
from fastscan.core.session import ScanSession

logger = logging.getLogger(__name__)

ProgressCb = Callable[[str, int, Optional[int]], None]  # (stage, current, total)


@dataclass
class DirectoryTask:
    full_path: str
    relative_path: str
    is_root: bool = False


def list_directory(path: str) -> Tuple[List[str], List[str]]:
    """
    Blocking: returns (subdirectory names, regular file names) in listing order.
    Entries that vanish while being classified are skipped.
    """
    subdirs, files = [], []
    with os.scandir(path) as it:
        for entry in it:
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry.name)
                elif entry.is_file(follow_symlinks=False):
                    files.append(entry.name)
            except OSError as e:
                logger.debug(f"Could not classify {entry.path}: {e}")
    return subdirs, files


class TraversalScheduler:
    """
    Walks the tree of a session. Found files go to the stat collector,
    found subdirectories go back into the queue.
    """

    def __init__(
            self,
            session: ScanSession,
            collector: StatCollector,
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[ProgressCb] = None
    ):
        self.session = session
        self.collector = collector
        self.stopped_flag = stopped_flag
        self.progress_callback = progress_callback
        self._queue: Optional[asyncio.Queue] = None
        self._quiescent: Optional[asyncio.Event] = None
        self._outstanding = 0
        self._failure: Optional[BaseException] = None

    async def run(self) -> None:
        """
        Returns once every discovered directory has been processed.

        Raises:
            FatalRootError: if the root directory cannot be listed.
        """
        self._queue = asyncio.Queue()
        self._quiescent = asyncio.Event()
        self._outstanding = 0
        self._failure = None

        self._enqueue(DirectoryTask(self.session.root, "", is_root=True))
        workers = [
            asyncio.ensure_future(self._worker())
            for _ in range(self.session.params.max_concurrency)
        ]
        try:
            await self._quiescent.wait()
        finally:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        if self._failure is not None:
            raise self._failure

    def _enqueue(self, task: DirectoryTask) -> None:
        self._outstanding += 1
        self._queue.put_nowait(task)

    def _task_done(self) -> None:
        # No await between decrement and check: atomic on the event loop.
        self._outstanding -= 1
        if self._outstanding == 0:
            self._quiescent.set()

    def _should_stop(self) -> bool:
        if self.stopped_flag and self.stopped_flag():
            if not self.session.cancelled:
                logger.debug("Scan interrupted by user, draining queue")
            self.session.cancelled = True
        return self.session.cancelled

    async def _worker(self) -> None:
        while True:
            task = await self._queue.get()
            try:
                if not self._should_stop():
                    stats = self.session.stats
                    stats.task_started()
                    try:
                        await self._process_directory(task)
                    finally:
                        stats.task_finished()
            except Exception as e:
                # Stop the whole traversal and hand the error to run().
                if not isinstance(e, FatalRootError):
                    logger.exception(f"Unexpected error while scanning {task.full_path}")
                if self._failure is None:
                    self._failure = e
                self._quiescent.set()
            finally:
                self._task_done()

    async def _process_directory(self, task: DirectoryTask) -> None:
        try:
            subdirs, filenames = await self.session.run_blocking(list_directory, task.full_path)
        except OSError as e:
            message = e.strerror or str(e)
            if task.is_root:
                logger.error(f"Cannot read root directory {task.full_path}: {message}")
                raise FatalRootError(task.full_path, message) from e
            self.session.record_error(DirectoryReadError(task.relative_path, message))
            return

        stats = self.session.stats
        stats.directories_scanned += 1

        for name in subdirs:
            self._enqueue(DirectoryTask(
                full_path=os.path.join(task.full_path, name),
                relative_path=os.path.join(task.relative_path, name)
            ))

        if filenames:
            await self.collector.collect([
                (os.path.join(task.full_path, name), os.path.join(task.relative_path, name))
                for name in filenames
            ])

        if self.progress_callback:
            self.progress_callback("scanning", stats.files_scanned, None)


def _validate_root(root: str) -> None:
    if not os.path.exists(root):
        error_msg = "Directory does not exist"
        logger.error(f"{error_msg}: {root}")
        raise FatalRootError(root, error_msg)
    if not os.path.isdir(root):
        error_msg = "Not a directory"
        logger.error(f"{error_msg}: {root}")
        raise FatalRootError(root, error_msg)


async def scan_async(
        root,
        params: Optional[ScanParams] = None,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[ProgressCb] = None,
        algorithm: Optional[HashAlgorithm] = None
) -> ScanResult:
    """
    Scans `root` and returns the frozen result.

    Raises:
        FatalRootError: root missing, not a directory, or unreadable.
    """
    params = params or ScanParams()
    root_path = os.path.abspath(os.fspath(root))
    logger.debug(f"Starting scan of {root_path} with {params}")
    _validate_root(root_path)

    session = ScanSession(root_path, params)
    fingerprinter = HasherImpl(session, algorithm) if params.enable_hash else None
    collector = StatCollectorImpl(session, fingerprinter)
    scheduler = TraversalScheduler(session, collector, stopped_flag, progress_callback)

    session.open()
    started = time.perf_counter()
    try:
        await scheduler.run()
    except BaseException:
        session.fail()
        raise
    finally:
        session.close()

    return ResultAggregator(session).compile(started)


def scan(
        root,
        params: Optional[ScanParams] = None,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[ProgressCb] = None,
        algorithm: Optional[HashAlgorithm] = None
) -> ScanResult:
    """Blocking wrapper around scan_async() with its own event loop."""
    return asyncio.run(scan_async(root, params, stopped_flag, progress_callback, algorithm))
