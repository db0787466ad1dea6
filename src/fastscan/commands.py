"""
Unified command orchestrator for scanning.
This is the single entry point for business logic, used by the CLI and by library callers.
"""
from typing import Optional, Callable

from fastscan.core.models import ScanParams, ScanResult
from fastscan.core.scanner import scan
from fastscan.core.interfaces import HashAlgorithm


class ScanCommand:
    """
    Orchestrates one scan:
    1. Validate the root directory
    2. Traverse, stat and (optionally) fingerprint under the concurrency cap
    3. Keep the frozen result for follow-up queries

    Usage:
        params = ScanParams(enable_hash=True)
        command = ScanCommand()
        result = command.execute(
            "/data/videos",
            params,
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )
        for group in result.duplicate_groups():
            ...
    """

    def __init__(self, algorithm: Optional[HashAlgorithm] = None):
        self._algorithm = algorithm
        self._result: Optional[ScanResult] = None

    def execute(
            self,
            root_dir: str,
            params: Optional[ScanParams] = None,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> ScanResult:
        """
        Run a scan with the given parameters.

        Args:
            root_dir: Directory to scan
            params: Validated scan parameters (defaults when omitted)
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if the scan should stop)

        Returns:
            The completed ScanResult

        Raises:
            FatalRootError: If the root directory is missing or unreadable
        """
        self._result = scan(
            root_dir,
            params or ScanParams(),
            stopped_flag=stopped_flag,
            progress_callback=progress_callback,
            algorithm=self._algorithm
        )
        return self._result

    def get_result(self) -> Optional[ScanResult]:
        """Result of the last execute() call, if any."""
        return self._result
