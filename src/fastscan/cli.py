#!/usr/bin/env python3
"""
fastscan CLI: Command line interface for directory scanning and duplicate detection.
Read-only: files are never modified, moved or deleted.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import json
import os
import sys
import time
import logging
from typing import Optional, NoReturn

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
try:
    import xxhash  # noqa: F401
except ImportError:
    print("❌ Missing required dependency: xxhash", file=sys.stderr)
    print("   pip install xxhash", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from fastscan.commands import ScanCommand
from fastscan.core.exceptions import FatalRootError
from fastscan.core.hasher import XXHashAlgorithmImpl, Fnv1a64AlgorithmImpl
from fastscan.core.models import ScanParams, ScanResult, HashMethod
from fastscan.utils.convert_utils import ConvertUtils

ALGORITHMS = {
    "xxh64": XXHashAlgorithmImpl,
    "fnv1a64": Fnv1a64AlgorithmImpl,
}

EPILOG_TEXT = """
Examples:
  fastscan -i ~/Videos
  fastscan -i ~/Videos --hash --show-duplicates
  fastscan -i /mnt/archive --hash --hash-threshold 64KB --sample-size 4KB --json > scan.json

Duplicates found with sampled hashing (files above --hash-threshold) are candidates only.
Use --full-hash when byte-exact grouping matters.
"""


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            description="fastscan: concurrent directory scanner with duplicate detection",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            required=True,
            type=str,
            help="Root directory to scan"
        )

        # Concurrency options
        parser.add_argument(
            "--max-concurrency", "-c",
            default=200,
            type=int,
            metavar='',
            help="Maximum simultaneous directory/file operations. Default: 200"
        )
        parser.add_argument(
            "--batch-size", "-b",
            default=50,
            type=int,
            metavar='',
            help="Files per stat batch. Default: 50"
        )
        parser.add_argument(
            "--timeout",
            default=None,
            type=float,
            metavar='',
            help="Per-operation I/O timeout in seconds. Default: none"
        )

        # Hashing options
        parser.add_argument(
            "--hash",
            action="store_true",
            help="Compute fingerprints and detect duplicates"
        )
        parser.add_argument(
            "--full-hash",
            action="store_true",
            help="Hash whole files regardless of size (implies --hash)"
        )
        parser.add_argument(
            "--hash-threshold",
            default="10KB",
            type=str,
            metavar='',
            help="Files up to this size are hashed in full (e.g., 10KB, 1MB). Default: 10KB"
        )
        parser.add_argument(
            "--sample-size",
            default="2KB",
            type=str,
            metavar='',
            help="Bytes per head/middle/tail sample for larger files. Default: 2KB"
        )
        parser.add_argument(
            "--algorithm",
            choices=sorted(ALGORITHMS),
            default="xxh64",
            help="Mixing hash function. Default: xxh64"
        )

        # Output options
        parser.add_argument(
            "--top",
            default=10,
            type=int,
            metavar='',
            help="Number of largest files to list. Default: 10"
        )
        parser.add_argument(
            "--show-duplicates",
            action="store_true",
            help="List every duplicate group (with --hash)"
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the full result as JSON"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress and debug logging"
        )

        return parser.parse_args(args)

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams.from_human_readable(
                enable_hash=args.hash,
                hash_threshold_str=args.hash_threshold,
                sample_size_str=args.sample_size,
                max_concurrency=args.max_concurrency,
                batch_size=args.batch_size,
                full_hash=args.full_hash,
                io_timeout=args.timeout,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return
        sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    @staticmethod
    def stopped_flag() -> bool:
        """Check if operation should stop (placeholder for signal handling)."""
        return False

    def run_scan(self, root_dir: str, params: ScanParams, algorithm: str) -> ScanResult:
        command = ScanCommand(algorithm=ALGORITHMS[algorithm]())
        try:
            result = command.execute(
                root_dir,
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except FatalRootError as e:
            self.error_exit(f"Cannot scan {e.path}: {e.message}")
        if self.verbose:
            sys.stderr.write("\n")
        return result

    def output_summary(self, result: ScanResult, top: int, show_duplicates: bool) -> None:
        """Plain-text summary of a finished scan."""
        if self.quiet:
            return

        t = result.timings
        print(f"\n📁 Root: {result.root}")
        print(f"Files: {result.total_files} | Directories: {result.stats.directories_scanned} "
              f"| Total size: {ConvertUtils.bytes_to_human(result.total_size)}")
        print(f"Total time: {ConvertUtils.seconds_to_human(t.scan_duration)} "
              f"(traversal {ConvertUtils.seconds_to_human(t.pure_scan_time)}, "
              f"sort {ConvertUtils.seconds_to_human(t.sort_time)})")
        print(f"Stat time: {ConvertUtils.seconds_to_human(t.stat_time)} "
              f"(avg {ConvertUtils.seconds_to_human(t.average_stat_time)}/file)")
        print(f"Peak concurrency: {result.stats.max_concurrent}")

        if result.hash_stats is not None:
            hs = result.hash_stats
            print(f"Hash time: {ConvertUtils.seconds_to_human(t.hash_time)} "
                  f"(avg {ConvertUtils.seconds_to_human(t.average_hash_time)}/file)")
            print(f"Hashed: {hs.files_hashed} ({hs.full_hashed} {HashMethod.FULL.value}, "
                  f"{hs.sampled_hashed} {HashMethod.SAMPLED.value}) | Errors: {hs.hash_errors}")
            print(f"Duplicates: {hs.duplicate_count} files in {hs.duplicate_groups} groups")

        if result.cancelled:
            print("⚠️  Scan was cancelled; results are partial.")

        if result.files:
            first, last = result.files[0], result.files[-1]
            print(f"Earliest created: {ConvertUtils.timestamp_to_human(first.create_time)}  {first.path}")
            print(f"Latest created:   {ConvertUtils.timestamp_to_human(last.create_time)}  {last.path}")

        largest = result.largest_files(top)
        if largest:
            print(f"\nLargest {len(largest)} files:")
            for idx, record in enumerate(largest, 1):
                print(f"  {idx}. {record.formatted_size:>10}  {record.path}")

        if show_duplicates and result.hash_stats is not None:
            groups = result.duplicate_groups()
            if not groups:
                print("\nNo duplicate groups found.")
            for idx, group in enumerate(groups, 1):
                size_str = ConvertUtils.bytes_to_human(group.size or 0)
                print(f"\n📁 Group {idx} | Digest: {group.digest} | Size: {size_str} | Files: {len(group.paths)}")
                for path in group.paths:
                    print(f"   {path}")

        for warning in result.warnings:
            self.warning(f"{warning.kind.display_name}: {warning.path} ({warning.message})")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        params = self.create_params(args)
        root_dir = os.path.abspath(args.input)

        if not self.quiet and not args.json:
            print(f"Scanning directory: {root_dir}")

        result = self.run_scan(root_dir, params, args.algorithm)

        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            self.output_summary(result, args.top, args.show_duplicates)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds", file=sys.stderr)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
