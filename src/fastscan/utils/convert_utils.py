"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size, duration and timestamp conversions shared by the models and the CLI.
"""
import re
import time

_SIZE_PATTERN = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*([KMGTP]?)(?:I?B)?\s*$", re.IGNORECASE)
_UNIT_POWERS = {"": 0, "K": 1, "M": 2, "G": 3, "T": 4, "P": 5}


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 512B, 1.50KB, 3.20MB).
        """
        if size_bytes <= 0:
            return "0B"
        if size_bytes < 1024:
            return f"{int(size_bytes)}B"

        value = float(size_bytes)
        for unit in ("KB", "MB", "GB", "TB", "PB"):
            value /= 1024
            if value < 1024:
                return f"{value:.2f}{unit}"
        return f"{value:.2f}PB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Convert human-readable size string to bytes (binary units).
        Accepts '2048', '10KB', '10K', '1.5MiB', '2 GB'.
        Raises ValueError for negative sizes or invalid formats.
        """
        text = str(size_str).strip()
        if text.startswith("-"):
            raise ValueError(f"Negative size not allowed: '{size_str}'")

        match = _SIZE_PATTERN.match(text)
        if not match:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 1000, 10KB, 10K, 1.5MB, 2GiB, etc."
            )
        number, unit = match.groups()
        return int(float(number) * 1024 ** _UNIT_POWERS[unit.upper()])

    @staticmethod
    def seconds_to_human(seconds: float) -> str:
        """Durations below a second in milliseconds, longer ones in seconds."""
        if seconds < 1:
            return f"{seconds * 1000:.2f}ms"
        return f"{seconds:.2f}s"

    @staticmethod
    def timestamp_to_human(timestamp: float, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        """
        Convert a Unix timestamp to a human-readable string in local time.
        """
        try:
            return time.strftime(fmt, time.localtime(timestamp))
        except (OverflowError, OSError, ValueError):
            return "Invalid timestamp"
