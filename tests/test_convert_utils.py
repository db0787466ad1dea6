"""
Tests for size, duration and timestamp conversion utilities.
"""
import time

import pytest
from fastscan.utils.convert_utils import ConvertUtils


class TestHumanToBytes:
    """Test conversion from human-readable sizes (e.g., "10KB") to bytes."""

    @pytest.mark.parametrize("text, expected", [
        ("0", 0),
        ("1024", 1024),
        ("1024B", 1024),
        ("10KB", 10 * 1024),
        ("10K", 10 * 1024),
        ("10kb", 10 * 1024),
        ("1.5KB", 1536),
        ("2KiB", 2048),
        ("1MB", 1024 ** 2),
        ("0.5GB", 512 * 1024 ** 2),
        (" 2 GB ", 2 * 1024 ** 3),
        ("1TB", 1024 ** 4),
    ])
    def test_valid_formats(self, text, expected):
        assert ConvertUtils.human_to_bytes(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "10XB", "KB", "1.2.3MB", "-5KB", "-1"])
    def test_invalid_formats(self, text):
        with pytest.raises(ValueError):
            ConvertUtils.human_to_bytes(text)


class TestBytesToHuman:

    @pytest.mark.parametrize("size, expected", [
        (0, "0B"),
        (-5, "0B"),
        (512, "512B"),
        (1024, "1.00KB"),
        (1536, "1.50KB"),
        (10 * 1024 ** 2, "10.00MB"),
        (3 * 1024 ** 3, "3.00GB"),
    ])
    def test_formats(self, size, expected):
        assert ConvertUtils.bytes_to_human(size) == expected

    def test_roundtrip_for_whole_units(self):
        assert ConvertUtils.human_to_bytes(ConvertUtils.bytes_to_human(5 * 1024 ** 2)) == 5 * 1024 ** 2


class TestDurationsAndTimestamps:

    def test_sub_second_durations_in_ms(self):
        assert ConvertUtils.seconds_to_human(0.0125) == "12.50ms"

    def test_long_durations_in_seconds(self):
        assert ConvertUtils.seconds_to_human(3.456) == "3.46s"

    def test_timestamp_formatting(self):
        ts = time.mktime((2024, 5, 17, 13, 45, 30, 0, 0, -1))
        assert ConvertUtils.timestamp_to_human(ts) == "2024-05-17 13:45:30"

    def test_invalid_timestamp(self):
        assert ConvertUtils.timestamp_to_human(1e20) == "Invalid timestamp"
