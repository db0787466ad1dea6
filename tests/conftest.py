"""
Shared fixtures for scanner tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so 'fastscan' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

KIB = 1024


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates the reference tree:
    - small.bin   1 KiB  (hashed in full)
    - medium.bin  5 KiB  (hashed in full)
    - large.bin  50 KiB  (sampled)
    - sub/small_copy.bin  byte copy of small.bin
    Contents are position-dependent so that no two files collide by accident.
    """
    files = {}

    small = bytes(i % 251 for i in range(1 * KIB))
    files["small"] = temp_dir / "small.bin"
    files["small"].write_bytes(small)

    files["medium"] = temp_dir / "medium.bin"
    files["medium"].write_bytes(bytes((i * 7) % 253 for i in range(5 * KIB)))

    files["large"] = temp_dir / "large.bin"
    files["large"].write_bytes(bytes((i * 13 + 5) % 255 for i in range(50 * KIB)))

    subdir = temp_dir / "sub"
    subdir.mkdir()
    files["small_copy"] = subdir / "small_copy.bin"
    files["small_copy"].write_bytes(small)

    return files


@pytest.fixture
def wide_tree(temp_dir) -> Path:
    """
    31 directories (root plus 3 levels) holding 45 files:
    2 files in each of the 18 leaves, 1 file in each of the 9 middle directories.
    Used to exercise the worker pool and completion detection.
    """
    counter = 0
    for a in range(3):
        for b in range(3):
            for c in range(2):
                leaf = temp_dir / f"a{a}" / f"b{b}" / f"c{c}"
                leaf.mkdir(parents=True)
                for n in range(2):
                    (leaf / f"f{n}.txt").write_bytes(f"file-{counter}".encode())
                    counter += 1
    for a in range(3):
        for b in range(3):
            (temp_dir / f"a{a}" / f"b{b}" / "own.txt").write_bytes(f"own-{a}-{b}".encode())
    return temp_dir
