"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/index.py
Append-only digest -> paths index used for duplicate detection.
"""

from collections import defaultdict
from typing import Dict, List


class DuplicateIndex:
    """
    Maps a fingerprint to the paths that produced it, in discovery order.
    Only digests with two or more paths are reported as groups.
    """

    def __init__(self):
        self._paths: Dict[str, List[str]] = defaultdict(list)
        self.duplicate_count = 0  # files that belong to a group of 2+

    def add(self, digest: str, path: str) -> int:
        """Appends `path` under `digest` and returns the new group size."""
        paths = self._paths[digest]
        paths.append(path)
        if len(paths) == 2:
            self.duplicate_count += 2
        elif len(paths) > 2:
            self.duplicate_count += 1
        return len(paths)

    def paths_for(self, digest: str) -> List[str]:
        return list(self._paths.get(digest, ()))

    def groups(self) -> Dict[str, List[str]]:
        """Digests shared by at least two paths, in first-seen order."""
        return {digest: list(paths) for digest, paths in self._paths.items() if len(paths) >= 2}

    def snapshot(self) -> Dict[str, List[str]]:
        return {digest: list(paths) for digest, paths in self._paths.items()}

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, digest: str) -> bool:
        return digest in self._paths
