"""Bounded breadth-first search for the launcher artifact."""

from __future__ import annotations

import os
import time
from collections import deque
from pathlib import Path
from typing import Callable, Iterable


class DiscoveryWalker:
    """Walks search roots level by level and returns the shallowest match.

    Each directory is checked for ``artifact`` before its children are
    queued. Directories that cannot be listed are skipped. ``budget`` is a
    soft wall-clock limit in seconds; when it runs out the walk stops and
    reports no match.
    """

    def __init__(
        self,
        artifact: str,
        roots: Iterable[Path],
        *,
        max_depth: int = 4,
        budget: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._artifact = artifact
        self._roots = [Path(root) for root in roots]
        self._max_depth = max_depth
        self._budget = budget
        self._clock = clock
        self.budget_exhausted = False

    def discover(self) -> Path | None:
        deadline = self._clock() + self._budget if self._budget is not None else None
        for root in self._roots:
            if not root.is_dir():
                continue
            queue: deque[tuple[Path, int]] = deque([(root, 0)])
            while queue:
                if deadline is not None and self._clock() > deadline:
                    self.budget_exhausted = True
                    return None
                directory, depth = queue.popleft()
                candidate = directory / self._artifact
                if file_exists(candidate):
                    return candidate
                if depth >= self._max_depth:
                    continue
                for child in self._list_subdirectories(directory):
                    queue.append((child, depth + 1))
        return None

    @staticmethod
    def _list_subdirectories(directory: Path) -> list[Path]:
        try:
            with os.scandir(directory) as entries:
                names = sorted(entry.name for entry in entries if entry.is_dir(follow_symlinks=False))
        except OSError:
            return []
        return [directory / name for name in names]


def file_exists(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


__all__ = ["DiscoveryWalker", "file_exists"]
