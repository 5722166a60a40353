"""Port definition for the resolution cache."""

from __future__ import annotations

from abc import ABC, abstractmethod

from beadbridge.domain.resolution import CacheEntry


class CacheStoreError(RuntimeError):
    """Raised when the cache cannot be written."""


class CacheStore(ABC):
    """Advisory key-value store holding the last resolved executable."""

    @abstractmethod
    def read(self) -> CacheEntry | None:
        """Return the cached entry; unreadable content counts as a miss."""

    @abstractmethod
    def write(self, bb_path: str, source: str) -> CacheEntry:
        """Persist ``bb_path`` with a fresh timestamp, keeping unrelated keys."""
