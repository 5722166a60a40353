"""Cache store implementations."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

from beadbridge.domain.resolution import CacheEntry
from beadbridge.domain.resolution.value_objects import utc_timestamp
from beadbridge.ports.cache_store import CacheStore, CacheStoreError


class JsonFileCacheStore(CacheStore):
    """Stores the cache as one JSON object, rewritten whole on every write."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> CacheEntry | None:
        return CacheEntry.from_dict(self._read_raw())

    def write(self, bb_path: str, source: str) -> CacheEntry:
        payload = self._read_raw()
        payload.update({"bb_path": bb_path, "source": source, "updated_at": utc_timestamp()})
        tmp_path = self._path.with_name(f".{self._path.name}.{os.getpid()}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise CacheStoreError(f"Unable to write cache {self._path}: {exc}") from exc
        return CacheEntry.from_dict(payload) or CacheEntry(bb_path=bb_path, source=source)

    def _read_raw(self) -> Dict[str, Any]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}


class InMemoryCacheStore(CacheStore):
    """Process-local cache, used by tests and one-shot callers."""

    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})
        self.writes = 0

    def read(self) -> CacheEntry | None:
        return CacheEntry.from_dict(self._data)

    def write(self, bb_path: str, source: str) -> CacheEntry:
        self._data.update({"bb_path": bb_path, "source": source, "updated_at": utc_timestamp()})
        self.writes += 1
        return CacheEntry.from_dict(self._data) or CacheEntry(bb_path=bb_path, source=source)

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._data)


__all__ = ["InMemoryCacheStore", "JsonFileCacheStore"]
