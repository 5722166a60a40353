"""Value objects describing executable resolution outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict


class ResolutionSource(str, Enum):
    """Tier that produced a resolution outcome."""

    EXPLICIT = "explicit"
    PATH = "path"
    CACHE = "cache"
    DISCOVERY = "discovery"
    NONE = "none"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of locating the external tool.

    ``ok`` holds exactly when ``resolved_path`` is set; the resolver only
    builds a successful result for a path it has just seen on disk.
    """

    ok: bool
    source: ResolutionSource
    reason: str
    resolved_path: Path | None = None
    remediation: str | None = None

    def __post_init__(self) -> None:
        if self.ok != (self.resolved_path is not None):
            raise ValueError("ResolutionResult.ok must match presence of resolved_path")
        if self.ok and self.remediation is not None:
            raise ValueError("Successful resolution cannot carry remediation")

    @classmethod
    def found(cls, source: ResolutionSource, path: Path, reason: str) -> "ResolutionResult":
        return cls(ok=True, source=source, reason=reason, resolved_path=path)

    @classmethod
    def failed(cls, source: ResolutionSource, reason: str, remediation: str | None) -> "ResolutionResult":
        return cls(ok=False, source=source, reason=reason, remediation=remediation)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "source": self.source.value,
            "resolved_path": str(self.resolved_path) if self.resolved_path is not None else None,
            "reason": self.reason,
            "remediation": self.remediation,
        }


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class CacheEntry:
    """Last known-good executable location persisted between runs."""

    bb_path: str
    source: str
    updated_at: str = field(default_factory=utc_timestamp)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.extra)
        payload.update(
            {
                "bb_path": self.bb_path,
                "source": self.source,
                "updated_at": self.updated_at,
            }
        )
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry | None":
        bb_path = data.get("bb_path")
        if not isinstance(bb_path, str) or not bb_path.strip():
            return None
        extra = {key: value for key, value in data.items() if key not in {"bb_path", "source", "updated_at"}}
        return cls(
            bb_path=bb_path,
            source=str(data.get("source") or "unknown"),
            updated_at=str(data.get("updated_at") or ""),
            extra=extra,
        )


__all__ = ["CacheEntry", "ResolutionResult", "ResolutionSource", "utc_timestamp"]
