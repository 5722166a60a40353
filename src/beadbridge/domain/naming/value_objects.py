"""Value objects for agent name generation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict

NAME_GENERATION_EXHAUSTED = "NAME_GENERATION_EXHAUSTED"
NAME_GENERATION_INTERNAL_ERROR = "NAME_GENERATION_INTERNAL_ERROR"
NAME_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def sanitize_name(value: str) -> str:
    """Lowercase ``value`` and collapse every non-alphanumeric run into one hyphen."""

    return _NON_ALNUM.sub("-", value.lower()).strip("-")


@dataclass(frozen=True)
class NameGenerationResult:
    ok: bool
    attempts: int
    collisions: int
    agent_name: str | None = None
    error_code: str | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        if self.ok:
            if self.agent_name is None or not NAME_PATTERN.match(self.agent_name):
                raise ValueError(f"Invalid agent name: {self.agent_name!r}")
            if self.attempts < 1 or not 0 <= self.collisions < self.attempts:
                raise ValueError("Successful generation needs attempts >= 1 and collisions < attempts")
        elif self.error_code is None:
            raise ValueError("Failed generation must carry an error_code")

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"ok": self.ok}
        if self.ok:
            payload["agent_name"] = self.agent_name
        else:
            payload["error_code"] = self.error_code
            payload["reason"] = self.reason
        payload["attempts"] = self.attempts
        payload["collisions"] = self.collisions
        return payload


__all__ = [
    "NAME_GENERATION_EXHAUSTED",
    "NAME_GENERATION_INTERNAL_ERROR",
    "NAME_PATTERN",
    "NameGenerationResult",
    "sanitize_name",
]
