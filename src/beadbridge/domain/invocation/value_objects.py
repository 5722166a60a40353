"""Value objects describing a supervised run of the external tool."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class FailureClassification(str, Enum):
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    NON_ZERO_EXIT = "non_zero_exit"
    BAD_ARGS = "bad_args"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class InvocationResult:
    """Structured outcome of one invocation.

    Either ``success`` is true or ``classification`` is set, never both.
    ``stdout`` and ``stderr`` are already normalised.
    """

    success: bool
    classification: FailureClassification | None
    command: str
    args: Tuple[str, ...]
    cwd: str
    stdout: str = ""
    stderr: str = ""
    exit_code: int | None = None
    duration_ms: int = 0
    error: str | None = None
    remediation: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.success == (self.classification is not None):
            raise ValueError("InvocationResult must be successful or classified, not both")
        if self.duration_ms < 0:
            raise ValueError("duration_ms must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.success,
            "success": self.success,
            "classification": self.classification.value if self.classification else None,
            "command": self.command,
            "args": list(self.args),
            "cwd": self.cwd,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "duration_ms": self.duration_ms,
            "error": self.error,
            "remediation": self.remediation,
        }


__all__ = ["FailureClassification", "InvocationResult"]
