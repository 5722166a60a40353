"""Output normalisation and failure classification for tool invocations."""

from __future__ import annotations

import re
import subprocess

from .value_objects import FailureClassification

BAD_ARGS_PATTERN = re.compile(r"unknown|invalid|required|usage", re.IGNORECASE)


def normalize_output(text: str | bytes | None) -> str:
    """Unify line endings to ``\\n`` and trim surrounding whitespace."""

    if text is None:
        return ""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    if not isinstance(text, str):
        return ""
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()


def classify_failure(
    *,
    error: BaseException | None = None,
    exit_code: int | None = None,
    stderr: str = "",
) -> FailureClassification:
    """Map a failed run onto the invocation taxonomy; first match wins."""

    if isinstance(error, FileNotFoundError):
        return FailureClassification.NOT_FOUND
    if isinstance(error, subprocess.TimeoutExpired):
        return FailureClassification.TIMEOUT
    if error is None and exit_code is not None:
        # Negative return codes mean the child was killed by a signal.
        if exit_code < 0:
            return FailureClassification.TIMEOUT
        if exit_code > 0:
            if BAD_ARGS_PATTERN.search(normalize_output(stderr)):
                return FailureClassification.BAD_ARGS
            return FailureClassification.NON_ZERO_EXIT
    return FailureClassification.UNKNOWN


__all__ = ["BAD_ARGS_PATTERN", "classify_failure", "normalize_output"]
