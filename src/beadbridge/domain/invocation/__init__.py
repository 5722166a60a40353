"""Invocation domain exports."""

from .outcome import classify_failure, normalize_output
from .value_objects import FailureClassification, InvocationResult

__all__ = [
    "FailureClassification",
    "InvocationResult",
    "classify_failure",
    "normalize_output",
]
