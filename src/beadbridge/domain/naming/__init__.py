"""Agent naming domain exports."""

from .random_source import RandomSource, SequenceRandomSource, SystemRandomSource
from .value_objects import (
    NAME_GENERATION_EXHAUSTED,
    NAME_GENERATION_INTERNAL_ERROR,
    NAME_PATTERN,
    NameGenerationResult,
    sanitize_name,
)

__all__ = [
    "NAME_GENERATION_EXHAUSTED",
    "NAME_GENERATION_INTERNAL_ERROR",
    "NAME_PATTERN",
    "NameGenerationResult",
    "RandomSource",
    "SequenceRandomSource",
    "SystemRandomSource",
    "sanitize_name",
]
