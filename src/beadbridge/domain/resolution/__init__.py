"""Resolution domain exports."""

from .value_objects import CacheEntry, ResolutionResult, ResolutionSource

__all__ = [
    "CacheEntry",
    "ResolutionResult",
    "ResolutionSource",
]
