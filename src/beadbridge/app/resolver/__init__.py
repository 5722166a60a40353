"""Executable resolution services."""

from .discovery import DiscoveryWalker
from .service import ExecutableResolver, executable_names, find_in_search_path

__all__ = ["DiscoveryWalker", "ExecutableResolver", "executable_names", "find_in_search_path"]
