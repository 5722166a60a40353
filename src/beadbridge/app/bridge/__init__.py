"""Subprocess bridge to the external tool."""

from .service import DEFAULT_TIMEOUT, InvocationBridge, launcher_argv

__all__ = ["DEFAULT_TIMEOUT", "InvocationBridge", "launcher_argv"]
