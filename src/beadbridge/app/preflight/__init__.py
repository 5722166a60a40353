"""Session preflight and readiness reporting."""

from .service import PreflightService, ReadinessReporter

__all__ = ["PreflightService", "ReadinessReporter"]
