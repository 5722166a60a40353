"""Filesystem-backed agent registry."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from beadbridge.ports.agent_registry import AgentRegistry


class FileAgentRegistry(AgentRegistry):
    """Agents are registered as ``<name>.json`` files in one directory."""

    def __init__(self, registry_dir: Path) -> None:
        self._dir = registry_dir

    @property
    def path(self) -> Path:
        return self._dir

    def exists(self, agent_name: str) -> bool:
        return (self._dir / f"{agent_name}.json").exists()


class StaticAgentRegistry(AgentRegistry):
    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names = set(names)

    def exists(self, agent_name: str) -> bool:
        return agent_name in self._names


__all__ = ["FileAgentRegistry", "StaticAgentRegistry"]
