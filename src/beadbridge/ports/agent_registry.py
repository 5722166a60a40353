"""Port definition for the agent registry consulted during name generation."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AgentRegistry(ABC):
    @abstractmethod
    def exists(self, agent_name: str) -> bool:
        """Return True when an agent with ``agent_name`` is already registered."""
