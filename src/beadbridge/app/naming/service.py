"""Collision-checked ``adjective-noun`` name generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from beadbridge.adapters.agent_registry import FileAgentRegistry
from beadbridge.domain.naming import (
    NAME_GENERATION_EXHAUSTED,
    NAME_GENERATION_INTERNAL_ERROR,
    NameGenerationResult,
    RandomSource,
    SequenceRandomSource,
    SystemRandomSource,
    sanitize_name,
)
from beadbridge.domain.naming.random_source import pick_index
from beadbridge.ports.agent_registry import AgentRegistry
from beadbridge.settings import NamingConfig, RuntimeSettings
from beadbridge.utils.telemetry import safe_record

RegistryCheck = Callable[[str], bool]


def generate_name(
    adjectives: Sequence[str],
    nouns: Sequence[str],
    registry_check: RegistryCheck,
    max_retries: int,
    rng: RandomSource,
) -> NameGenerationResult:
    """Draw ``adjective-noun`` candidates until one is free or retries run out.

    Single-item pools do not consume a draw from ``rng``. A candidate that
    sanitises to an empty string uses up an attempt without counting as a
    collision.
    """

    if not adjectives or not nouns:
        return NameGenerationResult(
            ok=False,
            attempts=0,
            collisions=0,
            error_code=NAME_GENERATION_INTERNAL_ERROR,
            reason="Adjective and noun pools must both be non-empty.",
        )
    attempts = 0
    collisions = 0
    for _ in range(max(1, max_retries)):
        attempts += 1
        adjective = adjectives[pick_index(len(adjectives), rng)]
        noun = nouns[pick_index(len(nouns), rng)]
        candidate = sanitize_name(f"{adjective}-{noun}")
        if not candidate:
            continue
        if not registry_check(candidate):
            return NameGenerationResult(ok=True, agent_name=candidate, attempts=attempts, collisions=collisions)
        collisions += 1
    return NameGenerationResult(
        ok=False,
        attempts=attempts,
        collisions=collisions,
        error_code=NAME_GENERATION_EXHAUSTED,
        reason="Unable to generate a unique agent name in allotted retries.",
    )


@dataclass
class NameGenerator:
    """Generates agent names against a registry using configured word pools."""

    config: NamingConfig
    registry: AgentRegistry
    rng: RandomSource = field(default_factory=SystemRandomSource)
    settings: RuntimeSettings | None = None

    @classmethod
    def from_config(cls, config: NamingConfig, *, settings: RuntimeSettings | None = None) -> "NameGenerator":
        if config.registry_dir is None:
            raise ValueError("NamingConfig.registry_dir is required to build a file-backed generator")
        rng: RandomSource
        if config.seed_sequence:
            rng = SequenceRandomSource(config.seed_sequence)
        else:
            rng = SystemRandomSource()
        return cls(config=config, registry=FileAgentRegistry(config.registry_dir), rng=rng, settings=settings)

    def generate(self) -> NameGenerationResult:
        try:
            result = generate_name(
                self.config.adjectives,
                self.config.nouns,
                self.registry.exists,
                self.config.max_retries,
                self.rng,
            )
        except Exception as exc:  # boundary: generation never raises
            result = NameGenerationResult(
                ok=False,
                attempts=0,
                collisions=0,
                error_code=NAME_GENERATION_INTERNAL_ERROR,
                reason=str(exc),
            )
        safe_record(
            self.settings,
            "name-generation",
            {"agent_name": result.agent_name, "attempts": result.attempts, "collisions": result.collisions},
            level="info" if result.ok else "warn",
            status="ok" if result.ok else (result.error_code or "failed"),
            component="naming",
        )
        return result


__all__ = ["NameGenerator", "generate_name"]
