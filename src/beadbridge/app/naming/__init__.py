"""Agent name generation."""

from .service import NameGenerator, generate_name

__all__ = ["NameGenerator", "generate_name"]
