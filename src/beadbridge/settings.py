"""Runtime settings and bridge configuration for beadbridge."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

from beadbridge import __version__

CONFIG_FILENAME = "bridge.yaml"
CACHE_FILENAME = "skill-config.json"

DEFAULT_TOOL_NAME = "bb"
DEFAULT_LAUNCHER = "bb.ps1"
DEFAULT_MAX_DEPTH = 4
DEFAULT_DISCOVERY_BUDGET = 10.0
DEFAULT_ADJECTIVES = ("green", "silver", "swift", "steady")
DEFAULT_NOUNS = ("castle", "harbor", "falcon", "orchard")
DEFAULT_MAX_RETRIES = 12

_TRUE_VALUES = {"1", "true", "yes", "on"}


class BridgeConfigError(RuntimeError):
    """Raised when a configuration value cannot be interpreted."""


def _truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUE_VALUES


def split_list(value: str | None, *, separators: str = ",") -> list[str]:
    """Split a delimiter-separated configuration value, dropping blanks."""

    if not value:
        return []
    items = [value]
    for sep in separators:
        items = [part for item in items for part in item.split(sep)]
    return [item.strip() for item in items if item.strip()]


def _default_home(env: Mapping[str, str]) -> Path:
    override = env.get("BB_SKILL_HOME", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home()


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    log_dir: Path
    cli_version: str = __version__

    @property
    def telemetry_file(self) -> Path:
        return self.log_dir / "telemetry.jsonl"


def load_settings(env: Mapping[str, str] | None = None) -> RuntimeSettings:
    env = os.environ if env is None else env
    base = _default_home(env) / ".beadboard"
    return RuntimeSettings(
        home_dir=base,
        log_dir=base / "logs",
    )


@dataclass(frozen=True)
class BridgeConfig:
    """Options recognised by the resolver and the invocation bridge.

    Values come from, in increasing priority: field defaults, the optional
    ``bridge.yaml`` file in the cache directory, environment variables and
    keyword overrides passed to :meth:`from_env`.
    """

    home_dir: Path
    cache_dir: Path
    tool_name: str = DEFAULT_TOOL_NAME
    launcher_artifact: str = DEFAULT_LAUNCHER
    explicit_path: Path | None = None
    search_path: tuple[str, ...] = ()
    search_roots: tuple[Path, ...] = ()
    max_depth: int = DEFAULT_MAX_DEPTH
    discovery_budget: float | None = DEFAULT_DISCOVERY_BUDGET
    no_daemon: bool = False
    platform: str = field(default=sys.platform)
    cwd: Path | None = None

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / CACHE_FILENAME

    @property
    def is_windows(self) -> bool:
        return self.platform.startswith("win")

    def effective_search_roots(self) -> tuple[Path, ...]:
        if self.search_roots:
            return self.search_roots
        cwd = self.cwd or Path.cwd()
        return (cwd, self.home_dir / "codex", self.home_dir)

    def with_explicit_path(self, explicit_path: str | Path | None) -> "BridgeConfig":
        if explicit_path is None or not str(explicit_path).strip():
            return self
        return replace(self, explicit_path=Path(str(explicit_path).strip()).expanduser())

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, **overrides: Any) -> "BridgeConfig":
        env = os.environ if env is None else env
        home = _default_home(env)
        cache_dir_raw = env.get("BB_CACHE_DIR", "").strip()
        cache_dir = Path(cache_dir_raw).expanduser() if cache_dir_raw else home / ".beadboard"
        if "cache_dir" in overrides and overrides["cache_dir"] is not None:
            cache_dir = Path(overrides["cache_dir"])

        values: dict[str, Any] = {"home_dir": home, "cache_dir": cache_dir}
        values.update(_coerce(load_config_file(cache_dir / CONFIG_FILENAME)))

        env_values: dict[str, Any] = {}
        if env.get("BB_TOOL_NAME", "").strip():
            env_values["tool_name"] = env["BB_TOOL_NAME"].strip()
        if env.get("BB_LAUNCHER", "").strip():
            env_values["launcher_artifact"] = env["BB_LAUNCHER"].strip()
        if env.get("BB_REPO", "").strip():
            env_values["explicit_path"] = env["BB_REPO"].strip()
        path_value = env.get("PATH", env.get("Path"))
        if path_value is not None:
            env_values["search_path"] = path_value
        if env.get("BB_SEARCH_ROOTS", "").strip():
            env_values["search_roots"] = split_list(env["BB_SEARCH_ROOTS"], separators="," + os.pathsep)
        if env.get("BB_DISCOVERY_DEPTH", "").strip():
            env_values["max_depth"] = env["BB_DISCOVERY_DEPTH"]
        if env.get("BB_DISCOVERY_BUDGET", "").strip():
            env_values["discovery_budget"] = env["BB_DISCOVERY_BUDGET"]
        if "BD_NO_DAEMON" in env:
            env_values["no_daemon"] = _truthy(env.get("BD_NO_DAEMON"))
        values.update(_coerce(env_values))

        overrides.pop("cache_dir", None)
        values.update(_coerce({key: value for key, value in overrides.items() if value is not None}))
        return cls(**values)


def load_config_file(path: Path) -> dict[str, Any]:
    """Read ``bridge.yaml``; a missing or unreadable file yields an empty mapping."""

    if not path.is_file():
        return {}
    import yaml  # lazy import to keep import cost low

    try:
        data = yaml.safe_load(path.read_text("utf-8")) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(data, dict):
        return {}
    known = {item.name for item in fields(BridgeConfig)} - {"home_dir", "cache_dir"}
    return {key: value for key, value in data.items() if key in known}


def _coerce(values: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in values.items():
        try:
            if key == "explicit_path":
                result[key] = Path(str(value)).expanduser() if value else None
            elif key == "search_path":
                items = split_list(value, separators=os.pathsep) if isinstance(value, str) else list(value)
                result[key] = tuple(str(item) for item in items)
            elif key == "search_roots":
                items = split_list(value, separators="," + os.pathsep) if isinstance(value, str) else list(value)
                result[key] = tuple(Path(str(item)).expanduser() for item in items)
            elif key == "max_depth":
                result[key] = max(0, int(value))
            elif key == "discovery_budget":
                budget = float(value)
                result[key] = budget if budget > 0 else None
            elif key == "no_daemon":
                result[key] = value if isinstance(value, bool) else _truthy(str(value))
            elif key == "cwd":
                result[key] = Path(str(value))
            else:
                result[key] = value
        except (TypeError, ValueError) as exc:
            raise BridgeConfigError(f"Invalid value for {key}: {value!r}") from exc
    return result


@dataclass(frozen=True)
class NamingConfig:
    adjectives: tuple[str, ...] = DEFAULT_ADJECTIVES
    nouns: tuple[str, ...] = DEFAULT_NOUNS
    max_retries: int = DEFAULT_MAX_RETRIES
    registry_dir: Path | None = None
    seed_sequence: tuple[float, ...] = ()

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "NamingConfig":
        env = os.environ if env is None else env
        adjectives = tuple(item.lower() for item in split_list(env.get("BB_NAME_ADJECTIVES"))) or DEFAULT_ADJECTIVES
        nouns = tuple(item.lower() for item in split_list(env.get("BB_NAME_NOUNS"))) or DEFAULT_NOUNS
        registry_raw = env.get("BB_AGENT_REGISTRY_DIR", "").strip()
        if registry_raw:
            registry_dir = Path(registry_raw).expanduser()
        else:
            registry_dir = _default_home(env) / ".beadboard" / "agent" / "agents"
        return cls(
            adjectives=adjectives,
            nouns=nouns,
            max_retries=parse_max_retries(env.get("BB_NAME_MAX_RETRIES")),
            registry_dir=registry_dir,
            seed_sequence=parse_seed_sequence(env.get("BB_NAME_SEED_SEQUENCE")),
        )


def parse_max_retries(raw: str | None) -> int:
    try:
        value = int((raw or "").strip())
    except ValueError:
        return DEFAULT_MAX_RETRIES
    return value if value > 0 else DEFAULT_MAX_RETRIES


def parse_seed_sequence(raw: str | None) -> tuple[float, ...]:
    values: list[float] = []
    for item in split_list(raw):
        try:
            number = float(item)
        except ValueError:
            continue
        if number != number or number in (float("inf"), float("-inf")):
            continue
        values.append(number)
    return tuple(values)


SETTINGS = load_settings()
