"""Tiered resolution of the external tool executable."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Iterable

from beadbridge.app.resolver.discovery import DiscoveryWalker, file_exists
from beadbridge.domain.resolution import CacheEntry, ResolutionResult, ResolutionSource
from beadbridge.ports.cache_store import CacheStore, CacheStoreError
from beadbridge.settings import BridgeConfig, RuntimeSettings
from beadbridge.utils.telemetry import safe_record

WINDOWS_SUFFIXES = (".cmd", ".exe", ".ps1", ".bat")

WalkerFactory = Callable[[BridgeConfig], DiscoveryWalker]


def executable_names(tool_name: str, platform: str) -> list[str]:
    """Candidate file names for ``tool_name``, in lookup order."""

    if platform.startswith("win"):
        return [f"{tool_name}{suffix}" for suffix in WINDOWS_SUFFIXES] + [tool_name]
    return [tool_name]


def find_in_search_path(tool_name: str, search_path: Iterable[str], platform: str) -> Path | None:
    names = executable_names(tool_name, platform)
    for entry in search_path:
        entry = entry.strip()
        if not entry:
            continue
        for name in names:
            candidate = Path(entry) / name
            if file_exists(candidate):
                return candidate
    return None


def _default_walker(config: BridgeConfig) -> DiscoveryWalker:
    return DiscoveryWalker(
        config.launcher_artifact,
        config.effective_search_roots(),
        max_depth=config.max_depth,
        budget=config.discovery_budget,
    )


class ExecutableResolver:
    """Locate the external tool: explicit override, search path, cache, discovery.

    Tiers are evaluated strictly in that order and the first decisive
    outcome wins. An explicit override that fails validation is decisive.
    Successful explicit, search-path and discovery resolutions are written
    through to the cache; a cache hit is returned as-is.

    With ``persist_explicit=False`` an explicit hit leaves the cache alone,
    which suits one-off per-call overrides.
    """

    def __init__(
        self,
        config: BridgeConfig,
        cache: CacheStore,
        *,
        settings: RuntimeSettings | None = None,
        walker_factory: WalkerFactory = _default_walker,
        persist_explicit: bool = True,
    ) -> None:
        self._config = config
        self._cache = cache
        self._settings = settings
        self._walker_factory = walker_factory
        self._persist_explicit = persist_explicit

    @property
    def config(self) -> BridgeConfig:
        return self._config

    def resolve(self) -> ResolutionResult:
        started = time.monotonic()
        try:
            result = self._resolve()
        except Exception as exc:  # boundary: resolution never raises
            result = ResolutionResult.failed(
                ResolutionSource.INTERNAL,
                f"Resolution failed unexpectedly: {exc}",
                "Inspect the beadbridge runtime environment and retry.",
            )
        safe_record(
            self._settings,
            "resolve",
            {
                "source": result.source.value,
                "ok": result.ok,
                "resolved_path": str(result.resolved_path) if result.resolved_path else None,
                "reason": result.reason,
            },
            level="info" if result.ok else "warn",
            status="ok" if result.ok else "failed",
            component="resolver",
            duration_ms=round((time.monotonic() - started) * 1000, 3),
        )
        return result

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    def _resolve(self) -> ResolutionResult:
        cached = self._cache.read()

        if self._config.explicit_path is not None:
            return self._resolve_explicit(self._config.explicit_path, cached)

        on_path = find_in_search_path(self._config.tool_name, self._config.search_path, self._config.platform)
        if on_path is not None:
            self._write_cache(on_path, ResolutionSource.PATH)
            return ResolutionResult.found(ResolutionSource.PATH, on_path, "Resolved from PATH.")

        if cached is not None and file_exists(Path(cached.bb_path)):
            return ResolutionResult.found(
                ResolutionSource.CACHE,
                Path(cached.bb_path),
                "Resolved from cached path.",
            )

        walker = self._walker_factory(self._config)
        discovered = walker.discover()
        if discovered is not None:
            self._write_cache(discovered, ResolutionSource.DISCOVERY)
            return ResolutionResult.found(
                ResolutionSource.DISCOVERY,
                discovered,
                "Resolved by filesystem discovery and cached.",
            )

        reason = f"Unable to find {self._config.tool_name} command or {self._config.launcher_artifact}."
        if walker.budget_exhausted:
            reason += f" Discovery stopped after its {self._config.discovery_budget:g}s budget."
        return ResolutionResult.failed(
            ResolutionSource.NONE,
            reason,
            f"Set BB_REPO to the directory containing {self._config.launcher_artifact}, "
            f"or install a global {self._config.tool_name} command on PATH, then retry.",
        )

    def _resolve_explicit(self, target: Path, cached: CacheEntry | None) -> ResolutionResult:
        resolved, problem = self._validate_explicit(target)
        if resolved is None:
            return ResolutionResult.failed(
                ResolutionSource.EXPLICIT,
                problem,
                f"Set BB_REPO to the directory containing {self._config.launcher_artifact} "
                "or to the executable itself.",
            )
        if not self._persist_explicit:
            return ResolutionResult.found(ResolutionSource.EXPLICIT, resolved, "Resolved from per-call explicit path.")
        reason = "Resolved from explicit override."
        if cached is not None and cached.bb_path != str(resolved):
            reason = "Resolved from explicit override; cache mismatch detected and cache updated."
        self._write_cache(resolved, ResolutionSource.EXPLICIT)
        return ResolutionResult.found(ResolutionSource.EXPLICIT, resolved, reason)

    def _validate_explicit(self, target: Path) -> tuple[Path | None, str]:
        target = target.expanduser().absolute()
        if file_exists(target):
            return target, ""
        if not target.is_dir():
            return None, f"Explicit path {target} does not exist."
        artifact = target / self._config.launcher_artifact
        if not file_exists(artifact):
            return None, (
                f"Explicit path {target} is set, but {self._config.launcher_artifact} "
                f"was not found at {artifact}."
            )
        return artifact, ""

    def _write_cache(self, path: Path, source: ResolutionSource) -> None:
        try:
            self._cache.write(str(path), source.value)
        except CacheStoreError as exc:
            safe_record(
                self._settings,
                "resolve-cache",
                {"path": str(path), "error": str(exc)},
                level="warn",
                status="write_failed",
                component="resolver",
            )


__all__ = ["ExecutableResolver", "executable_names", "find_in_search_path"]
