from __future__ import annotations

import json
from pathlib import Path

from beadbridge.adapters.cache_store import InMemoryCacheStore, JsonFileCacheStore
from beadbridge.app.resolver import DiscoveryWalker, ExecutableResolver, executable_names, find_in_search_path
from beadbridge.domain.resolution import ResolutionSource
from beadbridge.settings import BridgeConfig


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    return path


def test_explicit_repo_wins_over_path_and_cache(tmp_path: Path, make_config, make_repo) -> None:
    launcher = make_repo(tmp_path / "beadboard")
    _touch(tmp_path / "bin" / "bb")
    cached = _touch(tmp_path / "old" / "bb.ps1")
    cache = InMemoryCacheStore({"bb_path": str(cached)})
    config = make_config(explicit_path=tmp_path / "beadboard", search_path=(str(tmp_path / "bin"),))

    result = ExecutableResolver(config, cache).resolve()

    assert result.ok is True
    assert result.source is ResolutionSource.EXPLICIT
    assert result.resolved_path == launcher


def test_invalid_explicit_path_fails_without_fallback(tmp_path: Path, make_config, make_repo) -> None:
    on_path = _touch(tmp_path / "bin" / "bb")
    cache = InMemoryCacheStore({"bb_path": str(on_path)})
    make_repo(tmp_path / "workspace" / "beadboard")
    config = make_config(
        explicit_path=tmp_path / "missing",
        search_path=(str(tmp_path / "bin"),),
        search_roots=(tmp_path / "workspace",),
    )

    result = ExecutableResolver(config, cache).resolve()

    assert result.ok is False
    assert result.source is ResolutionSource.EXPLICIT
    assert result.resolved_path is None
    assert "does not exist" in result.reason
    assert "BB_REPO" in (result.remediation or "")
    assert cache.writes == 0


def test_explicit_dir_without_launcher_names_artifact(tmp_path: Path, make_config) -> None:
    repo = tmp_path / "beadboard"
    repo.mkdir()

    result = ExecutableResolver(make_config(explicit_path=repo), InMemoryCacheStore()).resolve()

    assert result.ok is False
    assert result.source is ResolutionSource.EXPLICIT
    assert "bb.ps1" in result.reason
    assert result.remediation


def test_explicit_file_is_used_directly(tmp_path: Path, make_config) -> None:
    executable = _touch(tmp_path / "tools" / "bd.exe")

    result = ExecutableResolver(make_config(explicit_path=executable), InMemoryCacheStore()).resolve()

    assert result.ok is True
    assert result.resolved_path == executable


def test_search_path_resolution_is_written_through(tmp_path: Path, make_config) -> None:
    on_path = _touch(tmp_path / "bin" / "bb")
    home = tmp_path / "home"
    store = JsonFileCacheStore(home / ".beadboard" / "skill-config.json")

    first = ExecutableResolver(make_config(search_path=(str(tmp_path / "bin"),)), store).resolve()
    second = ExecutableResolver(make_config(), store).resolve()

    assert first.source is ResolutionSource.PATH
    assert second.source is ResolutionSource.CACHE
    assert second.resolved_path == on_path
    assert json.loads(store.path.read_text(encoding="utf-8"))["source"] == "path"


def test_discovery_resolution_is_written_through(tmp_path: Path, make_config, make_repo) -> None:
    launcher = make_repo(tmp_path / "workspace" / "beadboard")
    cache = InMemoryCacheStore()

    first = ExecutableResolver(make_config(search_roots=(tmp_path / "workspace",)), cache).resolve()
    second = ExecutableResolver(make_config(), cache).resolve()

    assert first.source is ResolutionSource.DISCOVERY
    assert first.resolved_path == launcher
    assert second.source is ResolutionSource.CACHE
    assert second.resolved_path == launcher
    assert cache.snapshot()["source"] == "discovery"


def test_cache_mismatch_is_reported_and_rewritten(tmp_path: Path, make_config, make_repo) -> None:
    path_a = make_repo(tmp_path / "repo-a")
    path_b = make_repo(tmp_path / "repo-b")
    cache = InMemoryCacheStore({"bb_path": str(path_a), "source": "discovery"})

    result = ExecutableResolver(make_config(explicit_path=tmp_path / "repo-b"), cache).resolve()

    assert result.ok is True
    assert result.source is ResolutionSource.EXPLICIT
    assert "mismatch" in result.reason
    assert cache.snapshot()["bb_path"] == str(path_b)
    assert cache.snapshot()["source"] == "explicit"


def test_matching_cache_has_plain_reason(tmp_path: Path, make_config, make_repo) -> None:
    launcher = make_repo(tmp_path / "repo")
    cache = InMemoryCacheStore({"bb_path": str(launcher)})

    result = ExecutableResolver(make_config(explicit_path=tmp_path / "repo"), cache).resolve()

    assert "mismatch" not in result.reason
    assert cache.writes == 1


def test_cache_hit_does_not_rewrite(tmp_path: Path, make_config) -> None:
    cached = _touch(tmp_path / "repo" / "bb.ps1")
    cache = InMemoryCacheStore({"bb_path": str(cached), "updated_at": "2026-01-01T00:00:00Z"})

    result = ExecutableResolver(make_config(), cache).resolve()

    assert result.source is ResolutionSource.CACHE
    assert cache.writes == 0
    assert cache.snapshot()["updated_at"] == "2026-01-01T00:00:00Z"


def test_stale_cache_falls_through_to_discovery(tmp_path: Path, make_config, make_repo) -> None:
    launcher = make_repo(tmp_path / "workspace" / "beadboard")
    cache = InMemoryCacheStore({"bb_path": str(tmp_path / "gone" / "bb.ps1")})

    result = ExecutableResolver(make_config(search_roots=(tmp_path / "workspace",)), cache).resolve()

    assert result.source is ResolutionSource.DISCOVERY
    assert result.resolved_path == launcher


def test_nothing_found_returns_remediation(make_config) -> None:
    result = ExecutableResolver(make_config(), InMemoryCacheStore()).resolve()

    assert result.ok is False
    assert result.source is ResolutionSource.NONE
    assert result.remediation
    assert "bb.ps1" in result.reason


def test_internal_fault_becomes_structured_failure(make_config) -> None:
    class ExplodingStore(InMemoryCacheStore):
        def read(self):
            raise RuntimeError("disk on fire")

    result = ExecutableResolver(make_config(), ExplodingStore()).resolve()

    assert result.ok is False
    assert result.source is ResolutionSource.INTERNAL
    assert "disk on fire" in result.reason


def test_walker_factory_receives_config(make_config, tmp_path: Path) -> None:
    seen: list[BridgeConfig] = []

    def factory(config: BridgeConfig) -> DiscoveryWalker:
        seen.append(config)
        return DiscoveryWalker("bb.ps1", [])

    config = make_config()
    ExecutableResolver(config, InMemoryCacheStore(), walker_factory=factory).resolve()

    assert seen == [config]


def test_windows_candidates_prefer_scripts_before_bare_name(tmp_path: Path) -> None:
    assert executable_names("bb", "win32") == ["bb.cmd", "bb.exe", "bb.ps1", "bb.bat", "bb"]
    assert executable_names("bb", "linux") == ["bb"]

    _touch(tmp_path / "bin" / "bb")
    ps1 = _touch(tmp_path / "bin" / "bb.ps1")
    assert find_in_search_path("bb", [str(tmp_path / "bin")], "win32") == ps1


def test_search_path_order_is_respected(tmp_path: Path) -> None:
    _touch(tmp_path / "second" / "bb")
    first = _touch(tmp_path / "first" / "bb")
    found = find_in_search_path("bb", ["", str(tmp_path / "first"), str(tmp_path / "second")], "linux")
    assert found == first


def test_directory_named_like_tool_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "bin" / "bb").mkdir(parents=True)
    assert find_in_search_path("bb", [str(tmp_path / "bin")], "linux") is None


def test_explicit_hit_can_skip_cache_write(tmp_path: Path, make_config, make_repo) -> None:
    cached = make_repo(tmp_path / "repo-a")
    make_repo(tmp_path / "repo-b")
    cache = InMemoryCacheStore({"bb_path": str(cached)})

    resolver = ExecutableResolver(make_config(explicit_path=tmp_path / "repo-b"), cache, persist_explicit=False)
    result = resolver.resolve()

    assert result.source is ResolutionSource.EXPLICIT
    assert "mismatch" not in result.reason
    assert cache.writes == 0
    assert cache.snapshot()["bb_path"] == str(cached)
