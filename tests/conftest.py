from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SANDBOX_HOME = ROOT / ".test_place" / "global-home"
os.environ.setdefault("BB_SKILL_HOME", str(SANDBOX_HOME))
os.environ.setdefault("BB_TELEMETRY", "0")
SANDBOX_HOME.mkdir(parents=True, exist_ok=True)
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from beadbridge.settings import BridgeConfig, RuntimeSettings  # noqa: E402


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def make_config(tmp_path: Path, home: Path):
    """Build an isolated BridgeConfig; discovery roots default to an empty directory."""

    empty_root = tmp_path / "empty-root"
    empty_root.mkdir(exist_ok=True)

    def factory(**overrides) -> BridgeConfig:
        values = {
            "home_dir": home,
            "cache_dir": home / ".beadboard",
            "search_path": (),
            "search_roots": (empty_root,),
            "platform": "linux",
            "cwd": tmp_path,
        }
        values.update(overrides)
        return BridgeConfig(**values)

    return factory


@pytest.fixture
def runtime_settings(tmp_path: Path) -> RuntimeSettings:
    base = tmp_path / "runtime"
    settings = RuntimeSettings(home_dir=base, log_dir=base / "logs")
    for directory in (settings.home_dir, settings.log_dir):
        directory.mkdir(parents=True, exist_ok=True)
    return settings


@pytest.fixture
def make_repo():
    """Create a fake BeadBoard checkout and return its launcher path."""

    def factory(root: Path, launcher: str = "bb.ps1") -> Path:
        (root / "tools").mkdir(parents=True, exist_ok=True)
        launcher_path = root / launcher
        launcher_path.write_text("echo ok\n", encoding="utf-8")
        return launcher_path

    return factory
