"""Session preflight checks and readiness summaries for automation callers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List

from beadbridge.app.resolver import ExecutableResolver, find_in_search_path
from beadbridge.domain.resolution.value_objects import utc_timestamp
from beadbridge.ports.cache_store import CacheStore
from beadbridge.settings import BridgeConfig, RuntimeSettings

DATA_TOOL = "bd"


def _tool_status(path: Path | None) -> Dict[str, Any]:
    return {"available": path is not None, "path": str(path) if path is not None else None}


@dataclass
class PreflightService:
    """Confirms both the data tool and the launcher are reachable."""

    config: BridgeConfig
    cache: CacheStore
    settings: RuntimeSettings | None = None
    data_tool: str = DATA_TOOL

    def run(self) -> Dict[str, Any]:
        try:
            return self._run()
        except Exception as exc:  # boundary: preflight always reports
            return {
                "ok": False,
                "error_code": "PREFLIGHT_INTERNAL_ERROR",
                "reason": str(exc),
                "remediation": "Inspect the beadbridge runtime environment and retry.",
                "tools": {self.data_tool: _tool_status(None)},
                "bb": None,
            }

    def _run(self) -> Dict[str, Any]:
        data_tool_path = find_in_search_path(self.data_tool, self.config.search_path, self.config.platform)
        if data_tool_path is None:
            return {
                "ok": False,
                "error_code": "BD_NOT_FOUND",
                "reason": f"Could not find {self.data_tool} in PATH.",
                "remediation": f"Install the beads CLI or add the {self.data_tool} executable to PATH.",
                "tools": {self.data_tool: _tool_status(None)},
                "bb": None,
            }

        resolution = ExecutableResolver(self.config, self.cache, settings=self.settings).resolve()
        tools = {self.data_tool: _tool_status(data_tool_path)}
        if not resolution.ok:
            return {
                "ok": False,
                "error_code": "BB_NOT_FOUND",
                "reason": resolution.reason,
                "remediation": resolution.remediation,
                "tools": tools,
                "bb": resolution.to_dict(),
            }
        return {
            "ok": True,
            "timestamp": utc_timestamp(),
            "tools": tools,
            "bb": resolution.to_dict(),
        }


class ReadinessReporter:
    """Summarises caller-supplied checks and artifact expectations."""

    def build(
        self,
        checks: Iterable[Any],
        artifacts: Iterable[Any],
        dependency_note: str = "",
    ) -> Dict[str, Any]:
        try:
            normalized_checks = [self._normalize_check(check) for check in checks]
            normalized_artifacts = [self._normalize_artifact(artifact) for artifact in artifacts]
        except Exception as exc:  # boundary: readiness always reports
            return {
                "ok": False,
                "reason": str(exc),
                "summary": {
                    "checks_passed": False,
                    "required_artifacts_present": False,
                    "ready": False,
                },
            }
        checks_passed = all(check["ok"] for check in normalized_checks)
        artifacts_present = all(item["exists"] or not item["required"] for item in normalized_artifacts)
        return {
            "ok": True,
            "generated_at": utc_timestamp(),
            "checks": normalized_checks,
            "artifacts": normalized_artifacts,
            "dependency_sanity": dependency_note,
            "summary": {
                "checks_passed": checks_passed,
                "required_artifacts_present": artifacts_present,
                "ready": checks_passed and artifacts_present,
            },
        }

    @staticmethod
    def _normalize_check(check: Any) -> Dict[str, Any]:
        data = check if isinstance(check, dict) else {}
        return {
            "name": data.get("name") or "unnamed-check",
            "ok": bool(data.get("ok")),
            "details": data.get("details") or "",
        }

    @staticmethod
    def _normalize_artifact(artifact: Any) -> Dict[str, Any]:
        data = artifact if isinstance(artifact, dict) else {}
        raw_path = data.get("path")
        exists = False
        if isinstance(raw_path, str) and raw_path.strip():
            try:
                exists = Path(raw_path).exists()
            except OSError:
                exists = False
        return {"path": raw_path, "required": bool(data.get("required")), "exists": exists}


def parse_json_array(raw: str | None) -> List[Any]:
    """Decode a JSON array argument; anything else yields an empty list."""

    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return []
    return parsed if isinstance(parsed, list) else []


__all__ = ["PreflightService", "ReadinessReporter", "parse_json_array"]
