#!/usr/bin/env python3
"""Entry point for the beadbridge CLI.

Every command prints exactly one pretty-printed JSON document carrying a
top-level ``ok`` flag and exits 0; failure detail lives in the document.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict

from beadbridge.adapters.cache_store import JsonFileCacheStore
from beadbridge.app.bridge import DEFAULT_TIMEOUT, InvocationBridge
from beadbridge.app.naming import NameGenerator
from beadbridge.app.preflight import PreflightService, ReadinessReporter
from beadbridge.app.preflight.service import parse_json_array
from beadbridge.app.resolver import ExecutableResolver
from beadbridge.settings import (
    SETTINGS,
    BridgeConfig,
    BridgeConfigError,
    NamingConfig,
    parse_max_retries,
    parse_seed_sequence,
    split_list,
)
from beadbridge.utils.telemetry import clear as telemetry_clear
from beadbridge.utils.telemetry import iter_events as telemetry_iter
from beadbridge.utils.telemetry import summarize as telemetry_summarize

Payload = Dict[str, Any]


class ArgumentParsingError(RuntimeError):
    """Raised instead of argparse's usage-and-exit behaviour."""


class HelpRequested(RuntimeError):
    """Carries formatted help text out of argparse's help action."""

    def __init__(self, usage: str) -> None:
        super().__init__(usage)
        self.usage = usage


class JsonArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise ArgumentParsingError(f"{self.prog}: {message}")

    def print_help(self, file: Any = None) -> None:
        raise HelpRequested(self.format_help())

    def exit(self, status: int = 0, message: str | None = None) -> None:  # type: ignore[override]
        raise ArgumentParsingError(message.strip() if message else f"{self.prog}: exited with status {status}")


def _emit(payload: Payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _bridge_config(args: argparse.Namespace) -> BridgeConfig:
    roots = getattr(args, "search_roots", None)
    return BridgeConfig.from_env(
        tool_name=getattr(args, "tool", None),
        launcher_artifact=getattr(args, "launcher", None),
        explicit_path=getattr(args, "repo", None),
        search_roots=[root for item in roots for root in split_list(item)] if roots else None,
    )


def _cache_for(config: BridgeConfig) -> JsonFileCacheStore:
    return JsonFileCacheStore(config.cache_file)


def _resolve_cmd(args: argparse.Namespace) -> Payload:
    config = _bridge_config(args)
    resolver = ExecutableResolver(config, _cache_for(config), settings=SETTINGS)
    return resolver.resolve().to_dict()


def _run_cmd(args: argparse.Namespace) -> Payload:
    config = _bridge_config(args)
    bridge = InvocationBridge(config, _cache_for(config), settings=SETTINGS)
    tool_args = list(args.tool_args or [])
    if tool_args and tool_args[0] == "--":
        tool_args = tool_args[1:]
    cwd = Path(args.cwd).expanduser() if args.cwd else Path(os.getcwd())
    result = bridge.run(cwd, tool_args, timeout=args.timeout, explicit_path=args.path)
    return result.to_dict()


def _generate_name_cmd(args: argparse.Namespace) -> Payload:
    config = NamingConfig.from_env()
    overrides: Dict[str, Any] = {}
    if args.adjectives:
        overrides["adjectives"] = tuple(item.lower() for item in split_list(args.adjectives)) or config.adjectives
    if args.nouns:
        overrides["nouns"] = tuple(item.lower() for item in split_list(args.nouns)) or config.nouns
    if args.max_retries is not None:
        overrides["max_retries"] = parse_max_retries(str(args.max_retries))
    if args.registry_dir:
        overrides["registry_dir"] = Path(args.registry_dir).expanduser()
    if args.seed_sequence:
        overrides["seed_sequence"] = parse_seed_sequence(args.seed_sequence)
    if overrides:
        config = replace(config, **overrides)
    generator = NameGenerator.from_config(config, settings=SETTINGS)
    payload = generator.generate().to_dict()
    payload["registry_dir"] = str(config.registry_dir)
    return payload


def _preflight_cmd(args: argparse.Namespace) -> Payload:
    config = _bridge_config(args)
    return PreflightService(config, _cache_for(config), settings=SETTINGS).run()


def _readiness_cmd(args: argparse.Namespace) -> Payload:
    return ReadinessReporter().build(
        parse_json_array(args.checks),
        parse_json_array(args.artifacts),
        args.dependency_note or "",
    )


def _telemetry_cmd(args: argparse.Namespace) -> Payload:
    if args.telemetry_command == "summary":
        return {"ok": True, **telemetry_summarize(telemetry_iter(SETTINGS))}
    if args.telemetry_command == "tail":
        events = list(telemetry_iter(SETTINGS))
        limit = max(0, args.limit)
        return {"ok": True, "events": events[-limit:] if limit else events}
    if args.telemetry_command == "clear":
        telemetry_clear(SETTINGS)
        return {"ok": True, "cleared": str(SETTINGS.telemetry_file)}
    return {"ok": False, "error_code": "INVALID_ARGUMENTS", "reason": "unknown telemetry command"}


def _version_cmd(args: argparse.Namespace) -> Payload:
    return {
        "ok": True,
        "version": SETTINGS.cli_version,
        "home_dir": str(SETTINGS.home_dir),
        "telemetry_file": str(SETTINGS.telemetry_file),
    }


def _add_resolution_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tool", help="Command name searched on PATH (default: env BB_TOOL_NAME or bb)")
    parser.add_argument("--launcher", help="Launcher file inside the repo (default: env BB_LAUNCHER or bb.ps1)")
    parser.add_argument("--repo", help="Explicit repo directory or executable (default: env BB_REPO)")
    parser.add_argument(
        "--search-root",
        dest="search_roots",
        action="append",
        help="Discovery root; repeat or comma-separate (default: env BB_SEARCH_ROOTS)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = JsonArgumentParser(prog="beadbridge", description="Locate and run the BeadBoard CLI tools")
    sub = parser.add_subparsers(dest="command", required=True)

    resolve_cmd = sub.add_parser("resolve", help="Resolve the launcher executable")
    _add_resolution_flags(resolve_cmd)
    resolve_cmd.set_defaults(func=_resolve_cmd)

    run_cmd = sub.add_parser("run", help="Run the resolved tool and report the outcome")
    _add_resolution_flags(run_cmd)
    run_cmd.add_argument("--cwd", help="Working directory / project root (default: current directory)")
    run_cmd.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Timeout in seconds (default: 30)")
    run_cmd.add_argument("--path", help="Explicit executable or repo directory for this call")
    run_cmd.add_argument("tool_args", nargs=argparse.REMAINDER, help="Arguments passed to the tool (after --)")
    run_cmd.set_defaults(func=_run_cmd)

    name_cmd = sub.add_parser("generate-name", help="Generate a unique adjective-noun agent name")
    name_cmd.add_argument("--adjectives", help="Comma-separated adjective pool (default: env BB_NAME_ADJECTIVES)")
    name_cmd.add_argument("--nouns", help="Comma-separated noun pool (default: env BB_NAME_NOUNS)")
    name_cmd.add_argument("--max-retries", type=int, help="Maximum attempts (default: env BB_NAME_MAX_RETRIES or 12)")
    name_cmd.add_argument("--registry-dir", help="Agent registry directory (default: env BB_AGENT_REGISTRY_DIR)")
    name_cmd.add_argument("--seed-sequence", help="Comma-separated draws replayed instead of real randomness")
    name_cmd.set_defaults(func=_generate_name_cmd)

    preflight_cmd = sub.add_parser("preflight", help="Check that bd and bb are both reachable")
    _add_resolution_flags(preflight_cmd)
    preflight_cmd.set_defaults(func=_preflight_cmd)

    readiness_cmd = sub.add_parser("readiness", help="Summarise readiness checks and artifacts")
    readiness_cmd.add_argument("--checks", help="JSON array of {name, ok, details}")
    readiness_cmd.add_argument("--artifacts", help="JSON array of {path, required}")
    readiness_cmd.add_argument("--dependency-note", help="Free-form dependency sanity note")
    readiness_cmd.set_defaults(func=_readiness_cmd)

    telemetry_cmd = sub.add_parser("telemetry", help="Inspect the local event log")
    telemetry_sub = telemetry_cmd.add_subparsers(dest="telemetry_command", required=True)
    telemetry_sub.add_parser("summary", help="Count events by name and status").set_defaults(func=_telemetry_cmd)
    tail = telemetry_sub.add_parser("tail", help="Show recent events")
    tail.add_argument("--limit", type=int, default=20, help="Number of events (0 = all)")
    tail.set_defaults(func=_telemetry_cmd)
    telemetry_sub.add_parser("clear", help="Delete the event log").set_defaults(func=_telemetry_cmd)

    sub.add_parser("version", help="Print the beadbridge version").set_defaults(func=_version_cmd)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    except HelpRequested as exc:
        _emit({"ok": True, "usage": exc.usage})
        return 0
    except ArgumentParsingError as exc:
        _emit({"ok": False, "error_code": "INVALID_ARGUMENTS", "reason": str(exc)})
        return 0
    try:
        payload = args.func(args)
    except BridgeConfigError as exc:
        payload = {"ok": False, "error_code": "CONFIG_ERROR", "reason": str(exc)}
    except Exception as exc:  # boundary: the CLI always answers with JSON
        payload = {"ok": False, "error_code": "INTERNAL_ERROR", "reason": f"{type(exc).__name__}: {exc}"}
    _emit(payload)
    return 0


def _shortcut(command: str) -> Callable[[], int]:
    def entry() -> int:
        return main([command, *sys.argv[1:]])

    entry.__name__ = f"{command.replace('-', '_')}_main"
    return entry


resolve_main = _shortcut("resolve")
generate_name_main = _shortcut("generate-name")
preflight_main = _shortcut("preflight")
readiness_main = _shortcut("readiness")


if __name__ == "__main__":
    sys.exit(main())
