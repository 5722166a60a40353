"""Run the resolved tool as a supervised subprocess."""

from __future__ import annotations

import shutil
import subprocess
import time
from pathlib import Path
from typing import Any, Callable, Sequence

from beadbridge.app.resolver import ExecutableResolver
from beadbridge.domain.invocation import (
    FailureClassification,
    InvocationResult,
    classify_failure,
    normalize_output,
)
from beadbridge.ports.cache_store import CacheStore
from beadbridge.settings import BridgeConfig, RuntimeSettings
from beadbridge.utils.telemetry import safe_record

DEFAULT_TIMEOUT = 30.0
NO_DAEMON_FLAG = "--no-daemon"

Runner = Callable[..., "subprocess.CompletedProcess[str]"]
ResolverFactory = Callable[..., ExecutableResolver]


def find_powershell() -> str | None:
    return shutil.which("pwsh") or shutil.which("powershell")


def launcher_argv(executable: Path, platform: str) -> list[str]:
    """Leading argv needed to start ``executable`` on ``platform``."""

    suffix = executable.suffix.lower()
    if suffix == ".ps1":
        shell = find_powershell() or "pwsh"
        return [shell, "-NoProfile", "-ExecutionPolicy", "Bypass", "-File", str(executable)]
    if platform.startswith("win") and suffix in {".cmd", ".bat"}:
        return ["cmd", "/c", str(executable)]
    return [str(executable)]


class InvocationBridge:
    """Resolve the tool, run it once and describe what happened.

    ``run`` never raises: resolution failures, spawn errors, timeouts and
    non-zero exits all come back as an :class:`InvocationResult`.
    """

    def __init__(
        self,
        config: BridgeConfig,
        cache: CacheStore,
        *,
        settings: RuntimeSettings | None = None,
        runner: Runner = subprocess.run,
        resolver_factory: ResolverFactory = ExecutableResolver,
    ) -> None:
        self._config = config
        self._cache = cache
        self._settings = settings
        self._runner = runner
        self._resolver_factory = resolver_factory

    def run(
        self,
        cwd: str | Path,
        args: Sequence[str],
        timeout: float | None = None,
        explicit_path: str | Path | None = None,
    ) -> InvocationResult:
        started = time.monotonic()
        timeout = DEFAULT_TIMEOUT if timeout is None else timeout
        argv = [str(arg) for arg in args]
        if self._config.no_daemon:
            argv.insert(0, NO_DAEMON_FLAG)
        context = _RunContext(
            command=str(explicit_path) if explicit_path else self._config.tool_name,
            args=tuple(argv),
            cwd=str(cwd),
            started=started,
        )
        try:
            result = self._run(context, timeout, explicit_path)
        except Exception as exc:  # boundary: invocation never raises
            result = context.failed(FailureClassification.UNKNOWN, error=f"Unexpected bridge failure: {exc}")
        safe_record(
            self._settings,
            "invoke",
            {
                "command": result.command,
                "args": list(result.args),
                "cwd": result.cwd,
                "classification": result.classification.value if result.classification else None,
                "exit_code": result.exit_code,
            },
            level="info" if result.success else "warn",
            status="ok" if result.success else "failed",
            component="bridge",
            duration_ms=result.duration_ms,
        )
        return result

    def _run(self, context: "_RunContext", timeout: float, explicit_path: str | Path | None) -> InvocationResult:
        config = self._config.with_explicit_path(explicit_path)
        resolver = self._resolver_factory(
            config,
            self._cache,
            settings=self._settings,
            persist_explicit=explicit_path is None or not str(explicit_path).strip(),
        )
        resolution = resolver.resolve()
        if not resolution.ok or resolution.resolved_path is None:
            return context.failed(
                FailureClassification.NOT_FOUND,
                error=resolution.reason,
                remediation=resolution.remediation,
            )
        context.command = str(resolution.resolved_path)

        if not Path(context.cwd).is_dir():
            return context.failed(
                FailureClassification.UNKNOWN,
                error=f"Working directory {context.cwd} does not exist.",
                remediation="Pass an existing project root as the working directory.",
            )

        if resolution.resolved_path.suffix.lower() == ".ps1" and find_powershell() is None:
            return context.failed(
                FailureClassification.NOT_FOUND,
                error=(
                    f"PowerShell (pwsh or powershell) is required to run {context.command} "
                    "but was not found on PATH."
                ),
                remediation="Install PowerShell 7 (pwsh) or point BB_REPO at a native executable.",
            )

        command = launcher_argv(resolution.resolved_path, config.platform) + list(context.args)
        try:
            completed = self._runner(
                command,
                cwd=context.cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            return context.failed(
                FailureClassification.TIMEOUT,
                error=f"Command timed out after {timeout:g}s and was terminated.",
                stdout=exc.stdout,
                stderr=exc.stderr,
            )
        except OSError as exc:
            classification = classify_failure(error=exc)
            remediation = None
            if classification is FailureClassification.NOT_FOUND:
                remediation = "The resolved executable disappeared before spawn; re-run resolution."
            return context.failed(classification, error=str(exc), remediation=remediation)

        if completed.returncode == 0:
            return context.succeeded(completed.stdout, completed.stderr)
        classification = classify_failure(exit_code=completed.returncode, stderr=completed.stderr or "")
        return context.failed(
            classification,
            error=_exit_message(context.command, completed.returncode),
            stdout=completed.stdout,
            stderr=completed.stderr,
            exit_code=completed.returncode,
        )


def _exit_message(command: str, returncode: int) -> str:
    if returncode < 0:
        return f"{command} was terminated by signal {-returncode}."
    return f"{command} exited with code {returncode}."


class _RunContext:
    def __init__(self, *, command: str, args: tuple[str, ...], cwd: str, started: float) -> None:
        self.command = command
        self.args = args
        self.cwd = cwd
        self.started = started

    def _elapsed_ms(self) -> int:
        return max(0, int((time.monotonic() - self.started) * 1000))

    def succeeded(self, stdout: Any, stderr: Any) -> InvocationResult:
        return InvocationResult(
            success=True,
            classification=None,
            command=self.command,
            args=self.args,
            cwd=self.cwd,
            stdout=normalize_output(stdout),
            stderr=normalize_output(stderr),
            exit_code=0,
            duration_ms=self._elapsed_ms(),
        )

    def failed(
        self,
        classification: FailureClassification,
        *,
        error: str,
        stdout: Any = None,
        stderr: Any = None,
        exit_code: int | None = None,
        remediation: str | None = None,
    ) -> InvocationResult:
        return InvocationResult(
            success=False,
            classification=classification,
            command=self.command,
            args=self.args,
            cwd=self.cwd,
            stdout=normalize_output(stdout),
            stderr=normalize_output(stderr),
            exit_code=exit_code,
            duration_ms=self._elapsed_ms(),
            error=error,
            remediation=remediation,
        )


__all__ = ["DEFAULT_TIMEOUT", "InvocationBridge", "find_powershell", "launcher_argv"]
