from __future__ import annotations

import subprocess

import pytest

from beadbridge.domain.invocation import (
    FailureClassification,
    InvocationResult,
    classify_failure,
    normalize_output,
)


def test_normalize_output_unifies_line_endings_and_trims() -> None:
    assert normalize_output('  [{"id":"bb-1"}]\r\n') == '[{"id":"bb-1"}]'
    assert normalize_output("a\r\nb\rc\n") == "a\nb\nc"
    assert normalize_output(b"bytes\r\n") == "bytes"
    assert normalize_output(None) == ""


def test_missing_executable_is_not_found() -> None:
    assert classify_failure(error=FileNotFoundError("bd")) is FailureClassification.NOT_FOUND


def test_timeout_expired_is_timeout() -> None:
    error = subprocess.TimeoutExpired(cmd=["bd"], timeout=0.005)
    assert classify_failure(error=error) is FailureClassification.TIMEOUT


def test_signal_termination_is_timeout() -> None:
    assert classify_failure(exit_code=-15) is FailureClassification.TIMEOUT


@pytest.mark.parametrize(
    "stderr",
    ["unknown flag: --bad-flag", "Error: INVALID status", "argument --id is required", "Usage: bd list"],
)
def test_non_zero_with_argument_complaint_is_bad_args(stderr: str) -> None:
    assert classify_failure(exit_code=1, stderr=stderr) is FailureClassification.BAD_ARGS


def test_non_zero_with_other_stderr_is_non_zero_exit() -> None:
    assert classify_failure(exit_code=2, stderr="database is locked") is FailureClassification.NON_ZERO_EXIT


def test_unrecognised_failure_is_unknown() -> None:
    assert classify_failure(error=PermissionError("denied")) is FailureClassification.UNKNOWN
    assert classify_failure() is FailureClassification.UNKNOWN


def test_invocation_result_is_either_successful_or_classified() -> None:
    with pytest.raises(ValueError):
        InvocationResult(success=True, classification=FailureClassification.TIMEOUT, command="bd", args=(), cwd=".")
    with pytest.raises(ValueError):
        InvocationResult(success=False, classification=None, command="bd", args=(), cwd=".")
