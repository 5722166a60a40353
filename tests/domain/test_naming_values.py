from __future__ import annotations

import pytest

from beadbridge.domain.naming import (
    NAME_GENERATION_EXHAUSTED,
    NameGenerationResult,
    SequenceRandomSource,
    sanitize_name,
)
from beadbridge.domain.naming.random_source import pick_index


def test_sanitize_name_collapses_symbols() -> None:
    assert sanitize_name("Green--Castle!") == "green-castle"
    assert sanitize_name("  ") == ""
    assert sanitize_name("Blue_Harbor 2") == "blue-harbor-2"


def test_sequence_source_replays_and_wraps() -> None:
    source = SequenceRandomSource([0.1, 0.7])
    assert [source.next() for _ in range(4)] == [0.1, 0.7, 0.1, 0.7]
    assert source.consumed == 4


def test_sequence_source_clamps_values() -> None:
    source = SequenceRandomSource([-3.0, 4.0])
    assert source.next() == 0.0
    assert source.next() == pytest.approx(0.999999)


def test_pick_index_skips_draw_for_single_item() -> None:
    source = SequenceRandomSource([0.9])
    assert pick_index(1, source) == 0
    assert source.consumed == 0
    assert pick_index(4, source) == 3


def test_successful_result_requires_valid_name() -> None:
    with pytest.raises(ValueError):
        NameGenerationResult(ok=True, agent_name="Green Castle", attempts=1, collisions=0)
    with pytest.raises(ValueError):
        NameGenerationResult(ok=True, agent_name="green-castle", attempts=1, collisions=1)


def test_failed_result_serialises_error_code() -> None:
    result = NameGenerationResult(ok=False, attempts=2, collisions=2, error_code=NAME_GENERATION_EXHAUSTED, reason="x")
    payload = result.to_dict()
    assert payload["ok"] is False
    assert payload["error_code"] == NAME_GENERATION_EXHAUSTED
    assert "agent_name" not in payload
