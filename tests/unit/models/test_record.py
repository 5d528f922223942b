"""Tests for completion event and record models."""

import pytest
from pydantic import ValidationError

from report_aggregator.models.record import CompletionEvent, TestExecutionRecord


def test_identity_key_joins_source_subject_and_scenario() -> None:
    """Identity key is derived from source, subject and scenario."""
    record = TestExecutionRecord(
        subject_identity="u1",
        scenario_name="s1",
        source_file="X",
        status="passed",
        duration_ms=100,
    )

    assert record.identity == ("X", "u1", "s1")
    assert record.identity_key == "X::u1::s1"


def test_records_are_immutable() -> None:
    """Stored records cannot be mutated in place."""
    record = TestExecutionRecord(
        subject_identity="u1",
        scenario_name="s1",
        source_file="X",
        status="passed",
        duration_ms=100,
    )

    with pytest.raises(ValidationError):
        record.scenario_name = "other"  # type: ignore[misc]


def test_event_strips_whitespace() -> None:
    """Identity fields are stripped on validation."""
    event = CompletionEvent(
        subject_identity="  u1 ",
        scenario_name=" s1",
        status="passed",
        duration_ms=0,
    )

    assert event.subject_identity == "u1"
    assert event.scenario_name == "s1"
    assert event.source_file is None
    assert event.artifacts == []
