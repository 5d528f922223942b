"""Tests for origin classification."""

import pytest

from report_aggregator.origin import (
    FALLBACK_ORIGIN,
    PURCHASE_FLOW_ORIGIN,
    VIDEO_ORIGIN,
    OriginMatched,
    Unclassified,
    classify_origin,
)


@pytest.mark.parametrize(
    ("scenario_name", "expected"),
    [
        (
            "standard_user - complete purchase flow verification",
            "standard-user-video.spec.ts",
        ),
        ("locked_out_user - error handling verification", "locked-user-video.spec.ts"),
        ("Problem_User basic check", "problem-user-video.spec.ts"),
        ("login page video walkthrough", VIDEO_ORIGIN),
        ("ui_issues on inventory", VIDEO_ORIGIN),
        ("Checkout with two items", PURCHASE_FLOW_ORIGIN),
        ("purchase of a backpack", PURCHASE_FLOW_ORIGIN),
    ],
)
def test_classifies_scenario_name(scenario_name: str, expected: str) -> None:
    """Matches keyword rules against the scenario name."""
    assert classify_origin(scenario_name) == OriginMatched(origin=expected)


def test_persona_marker_wins_over_purchase_keyword() -> None:
    """Persona markers are checked before purchase keywords."""
    result = classify_origin("Purchase flow for error_user")

    assert result == OriginMatched(origin="error-user-video.spec.ts")


def test_falls_back_to_artifact_names() -> None:
    """Uses advisory artifact names when the scenario name is inconclusive."""
    result = classify_origin("sorting smoke", ["01_sorting_checkout.png"])

    assert result == OriginMatched(origin=PURCHASE_FLOW_ORIGIN)


def test_unclassified_uses_fallback_origin() -> None:
    """Nothing matching yields Unclassified with the generic origin."""
    result = classify_origin("sorting smoke", ["01_sorting.png"])

    assert isinstance(result, Unclassified)
    assert result.origin == FALLBACK_ORIGIN
