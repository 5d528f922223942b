"""Classify the origin of a completion event that did not report one."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

FALLBACK_ORIGIN = "general-tests.spec.ts"
VIDEO_ORIGIN = "video-tests.spec.ts"
PURCHASE_FLOW_ORIGIN = "purchaseFlow.spec.ts"

PERSONA_MARKERS: Sequence[str] = (
    "standard_user",
    "problem_user",
    "error_user",
    "locked_out_user",
)
VIDEO_MARKERS: Sequence[str] = ("video", "complete", "ui_issues", "error")
PURCHASE_MARKERS: Sequence[str] = ("purchase", "checkout")


@dataclass(frozen=True, kw_only=True)
class OriginMatched:
    """A classification rule matched."""

    origin: str


@dataclass(frozen=True, kw_only=True)
class Unclassified:
    """No classification rule matched."""

    origin: str = FALLBACK_ORIGIN


type OriginClassification = OriginMatched | Unclassified


def persona_origin(persona: str) -> str:
    """Return the origin label of a persona-specific scenario file."""
    return f"{persona.replace('_', '-')}-video.spec.ts"


def classify_text(text: str) -> OriginClassification:
    """Classify a single piece of text (scenario name or artifact filename)."""
    lowered = text.lower()

    for persona in PERSONA_MARKERS:
        if persona in lowered:
            return OriginMatched(origin=persona_origin(persona))

    if any(marker in lowered for marker in VIDEO_MARKERS):
        return OriginMatched(origin=VIDEO_ORIGIN)

    if any(marker in lowered for marker in PURCHASE_MARKERS):
        return OriginMatched(origin=PURCHASE_FLOW_ORIGIN)

    return Unclassified()


def classify_origin(
    scenario_name: str, artifact_names: Iterable[str] = ()
) -> OriginClassification:
    """Infer the origin of a scenario from its name, then its artifacts.

    The scenario name is tried first; artifact filenames are only consulted
    when the name alone is not conclusive.
    """
    for text in (scenario_name, *artifact_names):
        classification = classify_text(text)
        if isinstance(classification, OriginMatched):
            return classification
    return Unclassified()
