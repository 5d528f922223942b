"""Canonical manifest of the scenarios a complete report must account for."""

import json
from collections.abc import Sequence
from pathlib import Path

from pydantic import Field, TypeAdapter, ValidationError

from report_aggregator.errors import ManifestLoadError
from report_aggregator.models.base import Model
from report_aggregator.models.record import NonEmptyStr


class ManifestEntry(Model):
    """A hand-authored descriptor of one expected scenario."""

    subject_identity: NonEmptyStr = Field(..., description="Persona of the scenario")
    source_file: NonEmptyStr = Field(..., description="Scenario origin label")
    scenario_name: NonEmptyStr = Field(..., description="Expected scenario name")


type CanonicalManifest = Sequence[ManifestEntry]

_manifest_adapter: TypeAdapter[list[ManifestEntry]] = TypeAdapter(list[ManifestEntry])

PURCHASE_FLOW_PERSONAS: Sequence[str] = (
    "standard_user",
    "locked_out_user",
    "problem_user",
    "performance_glitch_user",
    "error_user",
)


def _entry(subject: str, source: str, scenario: str) -> ManifestEntry:
    return ManifestEntry(
        subject_identity=subject, source_file=source, scenario_name=scenario
    )


DEFAULT_MANIFEST: CanonicalManifest = (
    _entry(
        "standard_user",
        "standard-user-video.spec.ts",
        "standard_user - complete purchase flow verification",
    ),
    _entry(
        "standard_user",
        "standard-user-video.spec.ts",
        "standard_user - basic functionality smoke test",
    ),
    _entry(
        "problem_user",
        "problem-user-video.spec.ts",
        "problem_user - comprehensive UI issues verification",
    ),
    _entry(
        "problem_user",
        "problem-user-video.spec.ts",
        "problem_user - broken images detailed analysis",
    ),
    _entry(
        "problem_user",
        "problem-user-video.spec.ts",
        "problem_user - basic functionality verification",
    ),
    _entry(
        "locked_out_user",
        "locked-user-video.spec.ts",
        "locked_out_user - error handling verification",
    ),
    _entry(
        "locked_out_user",
        "locked-user-video.spec.ts",
        "locked_out_user - error message consistency check",
    ),
    _entry(
        "locked_out_user",
        "locked-user-video.spec.ts",
        "locked_out_user - multiple login attempts behavior",
    ),
    _entry(
        "error_user",
        "error-user-video.spec.ts",
        "error_user - UI issues and error handling video",
    ),
    *(
        _entry(persona, "purchaseFlow.spec.ts", f"Purchase flow for {persona}")
        for persona in PURCHASE_FLOW_PERSONAS
    ),
)


def load_manifest(path: Path) -> CanonicalManifest:
    """Load a manifest from a JSON file.

    The file holds either a list of entries or an object with an
    ``entries`` list.

    Raises:
        ManifestLoadError: If the file is not valid JSON or an entry is invalid

    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestLoadError(f"Manifest {path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("entries", [])

    try:
        return tuple(_manifest_adapter.validate_python(data))
    except ValidationError as e:
        raise ManifestLoadError(f"Manifest {path} is invalid: {e}") from e
