"""Models for test completion events and stored execution records."""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Annotated, Literal

from pydantic import Field, StringConstraints

from report_aggregator.models.base import Model

Status = Literal["passed", "failed", "skipped"]

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

IDENTITY_SEPARATOR = "::"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CompletionEvent(Model):
    """Event delivered by the test harness when a scenario finishes.

    The artifact list is advisory: the correlator re-derives the
    authoritative association from the artifact directory.
    """

    subject_identity: NonEmptyStr = Field(
        ..., description="Persona the scenario exercised (e.g. standard_user)"
    )
    scenario_name: NonEmptyStr = Field(..., description="Human-readable scenario name")
    source_file: str | None = Field(
        default=None, description="Origin label; inferred when absent"
    )
    runtime_environment: str = Field(default="chromium", description="Browser engine")
    status: Status = Field(..., description="Outcome of the scenario")
    duration_ms: int = Field(..., ge=0, description="Wall-clock duration")
    timestamp: datetime = Field(default_factory=_utc_now)
    error_message: str | None = None
    artifacts: Sequence[str] = Field(
        default_factory=list, description="Artifact filenames reported by the harness"
    )
    items_added: int = Field(default=0, ge=0)
    items_removed: int = Field(default=0, ge=0)


class TestExecutionRecord(Model):
    """One completed test instance held by the aggregation store."""

    __test__ = False

    subject_identity: NonEmptyStr
    scenario_name: NonEmptyStr
    source_file: NonEmptyStr
    runtime_environment: str = "chromium"
    status: Status
    duration_ms: int = Field(..., ge=0)
    timestamp: datetime = Field(default_factory=_utc_now)
    error_message: str | None = None
    artifact_refs: Sequence[str] = Field(
        default_factory=list,
        description="Correlated artifact filenames in capture order",
    )
    items_added: int = 0
    items_removed: int = 0

    @property
    def identity(self) -> tuple[str, str, str]:
        """Return the (source, subject, scenario) identity tuple."""
        return (self.source_file, self.subject_identity, self.scenario_name)

    @property
    def identity_key(self) -> str:
        """Return the identity tuple joined for logs and reports.

        Not unique when a field itself contains the separator; compare
        ``identity`` instead.
        """
        return IDENTITY_SEPARATOR.join(self.identity)
