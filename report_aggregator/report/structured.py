"""Machine-readable report document."""

from collections.abc import Sequence
from datetime import datetime

from pydantic import Field

from report_aggregator.models.base import Model
from report_aggregator.models.record import Status, TestExecutionRecord
from report_aggregator.report.summary import ReportSummary


class StructuredSummary(Model):
    """Summary block of the structured report."""

    total_tests: int
    passed: int
    failed: int
    skipped: int
    success_rate: float
    expected_tests: int | None = None
    total_artifacts: int
    used_artifacts: int


class StructuredResult(Model):
    """One record of the structured report; artifacts are counted, not embedded."""

    identity_key: str
    subject_identity: str
    scenario_name: str
    source_file: str
    runtime_environment: str
    status: Status
    duration_ms: int
    timestamp: datetime
    error_message: str | None = None
    artifact_count: int
    items_added: int = 0
    items_removed: int = 0


class StructuredReport(Model):
    """Complete structured report written next to the HTML document."""

    generated_at: datetime
    summary: StructuredSummary
    results: Sequence[StructuredResult] = Field(default_factory=list)


def build_structured_report(
    records: Sequence[TestExecutionRecord],
    summary: ReportSummary,
    generated_at: datetime,
    expected: int | None = None,
) -> StructuredReport:
    """Build the structured report for a reconciled record set."""
    return StructuredReport(
        generated_at=generated_at,
        summary=StructuredSummary(
            total_tests=summary.total,
            passed=summary.passed,
            failed=summary.failed,
            skipped=summary.skipped,
            success_rate=summary.success_rate,
            expected_tests=expected,
            total_artifacts=summary.total_artifacts,
            used_artifacts=summary.used_artifacts,
        ),
        results=[
            StructuredResult(
                identity_key=r.identity_key,
                subject_identity=r.subject_identity,
                scenario_name=r.scenario_name,
                source_file=r.source_file,
                runtime_environment=r.runtime_environment,
                status=r.status,
                duration_ms=r.duration_ms,
                timestamp=r.timestamp,
                error_message=r.error_message,
                artifact_count=len(r.artifact_refs),
                items_added=r.items_added,
                items_removed=r.items_removed,
            )
            for r in records
        ],
    )
