"""Aggregate counts over a reconciled, correlated record set."""

from collections.abc import Sequence
from dataclasses import dataclass

from report_aggregator.models.record import TestExecutionRecord


@dataclass(frozen=True, kw_only=True)
class ReportSummary:
    """Totals shown at the top of every report format."""

    total: int
    passed: int
    failed: int
    skipped: int
    success_rate: float
    total_artifacts: int
    used_artifacts: int


def compute_summary(
    records: Sequence[TestExecutionRecord], total_artifacts: int
) -> ReportSummary:
    """Count outcomes and artifact usage.

    The success rate is passed/total as a percentage rounded to one decimal,
    or 0.0 for an empty record set.
    """
    total = len(records)
    passed = sum(1 for r in records if r.status == "passed")
    failed = sum(1 for r in records if r.status == "failed")
    skipped = sum(1 for r in records if r.status == "skipped")

    return ReportSummary(
        total=total,
        passed=passed,
        failed=failed,
        skipped=skipped,
        success_rate=round(passed / total * 100, 1) if total else 0.0,
        total_artifacts=total_artifacts,
        used_artifacts=sum(len(r.artifact_refs) for r in records),
    )
