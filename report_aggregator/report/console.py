"""Condensed console summary grouped by source then subject."""

from collections.abc import Mapping, Sequence

from report_aggregator.models.record import TestExecutionRecord
from report_aggregator.report.summary import ReportSummary

STATUS_SYMBOLS: Mapping[str, str] = {
    "passed": "✅",
    "failed": "❌",
    "skipped": "⚠️",
}

RULE = "=" * 80


def group_records(
    records: Sequence[TestExecutionRecord],
) -> Mapping[str, Mapping[str, Sequence[TestExecutionRecord]]]:
    """Group records by source file, then subject, both sorted."""
    grouped: dict[str, dict[str, list[TestExecutionRecord]]] = {}
    for record in records:
        by_subject = grouped.setdefault(record.source_file, {})
        by_subject.setdefault(record.subject_identity, []).append(record)

    return {
        source: {subject: by_subject[subject] for subject in sorted(by_subject)}
        for source, by_subject in sorted(grouped.items())
    }


def render_console_summary(
    records: Sequence[TestExecutionRecord],
    summary: ReportSummary,
    expected: int | None = None,
) -> str:
    """Render the console summary as a single string."""
    lines = [RULE, "TEST EXECUTION SUMMARY", RULE]

    for source, by_subject in group_records(records).items():
        lines.append(f"📁 {source}")
        for subject, subject_records in by_subject.items():
            lines.append(f"  👤 {subject}")
            for record in subject_records:
                symbol = STATUS_SYMBOLS.get(record.status, "?")
                lines.append(
                    f"    {symbol} {record.scenario_name}: "
                    f"{record.status} ({record.duration_ms}ms, "
                    f"{len(record.artifact_refs)} artifacts)"
                )
                if record.error_message:
                    lines.append(f"       Message: {record.error_message}")

    lines.extend(
        [
            RULE,
            f"Total: {summary.total} | Passed: {summary.passed} | "
            f"Failed: {summary.failed} | Skipped: {summary.skipped}",
            f"Success Rate: {summary.success_rate:.1f}%",
            f"Artifacts: {summary.used_artifacts}/{summary.total_artifacts} used",
        ]
    )
    if expected is not None and summary.total != expected:
        lines.append(
            f"Note: {summary.total} results reported, {expected} expected by manifest"
        )
    lines.append(RULE)
    return "\n".join(lines)
