"""Render reconciled records into report documents."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from report_aggregator.artifacts.correlator import correlate
from report_aggregator.artifacts.store import ArtifactStore
from report_aggregator.errors import DocumentWriteFailure, NothingToReportError
from report_aggregator.models.record import TestExecutionRecord
from report_aggregator.report.console import render_console_summary
from report_aggregator.report.html import render_html_report
from report_aggregator.report.retention import prune_reports
from report_aggregator.report.structured import build_structured_report
from report_aggregator.report.summary import ReportSummary, compute_summary

log = logging.getLogger(__name__)

REPORT_PREFIX = "test-report-"
RETENTION_CAP = 5


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def report_stem(prefix: str, generated_at: datetime) -> str:
    """Return a lexically sortable document stem for a generation time."""
    return f"{prefix}{generated_at.strftime('%Y-%m-%dT%H-%M-%S-%fZ')}"


@dataclass(frozen=True, kw_only=True)
class SynthesisOutput:
    """Documents produced by one synthesis."""

    html_path: Path
    json_path: Path
    console_summary: str
    summary: ReportSummary
    records: Sequence[TestExecutionRecord]


class ReportSynthesizer:
    """Produces one HTML and JSON document pair per run.

    Once a pair is written, further synthesize() calls return the same output
    until reset().
    """

    def __init__(
        self,
        reports_dir: Path,
        artifacts: ArtifactStore,
        retention_cap: int = RETENTION_CAP,
        prefix: str = REPORT_PREFIX,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if retention_cap < 1:
            raise ValueError(f"Retention cap must be positive, got {retention_cap}")
        self.reports_dir = reports_dir
        self.artifacts = artifacts
        self.retention_cap = retention_cap
        self.prefix = prefix
        self.clock = clock
        self._output: SynthesisOutput | None = None

    @property
    def output(self) -> SynthesisOutput | None:
        """Output generated during this run, if any."""
        return self._output

    def synthesize(
        self, records: Sequence[TestExecutionRecord], expected: int | None = None
    ) -> SynthesisOutput:
        """Correlate artifacts and write the report documents.

        Args:
            records: Reconciled records in report order
            expected: Manifest size, used for the mismatch note

        Returns:
            Paths of the written documents and the console summary

        Raises:
            NothingToReportError: If there are no records
            DocumentWriteFailure: If a document cannot be written

        """
        if self._output is not None:
            log.info("Report already generated for this run")
            return self._output

        if not records:
            raise NothingToReportError("No test results to generate a report from")

        available = self.artifacts.list_artifacts()
        correlated = [
            record.model_copy(update={"artifact_refs": correlate(record, available)})
            for record in records
        ]
        summary = compute_summary(correlated, total_artifacts=len(available))
        generated_at = self.clock()

        log.info("Generating report for %d test(s)", len(correlated))
        html = render_html_report(
            correlated, summary, self.artifacts, generated_at, expected
        )
        structured = build_structured_report(
            correlated, summary, generated_at, expected
        )

        stem = report_stem(self.prefix, generated_at)
        html_path = self.reports_dir / f"{stem}.html"
        json_path = self.reports_dir / f"{stem}.json"
        self._write(html_path, html)
        try:
            self._write(json_path, structured.model_dump_json(indent=2))
        except DocumentWriteFailure:
            html_path.unlink(missing_ok=True)
            raise

        prune_reports(self.reports_dir, self.prefix, keep=self.retention_cap)

        self._output = SynthesisOutput(
            html_path=html_path,
            json_path=json_path,
            console_summary=render_console_summary(correlated, summary, expected),
            summary=summary,
            records=correlated,
        )
        log.info("Reports generated: html=%s json=%s", html_path, json_path)
        return self._output

    def reset(self) -> None:
        """Allow the next synthesize() call to write a new pair."""
        self._output = None

    def _write(self, path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise DocumentWriteFailure(f"Failed to write report {path}: {e}") from e
