"""Tests for the HTML report."""

import base64
from datetime import datetime, timezone
from pathlib import Path

from report_aggregator.artifacts.store import ArtifactStore
from report_aggregator.report.html import render_html_report, render_record
from report_aggregator.report.summary import compute_summary
from report_aggregator.testing.factories import TestExecutionRecordFactory

GENERATED_AT = datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_embeds_artifacts_inline(tmp_path: Path) -> None:
    """Readable artifacts are embedded as clickable data URIs."""
    (tmp_path / "u1_1-a.png").write_bytes(b"png")
    record = TestExecutionRecordFactory.build(artifact_refs=["u1_1-a.png"])

    html = render_record(record, ArtifactStore(tmp_path))

    encoded = base64.b64encode(b"png").decode("ascii")
    assert f'<a href="data:image/png;base64,{encoded}" target="_blank">' in html
    assert "<figcaption>u1_1-a.png</figcaption>" in html


def test_missing_artifact_renders_placeholder(tmp_path: Path) -> None:
    """Unreadable artifacts show a placeholder instead of failing."""
    record = TestExecutionRecordFactory.build(artifact_refs=["gone.png"])

    html = render_record(record, ArtifactStore(tmp_path))

    assert '<div class="artifact-missing">gone.png (not found)</div>' in html


def test_escapes_user_text(tmp_path: Path) -> None:
    """Scenario names and error messages are HTML-escaped."""
    record = TestExecutionRecordFactory.build(
        scenario_name="<script>alert(1)</script>",
        status="failed",
        error_message='expected "a" & got <b>',
    )

    html = render_record(record, ArtifactStore(tmp_path))

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "expected &quot;a&quot; &amp; got &lt;b&gt;" in html


def test_document_contains_summary_and_note(tmp_path: Path) -> None:
    """The document shows summary cards and the mismatch note."""
    records = [TestExecutionRecordFactory.build(status="passed")]
    summary = compute_summary(records, total_artifacts=0)

    html = render_html_report(
        records, summary, ArtifactStore(tmp_path), GENERATED_AT, expected=2
    )

    assert html.startswith("<!DOCTYPE html>")
    assert '<div class="number">100.0%</div>' in html
    assert "1 results reported, 2 expected by manifest." in html
