"""Self-contained HTML report with inline artifacts."""

import platform
from collections.abc import Sequence
from datetime import datetime
from html import escape

from report_aggregator.artifacts.store import ArtifactLoaded, ArtifactStore
from report_aggregator.models.record import TestExecutionRecord
from report_aggregator.report.summary import ReportSummary

STYLE = """
* { margin: 0; padding: 0; box-sizing: border-box; }
body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; background: #f4f5fb; }
.container { max-width: 1400px; margin: 0 auto; padding: 20px; }
.header { background: white; padding: 30px; border-radius: 15px; margin-bottom: 30px; text-align: center; }
.summary-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; margin-bottom: 30px; }
.summary-card { background: white; padding: 25px; border-radius: 12px; text-align: center; }
.summary-card .number { font-size: 2.2em; font-weight: bold; margin: 10px 0; }
.summary-card.total { border-top: 5px solid #3498db; }
.summary-card.passed { border-top: 5px solid #27ae60; }
.summary-card.failed { border-top: 5px solid #e74c3c; }
.summary-card.skipped { border-top: 5px solid #f39c12; }
.summary-card.rate { border-top: 5px solid #9b59b6; }
.note { background: #fff4d6; padding: 12px; border-radius: 8px; margin-bottom: 20px; }
.test-results { background: white; border-radius: 15px; padding: 30px; }
.test-card { border-left: 5px solid #ddd; margin-bottom: 20px; padding: 20px; background: #fafafa; border-radius: 8px; }
.test-card.passed { border-left-color: #27ae60; background: #f0fff4; }
.test-card.failed { border-left-color: #e74c3c; background: #fff0f0; }
.test-card.skipped { border-left-color: #f39c12; background: #fffbf0; }
.test-header { display: flex; justify-content: space-between; margin-bottom: 15px; }
.test-name { font-weight: bold; font-size: 1.2em; }
.test-status { padding: 6px 12px; border-radius: 20px; color: white; font-weight: bold; }
.status-passed { background: #27ae60; }
.status-failed { background: #e74c3c; }
.status-skipped { background: #f39c12; }
.error-message { background: #ffeaa7; padding: 12px; border-radius: 6px; margin-top: 10px; font-family: monospace; }
.artifacts { display: flex; flex-wrap: wrap; gap: 10px; margin-top: 15px; }
.artifact img { width: 240px; border: 1px solid #ccc; border-radius: 4px; }
.artifact figcaption { font-family: monospace; font-size: 0.8em; }
.artifact-missing { padding: 10px; background: #e9ecef; border: 1px dashed #999; font-family: monospace; font-size: 0.85em; }
"""


def render_artifact(filename: str, artifacts: ArtifactStore) -> str:
    """Render one artifact inline, or a placeholder if it cannot be read."""
    payload = artifacts.load(filename)
    name = escape(filename)
    if isinstance(payload, ArtifactLoaded):
        uri = f"data:image/png;base64,{payload.encoded}"
        return (
            f'<figure class="artifact"><a href="{uri}" target="_blank">'
            f'<img src="{uri}" alt="{name}"></a>'
            f"<figcaption>{name}</figcaption></figure>"
        )
    return f'<div class="artifact-missing">{name} ({escape(payload.reason)})</div>'


def render_record(record: TestExecutionRecord, artifacts: ArtifactStore) -> str:
    """Render the card of a single record."""
    status = escape(record.status)
    error = (
        f'<div class="error-message">{escape(record.error_message)}</div>'
        if record.error_message
        else ""
    )
    artifact_html = (
        '<div class="artifacts">'
        + "".join(render_artifact(name, artifacts) for name in record.artifact_refs)
        + "</div>"
        if record.artifact_refs
        else "<p>No artifacts captured.</p>"
    )

    return f"""
<div class="test-card {status}">
  <div class="test-header">
    <span class="test-name">{escape(record.scenario_name)}</span>
    <span class="test-status status-{status}">{status.upper()}</span>
  </div>
  <div class="test-details">
    <p><strong>User:</strong> {escape(record.subject_identity)} |
       <strong>Browser:</strong> {escape(record.runtime_environment)} |
       <strong>Duration:</strong> {record.duration_ms}ms</p>
    <p><strong>File:</strong> {escape(record.source_file)}</p>
    <p><strong>Timestamp:</strong> {record.timestamp.isoformat()}</p>
    {error}
    {artifact_html}
  </div>
</div>"""


def _summary_card(css_class: str, title: str, value: str) -> str:
    return (
        f'<div class="summary-card {css_class}"><h3>{title}</h3>'
        f'<div class="number">{value}</div></div>'
    )


def render_html_report(
    records: Sequence[TestExecutionRecord],
    summary: ReportSummary,
    artifacts: ArtifactStore,
    generated_at: datetime,
    expected: int | None = None,
) -> str:
    """Render the complete HTML document."""
    cards = "".join(
        [
            _summary_card("total", "Total Tests", str(summary.total)),
            _summary_card("passed", "Passed", str(summary.passed)),
            _summary_card("failed", "Failed", str(summary.failed)),
            _summary_card("skipped", "Skipped", str(summary.skipped)),
            _summary_card("rate", "Success Rate", f"{summary.success_rate:.1f}%"),
        ]
    )
    note = (
        f'<div class="note">{summary.total} results reported, '
        f"{expected} expected by manifest.</div>"
        if expected is not None and expected != summary.total
        else ""
    )
    results = "".join(render_record(record, artifacts) for record in records)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Test Execution Report</title>
<style>{STYLE}</style>
</head>
<body>
<div class="container">
  <div class="header">
    <h1>Test Execution Report</h1>
    <p>Generated on {generated_at.isoformat()}</p>
    <p>Python {escape(platform.python_version())} on {escape(platform.system())} |
       Artifacts: {summary.used_artifacts}/{summary.total_artifacts} used</p>
  </div>
  <div class="summary-grid">{cards}</div>
  {note}
  <div class="test-results">
    <h2>Detailed Test Results</h2>
    {results}
  </div>
</div>
</body>
</html>
"""
