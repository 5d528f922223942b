"""Tests for a complete report-generation run."""

import json
from pathlib import Path

import pytest

from report_aggregator.config import ReportConfig
from report_aggregator.manifest import ManifestEntry
from report_aggregator.pipeline import ReportRun

MANIFEST = (
    ManifestEntry(subject_identity="std", source_file="X", scenario_name="s1"),
    ManifestEntry(subject_identity="u2", source_file="X", scenario_name="s2"),
    ManifestEntry(subject_identity="ghost", source_file="X", scenario_name="s3"),
)


@pytest.fixture
def config(tmp_path: Path) -> ReportConfig:
    """Configuration rooted in a temporary results directory."""
    results = tmp_path / "test-results"
    screenshots = results / "screenshots"
    screenshots.mkdir(parents=True)
    for name in ("std_01-a.png", "std_02-b.png", "other_01-c.png"):
        (screenshots / name).write_bytes(b"png")
    return ReportConfig(results_dir=results)


def test_generate_reconciles_and_writes_reports(config: ReportConfig) -> None:
    """Duplicates are dropped, misses are omitted and artifacts correlated."""
    run = ReportRun.from_config(config, MANIFEST)
    run.store.ingest(
        {
            "source_file": "X",
            "subject_identity": "std",
            "scenario_name": "s1",
            "status": "passed",
            "duration_ms": 100,
        }
    )
    run.store.ingest(
        {
            "source_file": "X",
            "subject_identity": "std",
            "scenario_name": "s1",
            "status": "failed",
            "duration_ms": 999,
        }
    )
    run.store.ingest(
        {
            "source_file": "Y",
            "subject_identity": "u2",
            "scenario_name": "different",
            "status": "failed",
            "duration_ms": 50,
        }
    )

    report = run.generate()

    assert report.reconciliation.missing == [MANIFEST[2]]
    records = report.output.records
    assert [r.identity_key for r in records] == ["X::std::s1", "X::u2::s2"]
    assert records[0].status == "passed"
    assert records[0].artifact_refs == ["std_01-a.png", "std_02-b.png"]
    assert records[1].duration_ms == 50

    assert report.output.html_path.parent == config.results_dir / "reports"
    data = json.loads(report.output.json_path.read_text())
    assert data["summary"]["total_tests"] == 2
    assert data["summary"]["expected_tests"] == 3
    assert "Note: 2 results reported, 3 expected by manifest" in (
        report.output.console_summary
    )


def test_reset_starts_a_new_run(config: ReportConfig) -> None:
    """Reset clears the store and lets the next run write new documents."""
    run = ReportRun.from_config(config, MANIFEST)
    event = {
        "source_file": "X",
        "subject_identity": "std",
        "scenario_name": "s1",
        "status": "passed",
        "duration_ms": 100,
    }
    run.store.ingest(event)
    first = run.generate()

    run.reset()

    assert len(run.store) == 0
    assert run.synthesizer.output is None
    assert run.store.ingest(event) is True
    assert run.generate().output is not first.output


def test_config_defaults(tmp_path: Path) -> None:
    """Derived directories hang off the results directory."""
    config = ReportConfig(results_dir=tmp_path / "out")

    assert config.resolve_reports_dir() == tmp_path / "out" / "reports"
    assert config.resolve_logs_dir() == tmp_path / "out" / "logs"
    assert config.resolve_artifacts_dir() == tmp_path / "out" / "screenshots"
    assert config.retention_cap == 5
    assert config.cache_capacity == 100


def test_config_explicit_artifacts_dir(tmp_path: Path) -> None:
    """An explicit artifacts directory is used as is."""
    config = ReportConfig(artifacts_dir=tmp_path / "shots")

    assert config.resolve_artifacts_dir() == tmp_path / "shots"
