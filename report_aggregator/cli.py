"""CLI entry point for aggregating test completion events into a report."""

import argparse
import json
import logging
import sys
from collections.abc import Iterable, Mapping
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from report_aggregator.config import ReportConfig
from report_aggregator.errors import NothingToReportError, RecordValidationError
from report_aggregator.ingestion import AggregationStore, load_events
from report_aggregator.manifest import DEFAULT_MANIFEST, load_manifest
from report_aggregator.pipeline import ReportRun, RunReport

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def configure_logging(logs_dir: Path | None = None) -> None:
    """Log to stderr and, when a directory is given, to rotating files."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stderr)
    if logs_dir is None:
        return

    logs_dir.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()
    for filename, level in (
        ("report-execution.log", logging.INFO),
        ("errors.log", logging.ERROR),
    ):
        handler = RotatingFileHandler(
            logs_dir / filename,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def ingest_events(
    log: logging.Logger,
    store: AggregationStore,
    events: Iterable[Mapping[str, Any]],
) -> int:
    """Ingest events, skipping malformed ones, and return how many were stored."""
    accepted = 0
    for event in events:
        try:
            if store.ingest(event):
                accepted += 1
        except RecordValidationError as e:
            log.error("Skipping invalid completion event: %s", e)
    return accepted


def format_output(report: RunReport) -> dict[str, Any]:
    """Format the run outcome for JSON output."""
    summary = report.output.summary
    return {
        "html_report": str(report.output.html_path),
        "json_report": str(report.output.json_path),
        "total": summary.total,
        "expected": report.reconciliation.expected,
        "passed": summary.passed,
        "failed": summary.failed,
        "skipped": summary.skipped,
        "success_rate": summary.success_rate,
        "missing": [
            {
                "subject_identity": entry.subject_identity,
                "source_file": entry.source_file,
                "scenario_name": entry.scenario_name,
            }
            for entry in report.reconciliation.missing
        ],
    }


def run(
    events_path: Path,
    config: ReportConfig,
    manifest_path: Path | None = None,
) -> int:
    """Aggregate events into a report and return the exit code."""
    log = logging.getLogger("report_aggregator")

    manifest = load_manifest(manifest_path) if manifest_path else DEFAULT_MANIFEST
    log.info("Loaded manifest with %d expected scenario(s)", len(manifest))

    report_run = ReportRun.from_config(config, manifest)

    log.info("Loading completion events from %s", events_path)
    accepted = ingest_events(log, report_run.store, load_events(events_path))
    log.info("Ingested %d unique result(s)", accepted)

    try:
        report = report_run.generate()
    except NothingToReportError as e:
        log.warning("%s", e)
        print(json.dumps({"total": 0, "results": []}))
        return 2

    print(report.output.console_summary)
    print(json.dumps(format_output(report), indent=2))

    return 1 if report.output.summary.failed else 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Aggregate test completion events into HTML and JSON reports"
    )
    parser.add_argument(
        "--events",
        type=Path,
        required=True,
        help="JSON Lines file with one completion event per line",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="JSON manifest of expected scenarios (defaults to the built-in one)",
    )
    parser.add_argument(
        "--config",
        default="{}",
        help="JSON configuration for report generation",
    )
    parser.add_argument(
        "--results-dir",
        type=Path,
        default=None,
        help="Test results directory (overrides results_dir in --config)",
    )

    args = parser.parse_args()

    config_dict = json.loads(args.config)
    if args.results_dir is not None:
        config_dict["results_dir"] = str(args.results_dir)
    config = ReportConfig(**config_dict)

    configure_logging(config.resolve_logs_dir())

    sys.exit(run(args.events, config, args.manifest))


if __name__ == "__main__":  # pragma: no cover
    main()
