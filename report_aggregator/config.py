"""Configuration for report generation."""

from pathlib import Path

from pydantic import BaseModel, Field

from report_aggregator.artifacts.store import find_artifact_dir


class ReportConfig(BaseModel):
    """Configuration for a report-generation run."""

    results_dir: Path = Path("test-results")
    # Discovered around results_dir when unset
    artifacts_dir: Path | None = None
    reports_dir: Path | None = None
    logs_dir: Path | None = None
    retention_cap: int = Field(default=5, ge=1)
    cache_capacity: int = Field(default=100, ge=1)
    report_prefix: str = Field(default="test-report-", min_length=1)

    def resolve_artifacts_dir(self) -> Path:
        """Return the configured artifacts directory or discover one."""
        return self.artifacts_dir or find_artifact_dir(self.results_dir)

    def resolve_reports_dir(self) -> Path:
        return self.reports_dir or self.results_dir / "reports"

    def resolve_logs_dir(self) -> Path:
        return self.logs_dir or self.results_dir / "logs"
