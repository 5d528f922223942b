"""A single report-generation run over ingested completion events."""

import logging
from dataclasses import dataclass

from report_aggregator.artifacts.store import ArtifactStore
from report_aggregator.config import ReportConfig
from report_aggregator.ingestion import AggregationStore
from report_aggregator.manifest import DEFAULT_MANIFEST, CanonicalManifest
from report_aggregator.reconciler import ReconciliationResult, reconcile
from report_aggregator.report.synthesizer import ReportSynthesizer, SynthesisOutput

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class RunReport:
    """Reconciliation outcome together with the synthesized documents."""

    reconciliation: ReconciliationResult
    output: SynthesisOutput


@dataclass(frozen=True, kw_only=True)
class ReportRun:
    """Wires ingestion, reconciliation and synthesis for one run."""

    store: AggregationStore
    manifest: CanonicalManifest
    artifacts: ArtifactStore
    synthesizer: ReportSynthesizer

    @classmethod
    def from_config(
        cls,
        config: ReportConfig,
        manifest: CanonicalManifest = DEFAULT_MANIFEST,
    ) -> "ReportRun":
        """Create a run with collaborators built from configuration."""
        artifacts = ArtifactStore(
            config.resolve_artifacts_dir(),
            cache_capacity=config.cache_capacity,
        )
        return cls(
            store=AggregationStore(),
            manifest=manifest,
            artifacts=artifacts,
            synthesizer=ReportSynthesizer(
                config.resolve_reports_dir(),
                artifacts,
                retention_cap=config.retention_cap,
                prefix=config.report_prefix,
            ),
        )

    def generate(self) -> RunReport:
        """Reconcile stored records and synthesize the report documents."""
        records = self.store.records()
        stats = self.store.stats
        log.info(
            "Generating reports from %d result(s) "
            "(duplicates rejected=%d, invalid rejected=%d)",
            len(records),
            stats.duplicates_rejected,
            stats.invalid_rejected,
        )

        reconciliation = reconcile(records, self.manifest)
        output = self.synthesizer.synthesize(
            reconciliation.records, expected=reconciliation.expected
        )
        return RunReport(reconciliation=reconciliation, output=output)

    def reset(self) -> None:
        """Start a new run: clear records, artifact caches and the report guard."""
        self.store.reset()
        self.artifacts.reset()
        self.synthesizer.reset()
