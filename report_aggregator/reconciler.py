"""Reconcile ingested records against the canonical manifest."""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from report_aggregator.manifest import CanonicalManifest, ManifestEntry
from report_aggregator.models.record import TestExecutionRecord

log = logging.getLogger(__name__)

type MatchPredicate = Callable[[ManifestEntry, TestExecutionRecord], bool]
type Rewrite = Callable[[ManifestEntry, TestExecutionRecord], TestExecutionRecord]


def _keep(entry: ManifestEntry, record: TestExecutionRecord) -> TestExecutionRecord:
    return record


def _rewrite_scenario(
    entry: ManifestEntry, record: TestExecutionRecord
) -> TestExecutionRecord:
    return record.model_copy(update={"scenario_name": entry.scenario_name})


def _rewrite_source_and_scenario(
    entry: ManifestEntry, record: TestExecutionRecord
) -> TestExecutionRecord:
    return record.model_copy(
        update={
            "source_file": entry.source_file,
            "scenario_name": entry.scenario_name,
        }
    )


@dataclass(frozen=True, kw_only=True)
class MatchTier:
    """One step of the cascading match strategy."""

    name: str
    matches: MatchPredicate
    rewrite: Rewrite = _keep

    def find(
        self, entry: ManifestEntry, candidates: Sequence[TestExecutionRecord]
    ) -> TestExecutionRecord | None:
        """Return the first candidate this tier accepts for the entry."""
        return next((r for r in candidates if self.matches(entry, r)), None)


MATCH_TIERS: Sequence[MatchTier] = (
    MatchTier(
        name="exact",
        matches=lambda e, r: (
            r.source_file == e.source_file
            and r.subject_identity == e.subject_identity
            and r.scenario_name == e.scenario_name
        ),
    ),
    MatchTier(
        name="subject_and_scenario",
        matches=lambda e, r: (
            r.subject_identity == e.subject_identity
            and r.scenario_name == e.scenario_name
        ),
    ),
    MatchTier(
        name="subject_and_source",
        matches=lambda e, r: (
            r.subject_identity == e.subject_identity
            and r.source_file == e.source_file
        ),
        rewrite=_rewrite_scenario,
    ),
    MatchTier(
        name="subject_only",
        matches=lambda e, r: r.subject_identity == e.subject_identity,
        rewrite=_rewrite_source_and_scenario,
    ),
)


@dataclass(frozen=True, kw_only=True)
class ReconciliationResult:
    """Outcome of reconciling stored records with a manifest."""

    records: Sequence[TestExecutionRecord]
    missing: Sequence[ManifestEntry]
    unclaimed: Sequence[TestExecutionRecord]
    tier_counts: Mapping[str, int]
    expected: int

    @property
    def is_complete(self) -> bool:
        """Whether every manifest entry was resolved."""
        return len(self.records) == self.expected


def reconcile(
    records: Sequence[TestExecutionRecord],
    manifest: CanonicalManifest,
    tiers: Sequence[MatchTier] = MATCH_TIERS,
) -> ReconciliationResult:
    """Resolve each manifest entry to at most one stored record.

    Tiers run most specific first; within a tier, unresolved entries are
    tried in manifest order. A stored record satisfies at most one entry, so
    a loose match for one entry never takes a record that another entry
    matches more specifically. Entries without a match are omitted rather
    than fabricated.

    Args:
        records: Stored records of the current run
        manifest: Expected scenarios in report order
        tiers: Cascading match strategy

    Returns:
        Reconciled records in manifest order plus what could not be matched

    """
    claimed: set[tuple[str, str, str]] = set()
    resolved: dict[int, TestExecutionRecord] = {}
    tier_counts = {tier.name: 0 for tier in tiers}

    for tier in tiers:
        for index, entry in enumerate(manifest):
            if index in resolved:
                continue

            candidates = [r for r in records if r.identity not in claimed]
            match = tier.find(entry, candidates)
            if match is None:
                continue

            claimed.add(match.identity)
            tier_counts[tier.name] += 1
            resolved[index] = tier.rewrite(entry, match)
            if resolved[index] is not match:
                log.info(
                    "Matched %s via %s, rewritten from %s",
                    resolved[index].identity_key,
                    tier.name,
                    match.identity_key,
                )
            else:
                log.debug("Matched %s via %s", match.identity_key, tier.name)

    final: list[TestExecutionRecord] = []
    missing: list[ManifestEntry] = []
    for index, entry in enumerate(manifest):
        if index in resolved:
            final.append(resolved[index])
            continue
        log.warning(
            "No result for expected scenario: %s / %s / %s",
            entry.source_file,
            entry.subject_identity,
            entry.scenario_name,
        )
        missing.append(entry)

    unclaimed = [r for r in records if r.identity not in claimed]
    for record in unclaimed:
        log.info("Result not in manifest: %s", record.identity_key)

    if missing:
        log.warning(
            "Reconciled %d of %d expected scenarios (%d missing)",
            len(final),
            len(manifest),
            len(missing),
        )

    return ReconciliationResult(
        records=final,
        missing=missing,
        unclaimed=unclaimed,
        tier_counts=tier_counts,
        expected=len(manifest),
    )
