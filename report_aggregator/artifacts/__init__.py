"""Artifact discovery, loading and correlation."""

from report_aggregator.artifacts.cache import BoundedCache
from report_aggregator.artifacts.correlator import UNORDERED, correlate, sequence_number
from report_aggregator.artifacts.store import (
    ArtifactLoaded,
    ArtifactPayload,
    ArtifactStore,
    ArtifactUnavailable,
    find_artifact_dir,
)

__all__ = [
    "UNORDERED",
    "ArtifactLoaded",
    "ArtifactPayload",
    "ArtifactStore",
    "ArtifactUnavailable",
    "BoundedCache",
    "correlate",
    "find_artifact_dir",
    "sequence_number",
]
