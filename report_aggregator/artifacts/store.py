"""Discover and load screenshot artifacts from a directory."""

import base64
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from report_aggregator.artifacts.cache import BoundedCache

log = logging.getLogger(__name__)

ARTIFACT_SUFFIX = ".png"

@dataclass(frozen=True, kw_only=True)
class ArtifactLoaded:
    """Artifact content, base64 encoded."""

    filename: str
    encoded: str


@dataclass(frozen=True, kw_only=True)
class ArtifactUnavailable:
    """An artifact that could not be read."""

    filename: str
    reason: str


type ArtifactPayload = ArtifactLoaded | ArtifactUnavailable


def _has_artifacts(directory: Path) -> bool:
    try:
        return any(
            p.suffix.lower() == ARTIFACT_SUFFIX for p in directory.iterdir()
        )
    except OSError:
        return False


def candidate_dirs(results_dir: Path) -> Sequence[Path]:
    """Directories searched for artifacts, most specific first."""
    return (
        results_dir / "screenshots",
        results_dir.parent / "screenshots",
        results_dir,
    )


def find_artifact_dir(results_dir: Path) -> Path:
    """Pick the first candidate directory that holds artifacts.

    Falls back to ``<results_dir>/screenshots`` when none does.
    """
    candidates = candidate_dirs(results_dir)
    for directory in candidates:
        if directory.is_dir() and _has_artifacts(directory):
            log.info("Using artifacts directory: %s", directory)
            return directory
    return candidates[0]


class ArtifactStore:
    """Read-only view of an artifact directory for one synthesis pass.

    The file listing and loaded payloads are cached until reset().
    """

    def __init__(self, directory: Path, cache_capacity: int = 100) -> None:
        self.directory = directory
        self._listing: Sequence[str] | None = None
        self._payloads: BoundedCache[str, ArtifactPayload] = BoundedCache(
            cache_capacity
        )

    def list_artifacts(self) -> Sequence[str]:
        """Return artifact filenames in the directory, sorted."""
        if self._listing is not None:
            return self._listing

        if not self.directory.is_dir():
            log.warning("Artifacts directory not found: %s", self.directory)
            return []

        try:
            listing = sorted(
                p.name
                for p in self.directory.iterdir()
                if p.is_file() and p.suffix.lower() == ARTIFACT_SUFFIX
            )
        except OSError as e:
            log.error("Error reading artifacts directory %s: %s", self.directory, e)
            return []

        log.info("Found %d artifacts in %s", len(listing), self.directory)
        self._listing = listing
        return listing

    def load(self, filename: str) -> ArtifactPayload:
        """Return an artifact's base64 payload, or why it is unavailable."""
        if (cached := self._payloads.get(filename)) is not None:
            return cached

        path = self.directory / filename
        payload: ArtifactPayload
        try:
            payload = ArtifactLoaded(
                filename=filename,
                encoded=base64.b64encode(path.read_bytes()).decode("ascii"),
            )
        except FileNotFoundError:
            log.warning("Artifact not found: %s", path)
            payload = ArtifactUnavailable(filename=filename, reason="not found")
        except OSError as e:
            log.error("Failed to read artifact %s: %s", path, e)
            payload = ArtifactUnavailable(filename=filename, reason=f"failed: {e}")

        self._payloads.put(filename, payload)
        return payload

    def reset(self) -> None:
        """Forget the cached listing and payloads."""
        self._listing = None
        self._payloads.clear()
