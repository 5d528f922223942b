"""Retention housekeeping for generated report documents."""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

log = logging.getLogger(__name__)

REPORT_SUFFIXES = (".html", ".json")


def list_report_pairs(reports_dir: Path, prefix: str) -> Mapping[str, Sequence[Path]]:
    """Return generated documents grouped by stem, oldest stem first.

    Stems carry a sortable timestamp, so lexical order is generation order.
    """
    if not reports_dir.is_dir():
        return {}

    pairs: dict[str, list[Path]] = {}
    for path in reports_dir.iterdir():
        if path.name.startswith(prefix) and path.suffix in REPORT_SUFFIXES:
            pairs.setdefault(path.stem, []).append(path)

    return {stem: sorted(pairs[stem]) for stem in sorted(pairs)}


def prune_reports(reports_dir: Path, prefix: str, keep: int) -> Sequence[Path]:
    """Delete the oldest report pairs so that at most ``keep`` remain.

    Returns:
        Paths that were deleted

    """
    pairs = list_report_pairs(reports_dir, prefix)
    excess = len(pairs) - max(keep, 0)
    if excess <= 0:
        return []

    deleted: list[Path] = []
    for stem in list(pairs)[:excess]:
        for path in pairs[stem]:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                log.warning("Could not delete old report %s: %s", path, e)
                continue
            log.info("Deleted old report: %s", path.name)
            deleted.append(path)

    log.info("Cleaned up %d old report file(s)", len(deleted))
    return deleted
