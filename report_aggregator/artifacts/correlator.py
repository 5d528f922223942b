"""Associate artifact files with the execution record they belong to."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from report_aggregator.models.record import TestExecutionRecord

UNORDERED = 999

# Tried in order; the first pattern that matches gives the capture position.
SEQUENCE_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(r"_(\d+)-"),
    re.compile(r"^(\d+)_"),
    re.compile(r"_(\d+)_"),
)


@dataclass(frozen=True, kw_only=True)
class ArtifactRecord:
    """An artifact filename with its inferred capture position."""

    filename: str
    sequence_number: int = UNORDERED

    @classmethod
    def from_filename(cls, filename: str) -> "ArtifactRecord":
        return cls(filename=filename, sequence_number=sequence_number(filename))


def sequence_number(filename: str) -> int:
    """Extract the capture position encoded in an artifact filename.

    Returns UNORDERED when no pattern matches.
    """
    for pattern in SEQUENCE_PATTERNS:
        if match := pattern.search(filename):
            return int(match.group(1))
    return UNORDERED


def order_artifacts(filenames: Iterable[str]) -> Sequence[str]:
    """Sort filenames by capture position, then lexically."""
    artifacts = sorted(
        (ArtifactRecord.from_filename(name) for name in filenames),
        key=lambda a: (a.sequence_number, a.filename),
    )
    return [a.filename for a in artifacts]


def correlate(
    record: TestExecutionRecord, available_artifacts: Iterable[str]
) -> Sequence[str]:
    """Return the artifacts belonging to a record, in capture order.

    An artifact belongs to a record when its filename contains the record's
    subject identity, ignoring case. No match yields an empty list.
    """
    subject = record.subject_identity.lower()
    return order_artifacts(
        name for name in available_artifacts if subject in name.lower()
    )
