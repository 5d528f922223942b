"""Ingestion and deduplication of test completion events."""

import json
import logging
import threading
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from report_aggregator.errors import RecordValidationError
from report_aggregator.models.record import CompletionEvent, Status, TestExecutionRecord
from report_aggregator.origin import classify_origin

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class IngestionStats:
    """Counters that explain how many events made it into the store."""

    accepted: int = 0
    duplicates_rejected: int = 0
    invalid_rejected: int = 0


def validate_event(event: CompletionEvent | Mapping[str, Any]) -> CompletionEvent:
    """Validate raw event data, naming the first offending field on failure."""
    if isinstance(event, CompletionEvent):
        return event

    try:
        return CompletionEvent.model_validate(event)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise RecordValidationError(field, first["msg"]) from e


def to_record(event: CompletionEvent) -> TestExecutionRecord:
    """Build a stored record from an event, inferring its origin if needed."""
    source_file = event.source_file
    if not source_file:
        classification = classify_origin(event.scenario_name, event.artifacts)
        source_file = classification.origin
        log.debug(
            "Inferred origin %s for scenario '%s' (%s)",
            source_file,
            event.scenario_name,
            type(classification).__name__,
        )

    return TestExecutionRecord(
        subject_identity=event.subject_identity,
        scenario_name=event.scenario_name,
        source_file=source_file,
        runtime_environment=event.runtime_environment,
        status=event.status,
        duration_ms=event.duration_ms,
        timestamp=event.timestamp,
        error_message=event.error_message,
        items_added=event.items_added,
        items_removed=event.items_removed,
    )


class AggregationStore:
    """Records of one report-generation run, keyed by identity tuple.

    Safe to share between threads: the duplicate check and the insert happen
    under a single lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[tuple[str, str, str], TestExecutionRecord] = {}
        self._stats = IngestionStats()

    def ingest(self, event: CompletionEvent | Mapping[str, Any]) -> bool:
        """Store a completion event unless its identity is already stored.

        Returns:
            True if the event was stored, False if it duplicated an earlier one

        Raises:
            RecordValidationError: If the event is malformed

        """
        try:
            record = to_record(validate_event(event))
        except RecordValidationError:
            with self._lock:
                self._stats = self._bump(invalid_rejected=1)
            raise

        key = record.identity_key
        with self._lock:
            existing = self._records.get(record.identity)
            if existing is None:
                self._records[record.identity] = record
                self._stats = self._bump(accepted=1)
            else:
                self._stats = self._bump(duplicates_rejected=1)

        if existing is not None:
            log.info(
                "Rejected duplicate result for %s (kept status=%s duration=%dms)",
                key,
                existing.status,
                existing.duration_ms,
            )
            return False

        log.info(
            "Test result added: %s - %s (%s, %dms)",
            record.subject_identity,
            record.scenario_name,
            record.status,
            record.duration_ms,
        )
        return True

    def records(self, status: Status | None = None) -> Sequence[TestExecutionRecord]:
        """Return a snapshot of stored records in insertion order."""
        with self._lock:
            snapshot = list(self._records.values())
        if status is None:
            return snapshot
        return [record for record in snapshot if record.status == status]

    def get(self, identity: tuple[str, str, str]) -> TestExecutionRecord | None:
        """Return the record stored under a (source, subject, scenario) identity."""
        with self._lock:
            return self._records.get(identity)

    @property
    def stats(self) -> IngestionStats:
        """Ingestion counters since the last reset."""
        return self._stats

    def reset(self) -> None:
        """Discard all records and counters."""
        with self._lock:
            previous = len(self._records)
            self._records = {}
            self._stats = IngestionStats()
        log.info("Aggregation store reset (cleared %d results)", previous)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _bump(
        self, accepted: int = 0, duplicates_rejected: int = 0, invalid_rejected: int = 0
    ) -> IngestionStats:
        return IngestionStats(
            accepted=self._stats.accepted + accepted,
            duplicates_rejected=self._stats.duplicates_rejected + duplicates_rejected,
            invalid_rejected=self._stats.invalid_rejected + invalid_rejected,
        )


def load_events(path: Path) -> Iterator[dict[str, Any]]:
    """Stream raw completion events from a JSON Lines file.

    Blank lines are skipped. Lines that are not a JSON object, such as a
    record truncated by a worker that died mid-write, are logged and skipped
    so the remaining events still reach the store.
    """
    with path.open(encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                log.error(
                    "Skipping undecodable event at %s:%d: %s", path, line_number, e
                )
                continue
            if not isinstance(data, dict):
                log.error(
                    "Skipping event at %s:%d: expected a JSON object", path, line_number
                )
                continue
            yield data
