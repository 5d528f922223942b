"""Test factories for generating test data."""

from polyfactory import Use
from polyfactory.factories.pydantic_factory import ModelFactory

from report_aggregator.manifest import ManifestEntry
from report_aggregator.models.record import CompletionEvent, TestExecutionRecord


class CompletionEventFactory(ModelFactory[CompletionEvent]):
    """Factory for CompletionEvent."""

    runtime_environment = "chromium"
    error_message = None
    artifacts = Use(list[str])


class TestExecutionRecordFactory(ModelFactory[TestExecutionRecord]):
    """Factory for TestExecutionRecord."""

    __test__ = False

    runtime_environment = "chromium"
    status = "passed"
    error_message = None
    artifact_refs = Use(list[str])


class ManifestEntryFactory(ModelFactory[ManifestEntry]):
    """Factory for ManifestEntry."""
