"""Errors raised by the aggregation pipeline."""


class RecordValidationError(ValueError):
    """Raised when a completion event is malformed.

    Fatal to a single ingest call only.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Invalid completion event field '{field}': {message}")
        self.field = field


class ManifestLoadError(ValueError):
    """Raised when a manifest file cannot be parsed."""


class NothingToReportError(RuntimeError):
    """Raised when synthesis is requested with no records."""


class DocumentWriteFailure(OSError):
    """Raised when a rendered document cannot be written to disk."""
