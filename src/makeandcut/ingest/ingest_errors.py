"""Domain-specific exceptions for the ingest layer."""

from ..exceptions import AppError


class IngestError(AppError):
    """Base class for ingest-related errors."""


class MissingFileError(IngestError):
    """Raised when the request carries no (or an empty) video file."""


class PayloadTooLargeError(IngestError):
    """Raised when uploaded file exceeds the configured ceiling."""

    def __init__(self, limit_bytes: int, size_bytes: int | None = None) -> None:
        super().__init__(f"Upload exceeds the {limit_bytes} byte limit")
        self.limit_bytes = limit_bytes
        self.size_bytes = size_bytes


class UploadReadError(IngestError):
    """Raised when streaming the upload fails."""
