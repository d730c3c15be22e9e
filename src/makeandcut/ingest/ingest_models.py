"""Data structures for the upload pipeline."""

from dataclasses import dataclass
from enum import StrEnum
from typing import BinaryIO


class PipelineState(StrEnum):
    """Per-request pipeline states; a request never moves backwards."""

    RECEIVED = "received"
    VALIDATED = "validated"
    STORED = "stored"
    COMPOSING = "composing"
    PARTIAL_OR_FULL_SUCCESS = "partial_or_full_success"
    ALL_FAILED = "all_failed"


@dataclass(slots=True)
class MediaAsset:
    """Validated upload held for the duration of one request."""

    filename: str
    content_type: str
    size_bytes: int
    sha256: str
    stream: BinaryIO

    def rewind(self) -> None:
        self.stream.seek(0)
