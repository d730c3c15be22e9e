"""Domain-specific exceptions for cut composition."""

from collections.abc import Sequence

from ..exceptions import AppError


class CutError(AppError):
    """Base class for cut-related errors."""

    reason_code = "CutError"


class InvalidCutRangeError(CutError):
    """Raised when a cut cannot produce a meaningful derived asset."""

    reason_code = "InvalidCutRange"


class AllCutsFailedError(CutError):
    """Raised when no cut of a multi-cut request succeeded."""

    def __init__(self, reasons: Sequence[str]) -> None:
        super().__init__(f"All {len(reasons)} cuts failed")
        self.reasons = list(reasons)
