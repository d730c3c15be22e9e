"""Data structures for time-range cuts."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CutSpec:
    """One requested time-range extraction, offsets in seconds."""

    start: float
    end: float
    name: str | None = None


@dataclass(frozen=True, slots=True)
class CutResult:
    """Outcome of composing one cut; exactly one of url/reason is set."""

    success: bool
    name: str
    duration: float
    url: str | None = None
    reason: str | None = None
    details: str | None = None

    @classmethod
    def succeeded(cls, *, name: str, duration: float, url: str) -> "CutResult":
        return cls(success=True, name=name, duration=duration, url=url)

    @classmethod
    def failed(
        cls, *, name: str, duration: float, reason: str, details: str | None = None
    ) -> "CutResult":
        return cls(
            success=False, name=name, duration=duration, reason=reason, details=details
        )
