"""Data structures for user accounts."""

from dataclasses import dataclass
from enum import StrEnum


class PlanTier(StrEnum):
    FREE = "free"
    PRO = "pro"


@dataclass(frozen=True, slots=True)
class Account:
    """Registered user; ``password_hash`` is a sha256 hex digest."""

    email: str
    password_hash: str
    plan: PlanTier = PlanTier.FREE
    videos_processed: int = 0
