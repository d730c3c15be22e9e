"""Account storage interface and its in-process implementation."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Protocol

from .accounts_models import Account, PlanTier


class AccountStore(Protocol):
    """Persistence operations for accounts, keyed by normalised email."""

    def get(self, email: str) -> Account | None:
        """Return the account registered under ``email``."""

    def put_if_absent(self, email: str, record: Account) -> bool:
        """Store ``record`` unless ``email`` is taken; return whether it was stored."""

    def set_plan(self, email: str, plan: PlanTier) -> Account | None:
        """Change the plan tier of an existing account."""


class InMemoryAccountStore:
    """Process-wide account map; empty at startup, discarded on restart."""

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._lock = threading.Lock()

    def get(self, email: str) -> Account | None:
        with self._lock:
            return self._accounts.get(email)

    def put_if_absent(self, email: str, record: Account) -> bool:
        with self._lock:
            if email in self._accounts:
                return False
            self._accounts[email] = record
            return True

    def set_plan(self, email: str, plan: PlanTier) -> Account | None:
        with self._lock:
            current = self._accounts.get(email)
            if current is None:
                return None
            updated = replace(current, plan=plan)
            self._accounts[email] = updated
            return updated

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
