"""Account registration and login."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass

import structlog

from ..exceptions import AppError, InvalidRequestError
from .accounts_models import Account, PlanTier
from .accounts_repository import AccountStore

logger = structlog.get_logger(__name__)

# Compared against when the email is unknown so both failure paths do the same work.
_UNKNOWN_ACCOUNT_HASH = "0" * 64


def hash_password(value: str) -> str:
    """Return hex sha256 hash for the provided password."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def normalize_email(value: str) -> str:
    return value.strip().lower()


class AccountError(AppError):
    """Base class for account failures."""


class DuplicateAccountError(AccountError):
    """Raised when registering an email that already exists."""


class InvalidCredentialsError(AccountError):
    """Raised when email/password mismatch."""


@dataclass(slots=True)
class AccountService:
    """Register and authenticate users against an injected store."""

    store: AccountStore

    def register(self, email: str, password: str) -> Account:
        normalized = normalize_email(email)
        if "@" not in normalized or not password:
            raise InvalidRequestError("A valid email and a non-empty password are required")

        record = Account(email=normalized, password_hash=hash_password(password))
        if not self.store.put_if_absent(normalized, record):
            logger.warning("accounts.register.duplicate", email=normalized)
            raise DuplicateAccountError(normalized)
        logger.info("accounts.register.success", email=normalized)
        return record

    def login(self, email: str, password: str) -> Account:
        normalized = normalize_email(email)
        account = self.store.get(normalized)
        expected = account.password_hash if account else _UNKNOWN_ACCOUNT_HASH
        matches = hmac.compare_digest(expected, hash_password(password))
        if account is None or not matches:
            logger.warning("accounts.login.failure", email=normalized)
            raise InvalidCredentialsError("Invalid email or password")
        logger.info("accounts.login.success", email=normalized)
        return account

    def change_plan(self, email: str, plan: PlanTier) -> Account | None:
        normalized = normalize_email(email)
        updated = self.store.set_plan(normalized, plan)
        if updated is None:
            logger.warning("accounts.plan.unknown_account", email=normalized, plan=plan.value)
        else:
            logger.info("accounts.plan.changed", email=normalized, plan=plan.value)
        return updated


__all__ = [
    "AccountError",
    "AccountService",
    "DuplicateAccountError",
    "InvalidCredentialsError",
    "hash_password",
    "normalize_email",
]
