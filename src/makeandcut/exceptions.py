"""Domain level exceptions shared by the pipeline and its collaborators."""

from __future__ import annotations

__all__ = [
    "AppError",
    "InvalidRequestError",
    "RemoteServiceError",
    "ClientDisconnectedError",
]


class AppError(Exception):
    """Base class for application specific errors."""


class InvalidRequestError(AppError):
    """Raised when request fields are missing or malformed."""


class RemoteServiceError(AppError):
    """Raised when a remote collaborator (store, billing) fails.

    ``message`` keeps the collaborator's own diagnostic so it can be surfaced
    to the caller unchanged.
    """

    service: str = "remote"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientDisconnectedError(AppError):
    """Raised when the client went away while a remote call was in flight."""
