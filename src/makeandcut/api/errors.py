"""Reusable error primitives for API exception handling.

Every error response shares one body shape::

    {"error": str, "details"?: str, "maxSize"?: str}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..accounts.accounts_service import DuplicateAccountError, InvalidCredentialsError
from ..billing.billing_client import WebhookSignatureError
from ..cuts.cut_errors import AllCutsFailedError, InvalidCutRangeError
from ..exceptions import (
    AppError,
    ClientDisconnectedError,
    InvalidRequestError,
    RemoteServiceError,
)
from ..ingest.ingest_errors import MissingFileError, PayloadTooLargeError, UploadReadError

logger = logging.getLogger(__name__)

HTTP_499_CLIENT_CLOSED_REQUEST = 499

REMOTE_SERVICE_LABELS = {
    "store": "Remote store request failed",
    "billing": "Billing service request failed",
}


@dataclass(slots=True)
class ApiError:
    """HTTP rendering of a failed request: status code plus error body."""

    status_code: int
    error: str
    details: str | None = None
    max_size: str | None = None
    headers: Mapping[str, str] | None = None

    def to_response(self) -> JSONResponse:
        """Materialise the error into a ``JSONResponse`` instance."""

        content: dict[str, str] = {"error": self.error}
        if self.details is not None:
            content["details"] = self.details
        if self.max_size is not None:
            content["maxSize"] = self.max_size
        return JSONResponse(
            status_code=self.status_code,
            content=content,
            headers=dict(self.headers or {}),
        )


def format_size(size_bytes: int) -> str:
    """Render a byte ceiling the way it is configured (``100MB``)."""
    mib = 1024 * 1024
    if size_bytes % mib == 0:
        return f"{size_bytes // mib}MB"
    return f"{size_bytes / mib:.1f}MB"


def to_api_error(exc: AppError) -> ApiError:
    """Map a domain exception onto its HTTP representation."""

    if isinstance(exc, PayloadTooLargeError):
        limit = format_size(exc.limit_bytes)
        return ApiError(
            status.HTTP_400_BAD_REQUEST,
            "File too large",
            details=f"Maximum upload size is {limit}",
            max_size=limit,
        )
    if isinstance(exc, MissingFileError):
        return ApiError(status.HTTP_400_BAD_REQUEST, "No video file uploaded", str(exc))
    if isinstance(exc, UploadReadError):
        return ApiError(status.HTTP_400_BAD_REQUEST, "Could not read upload", str(exc))
    if isinstance(exc, InvalidCutRangeError):
        return ApiError(status.HTTP_400_BAD_REQUEST, "Invalid cut range", str(exc))
    if isinstance(exc, AllCutsFailedError):
        return ApiError(
            status.HTTP_400_BAD_REQUEST, "All cuts failed", "; ".join(exc.reasons)
        )
    if isinstance(exc, InvalidRequestError):
        return ApiError(status.HTTP_400_BAD_REQUEST, "Invalid request", str(exc))
    if isinstance(exc, WebhookSignatureError):
        return ApiError(status.HTTP_400_BAD_REQUEST, "Invalid webhook signature", str(exc))
    if isinstance(exc, InvalidCredentialsError):
        return ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid email or password")
    if isinstance(exc, DuplicateAccountError):
        return ApiError(status.HTTP_409_CONFLICT, "An account with this email already exists")
    if isinstance(exc, RemoteServiceError):
        label = REMOTE_SERVICE_LABELS.get(exc.service, "Remote service request failed")
        return ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, label, exc.message)
    if isinstance(exc, ClientDisconnectedError):
        return ApiError(HTTP_499_CLIENT_CLOSED_REQUEST, "Client closed request", str(exc))
    return ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Convert domain exceptions into JSON payloads."""

    api_error = to_api_error(exc)
    log = logger.error if api_error.status_code >= 500 else logger.warning
    log(
        "api.request.failed",
        extra={
            "path": request.url.path,
            "status_code": api_error.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return api_error.to_response()


async def request_validation_handler(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI request validation failures with the shared body shape."""

    problems = []
    for item in exc.errors():
        location = ".".join(str(part) for part in item.get("loc", ()) if part != "body")
        problems.append(f"{location}: {item.get('msg')}" if location else str(item.get("msg")))
    return ApiError(
        status.HTTP_400_BAD_REQUEST, "Invalid request", "; ".join(problems)
    ).to_response()


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


__all__ = [
    "ApiError",
    "app_error_handler",
    "format_size",
    "register_error_handlers",
    "request_validation_handler",
    "to_api_error",
]
