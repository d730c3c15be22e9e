"""Cloudinary video store adapter."""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..ingest.ingest_models import MediaAsset
from .remote_store import RemoteStore, StoreError
from .store_models import StoredAssetRef

logger = logging.getLogger(__name__)


def sign_params(params: Mapping[str, Any], api_secret: str) -> str:
    """Return the Cloudinary request signature for ``params``."""
    to_sign = "&".join(
        f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


@dataclass(slots=True)
class CloudinaryStore(RemoteStore):
    """Stream uploads to Cloudinary's signed video upload endpoint."""

    cloud_name: str
    api_key: str
    api_secret: str
    api_base: str = "https://api.cloudinary.com/v1_1"
    delivery_base: str = "https://res.cloudinary.com"
    timeout_seconds: float = 120.0
    clock: Callable[[], float] = time.time
    log: logging.Logger = field(default_factory=lambda: logger)

    @property
    def upload_url(self) -> str:
        return f"{self.api_base}/{self.cloud_name}/video/upload"

    @property
    def delivery_root(self) -> str:
        return f"{self.delivery_base}/{self.cloud_name}/video/upload"

    async def store(self, asset: MediaAsset, *, folder: str) -> StoredAssetRef:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise StoreError("Cloudinary credentials are not configured")

        params: dict[str, Any] = {"folder": folder, "timestamp": int(self.clock())}
        data = {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }
        asset.rewind()
        files = {"file": (asset.filename, asset.stream, asset.content_type)}

        self.log.info(
            "store.upload.start",
            extra={"folder": folder, "size_bytes": asset.size_bytes},
        )
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(self.upload_url, data=data, files=files)
        except httpx.HTTPError as exc:
            self.log.error("store.upload.transport_error", exc_info=exc)
            raise StoreError(f"Cloudinary upload failed: {exc}") from exc

        if response.status_code != 200:
            detail = _extract_error(response)
            self.log.error(
                "store.upload.rejected status=%s detail=%s",
                response.status_code,
                detail,
                extra={"status_code": response.status_code},
            )
            raise StoreError(
                f"Cloudinary upload failed (status={response.status_code}): {detail}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise StoreError("Cloudinary returned a non-JSON response") from exc

        public_id = body.get("public_id")
        secure_url = body.get("secure_url") or body.get("url")
        if not public_id or not secure_url:
            raise StoreError("Cloudinary response is missing public_id or secure_url")

        ref = StoredAssetRef(
            identifier=str(public_id),
            url=str(secure_url),
            delivery_root=self.delivery_root,
            size_bytes=_optional_int(body.get("bytes")),
            format=body.get("format"),
            duration=_optional_float(body.get("duration")),
        )
        self.log.info(
            "store.upload.done",
            extra={"public_id": ref.identifier, "size_bytes": ref.size_bytes},
        )
        return ref


def _extract_error(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        return (error.get("message") or "").strip() or str(error)
    return str(data)


def _optional_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> float | None:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None
