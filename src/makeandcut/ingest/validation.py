"""Upload validation utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from hashlib import sha256

from fastapi import UploadFile

from ..config import IngestLimits
from .ingest_errors import MissingFileError, PayloadTooLargeError, UploadReadError
from .ingest_models import MediaAsset

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UploadValidator:
    """Validate uploaded videos against the configured ceiling."""

    limits: IngestLimits

    async def validate(self, upload: UploadFile | None) -> MediaAsset:
        if upload is None or not upload.filename:
            logger.warning("ingest.upload.missing_file")
            raise MissingFileError("No video file was uploaded")

        cap = self.limits.max_upload_bytes
        if upload.size is not None and upload.size > cap:
            logger.warning(
                "ingest.upload.payload_too_large",
                extra={"size_bytes": upload.size, "limit_bytes": cap},
            )
            raise PayloadTooLargeError(cap, upload.size)

        digest = sha256()
        size = 0

        try:
            while True:
                chunk = await upload.read(self.limits.chunk_size_bytes)
                if not chunk:
                    break
                size += len(chunk)
                if size > cap:
                    logger.warning(
                        "ingest.upload.payload_too_large",
                        extra={"size_bytes": size, "limit_bytes": cap},
                    )
                    raise PayloadTooLargeError(cap, size)
                digest.update(chunk)
        except PayloadTooLargeError:
            raise
        except Exception as exc:
            await upload.close()
            logger.error("ingest.upload.read_failed", exc_info=exc)
            raise UploadReadError(str(exc)) from exc
        finally:
            if not upload.file.closed:
                await upload.seek(0)

        if size == 0:
            logger.warning(
                "ingest.upload.empty_file", extra={"upload_name": upload.filename}
            )
            raise MissingFileError("Uploaded video file is empty")

        asset = MediaAsset(
            filename=upload.filename,
            content_type=upload.content_type or "application/octet-stream",
            size_bytes=size,
            sha256=digest.hexdigest(),
            stream=upload.file,
        )
        logger.info(
            "ingest.upload.validated",
            extra={
                "upload_name": asset.filename,
                "size_bytes": asset.size_bytes,
                "content_type": asset.content_type,
            },
        )
        return asset
