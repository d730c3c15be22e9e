"""Domain service coordinating ingest, remote storage and cut composition."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from fastapi import UploadFile

from ..exceptions import ClientDisconnectedError, InvalidRequestError
from ..ingest.ingest_models import MediaAsset, PipelineState
from ..ingest.validation import UploadValidator
from ..storage.remote_store import RemoteStore, StoreError
from ..storage.store_models import StoredAssetRef
from .aggregator import aggregate
from .cut_errors import AllCutsFailedError
from .cut_models import CutResult, CutSpec
from .url_composer import compose_url, validate_cut

logger = logging.getLogger(__name__)

DisconnectProbe = Callable[[], Awaitable[bool]]


@dataclass(slots=True)
class SingleCutOutcome:
    ref: StoredAssetRef
    download_url: str


@dataclass(slots=True)
class MultiCutOutcome:
    ref: StoredAssetRef
    results: list[CutResult]


@dataclass(slots=True)
class CutPipeline:
    """Coordinates the upload-and-cut workflow for one request at a time."""

    validator: UploadValidator
    store: RemoteStore
    folder: str
    store_timeout_seconds: float
    disconnect_poll_seconds: float = 0.5
    log: logging.Logger = field(default_factory=lambda: logger)

    async def ingest(self, upload: UploadFile | None) -> MediaAsset:
        self._transition(PipelineState.RECEIVED)
        asset = await self.validator.validate(upload)
        self._transition(PipelineState.VALIDATED, size_bytes=asset.size_bytes)
        return asset

    async def store_asset(
        self,
        asset: MediaAsset,
        *,
        is_disconnected: DisconnectProbe | None = None,
    ) -> StoredAssetRef:
        """Upload ``asset`` under the configured deadline.

        When ``is_disconnected`` is given the client connection is polled while
        the upload is in flight and the call is abandoned on disconnect.
        """
        upload = asyncio.ensure_future(self.store.store(asset, folder=self.folder))
        try:
            ref = await asyncio.wait_for(
                self._watch(upload, is_disconnected), timeout=self.store_timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            self.log.error(
                "pipeline.store.timeout",
                extra={"timeout_seconds": self.store_timeout_seconds},
            )
            raise StoreError(
                f"Remote store did not respond within {self.store_timeout_seconds:g}s"
            ) from exc
        finally:
            if not upload.done():
                upload.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await upload
        self._transition(PipelineState.STORED, asset_id=ref.identifier)
        return ref

    async def _watch(
        self,
        upload: asyncio.Future[StoredAssetRef],
        is_disconnected: DisconnectProbe | None,
    ) -> StoredAssetRef:
        if is_disconnected is None:
            return await upload
        while True:
            done, _ = await asyncio.wait({upload}, timeout=self.disconnect_poll_seconds)
            if done:
                return upload.result()
            if await is_disconnected():
                self.log.warning("pipeline.store.client_disconnected")
                raise ClientDisconnectedError("Client disconnected during upload")

    async def cut_single(
        self,
        upload: UploadFile | None,
        cut: CutSpec | None = None,
        *,
        is_disconnected: DisconnectProbe | None = None,
    ) -> SingleCutOutcome:
        """Store the upload and return one download URL.

        Without ``cut`` the URL of the stored source is returned.
        """
        asset = await self.ingest(upload)
        if cut is not None:
            validate_cut(cut)
        ref = await self.store_asset(asset, is_disconnected=is_disconnected)
        if cut is None:
            return SingleCutOutcome(ref=ref, download_url=ref.url)
        self._transition(PipelineState.COMPOSING, cuts_total=1)
        url = compose_url(ref, cut)
        self._transition(PipelineState.PARTIAL_OR_FULL_SUCCESS, cuts_succeeded=1)
        return SingleCutOutcome(ref=ref, download_url=url)

    async def cut_multiple(
        self,
        upload: UploadFile | None,
        cuts: Sequence[CutSpec],
        *,
        is_disconnected: DisconnectProbe | None = None,
    ) -> MultiCutOutcome:
        asset = await self.ingest(upload)
        if not cuts:
            raise InvalidRequestError("At least one cut is required")
        ref = await self.store_asset(asset, is_disconnected=is_disconnected)
        self._transition(PipelineState.COMPOSING, cuts_total=len(cuts))
        try:
            results = aggregate(ref, cuts)
        except AllCutsFailedError:
            self._transition(PipelineState.ALL_FAILED, asset_id=ref.identifier)
            raise
        self._transition(
            PipelineState.PARTIAL_OR_FULL_SUCCESS,
            cuts_succeeded=sum(1 for result in results if result.success),
        )
        return MultiCutOutcome(ref=ref, results=results)

    async def describe(
        self,
        upload: UploadFile | None,
        *,
        is_disconnected: DisconnectProbe | None = None,
    ) -> tuple[MediaAsset, StoredAssetRef]:
        """Store the upload and return it with the store-reported metadata."""
        asset = await self.ingest(upload)
        ref = await self.store_asset(asset, is_disconnected=is_disconnected)
        return asset, ref

    def _transition(self, state: PipelineState, **context: object) -> None:
        self.log.info("pipeline.state.%s", state.value, extra={"state": state.value, **context})
