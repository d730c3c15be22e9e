from __future__ import annotations

import asyncio
import os

import pytest

os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo")
os.environ.setdefault("CLOUDINARY_API_KEY", "test-key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-secret")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test")

from makeandcut.config import AppConfig  # noqa: E402
from makeandcut.ingest.ingest_models import MediaAsset  # noqa: E402
from makeandcut.storage.remote_store import RemoteStore, StoreError  # noqa: E402
from makeandcut.storage.store_models import StoredAssetRef  # noqa: E402

DELIVERY_ROOT = "https://res.cloudinary.com/demo/video/upload"


class FakeStore(RemoteStore):
    """In-memory remote store that records every upload."""

    def __init__(
        self,
        *,
        identifier: str = "abc123",
        duration: float | None = 42.5,
        error: Exception | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self.identifier = identifier
        self.duration = duration
        self.error = error
        self.delay_seconds = delay_seconds
        self.calls: list[tuple[str, bytes, str]] = []
        self.cancelled = False

    async def store(self, asset: MediaAsset, *, folder: str) -> StoredAssetRef:
        asset.rewind()
        self.calls.append((asset.filename, asset.stream.read(), folder))
        try:
            if self.delay_seconds:
                await asyncio.sleep(self.delay_seconds)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return StoredAssetRef(
            identifier=self.identifier,
            url=f"{DELIVERY_ROOT}/v1/{self.identifier}.mp4",
            delivery_root=DELIVERY_ROOT,
            size_bytes=len(self.calls[-1][1]),
            format="mp4",
            duration=self.duration,
        )


@pytest.fixture
def store_factory() -> type[FakeStore]:
    return FakeStore


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def failing_store() -> FakeStore:
    return FakeStore(error=StoreError("Invalid api_key test-key"))


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        _env_file=None,
        max_upload_size_mb=1,
        upload_chunk_size_bytes=64 * 1024,
        store_folder="tests",
        store_timeout_seconds=5.0,
        stripe_secret_key="sk_test",
        stripe_price_id="price_123",
        stripe_webhook_secret="whsec_test",
    )


@pytest.fixture
def stored_ref() -> StoredAssetRef:
    return StoredAssetRef(
        identifier="abc123",
        url=f"{DELIVERY_ROOT}/v1/abc123.mp4",
        delivery_root=DELIVERY_ROOT,
    )
