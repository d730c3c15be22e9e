import asyncio
from io import BytesIO

import pytest
from fastapi import UploadFile

from makeandcut.config import IngestLimits
from makeandcut.cuts.cut_errors import AllCutsFailedError, InvalidCutRangeError
from makeandcut.cuts.cut_models import CutSpec
from makeandcut.cuts.cut_service import CutPipeline
from makeandcut.exceptions import ClientDisconnectedError, InvalidRequestError
from makeandcut.ingest.ingest_errors import MissingFileError, PayloadTooLargeError
from makeandcut.ingest.validation import UploadValidator
from makeandcut.storage.remote_store import StoreError


def make_upload(data: bytes = b"video-bytes") -> UploadFile:
    return UploadFile(
        file=BytesIO(data), filename="clip.mp4", headers={"content-type": "video/mp4"}
    )


def build_pipeline(store, *, max_bytes: int = 1024, timeout: float = 1.0) -> CutPipeline:
    return CutPipeline(
        validator=UploadValidator(
            IngestLimits(max_upload_bytes=max_bytes, chunk_size_bytes=8)
        ),
        store=store,
        folder="tests",
        store_timeout_seconds=timeout,
        disconnect_poll_seconds=0.01,
    )


@pytest.mark.asyncio
async def test_cut_single_without_range_returns_source_url(fake_store) -> None:
    pipeline = build_pipeline(fake_store)

    outcome = await pipeline.cut_single(make_upload())

    assert outcome.download_url == outcome.ref.url
    assert fake_store.calls == [("clip.mp4", b"video-bytes", "tests")]


@pytest.mark.asyncio
async def test_cut_single_with_range_composes_url(fake_store) -> None:
    pipeline = build_pipeline(fake_store)

    outcome = await pipeline.cut_single(make_upload(), CutSpec(start=1, end=2.5))

    assert outcome.download_url.endswith("/so_1.00,eo_2.50,q_auto,f_mp4/abc123.mp4")


@pytest.mark.asyncio
async def test_invalid_single_range_fails_before_upload(fake_store) -> None:
    pipeline = build_pipeline(fake_store)

    with pytest.raises(InvalidCutRangeError):
        await pipeline.cut_single(make_upload(), CutSpec(start=5, end=5))

    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_oversized_upload_never_reaches_store(fake_store) -> None:
    pipeline = build_pipeline(fake_store, max_bytes=4)

    with pytest.raises(PayloadTooLargeError) as excinfo:
        await pipeline.cut_single(make_upload(b"too many bytes"))

    assert excinfo.value.limit_bytes == 4
    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_missing_file_never_reaches_store(fake_store) -> None:
    pipeline = build_pipeline(fake_store)

    with pytest.raises(MissingFileError):
        await pipeline.cut_multiple(None, [CutSpec(0, 1)])

    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_store_error_is_propagated(failing_store) -> None:
    pipeline = build_pipeline(failing_store)

    with pytest.raises(StoreError) as excinfo:
        await pipeline.cut_single(make_upload())

    assert "Invalid api_key" in excinfo.value.message


@pytest.mark.asyncio
async def test_store_timeout_becomes_store_error(store_factory) -> None:
    store = store_factory(delay_seconds=1.0)
    pipeline = build_pipeline(store, timeout=0.05)

    with pytest.raises(StoreError) as excinfo:
        await pipeline.cut_single(make_upload())

    assert "did not respond" in excinfo.value.message
    assert store.cancelled


@pytest.mark.asyncio
async def test_client_disconnect_abandons_upload(store_factory) -> None:
    store = store_factory(delay_seconds=1.0)
    pipeline = build_pipeline(store, timeout=5.0)

    async def disconnected() -> bool:
        return True

    with pytest.raises(ClientDisconnectedError):
        await pipeline.cut_single(make_upload(), is_disconnected=disconnected)

    await asyncio.sleep(0)
    assert store.cancelled


@pytest.mark.asyncio
async def test_connected_client_waits_for_store(store_factory) -> None:
    store = store_factory(delay_seconds=0.05)
    pipeline = build_pipeline(store)

    async def connected() -> bool:
        return False

    outcome = await pipeline.cut_single(make_upload(), is_disconnected=connected)

    assert outcome.ref.identifier == "abc123"


@pytest.mark.asyncio
async def test_cut_multiple_returns_partial_results(fake_store) -> None:
    pipeline = build_pipeline(fake_store)

    outcome = await pipeline.cut_multiple(
        make_upload(), [CutSpec(0, 5), CutSpec(5, 5), CutSpec(7, 10)]
    )

    assert [result.success for result in outcome.results] == [True, False, True]
    assert len(fake_store.calls) == 1


@pytest.mark.asyncio
async def test_cut_multiple_all_failed(fake_store) -> None:
    pipeline = build_pipeline(fake_store)

    with pytest.raises(AllCutsFailedError) as excinfo:
        await pipeline.cut_multiple(make_upload(), [CutSpec(5, 5), CutSpec(3, 1)])

    assert len(excinfo.value.reasons) == 2


@pytest.mark.asyncio
async def test_cut_multiple_requires_cuts(fake_store) -> None:
    pipeline = build_pipeline(fake_store)

    with pytest.raises(InvalidRequestError):
        await pipeline.cut_multiple(make_upload(), [])

    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_describe_reports_store_duration(fake_store) -> None:
    pipeline = build_pipeline(fake_store)

    asset, ref = await pipeline.describe(make_upload(b"12345"))

    assert asset.size_bytes == 5
    assert ref.duration == 42.5
