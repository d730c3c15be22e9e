"""HTTP routes for upload and cut operations."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import TypeAdapter, ValidationError

from ..exceptions import InvalidRequestError
from .cut_models import CutSpec
from .cut_service import CutPipeline
from .cuts_schemas import (
    CutRequestItem,
    CutResultSchema,
    CutVideoResponse,
    MultiCutResponse,
    VideoInfoResponse,
)

router = APIRouter(prefix="/api", tags=["cuts"])
logger = logging.getLogger(__name__)

_cut_list_adapter = TypeAdapter(list[CutRequestItem])


def get_cut_pipeline(request: Request) -> CutPipeline:
    """Fetch cut pipeline from application state."""
    try:
        return request.app.state.cut_pipeline  # type: ignore[attr-defined]
    except AttributeError as exc:
        raise RuntimeError("CutPipeline is not configured") from exc


def _parse_offset(raw: str | None, field_name: str) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        raise InvalidRequestError(f"{field_name} must be a number of seconds") from None


def _single_cut(start_raw: str | None, end_raw: str | None) -> CutSpec | None:
    start = _parse_offset(start_raw, "startTime")
    end = _parse_offset(end_raw, "endTime")
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise InvalidRequestError("startTime and endTime must be provided together")
    return CutSpec(start=start, end=end)


def parse_cuts(raw: str | None) -> list[CutSpec]:
    """Decode the JSON-encoded ``cuts`` form field."""
    if raw is None or not raw.strip():
        raise InvalidRequestError("cuts field is required")
    try:
        items = _cut_list_adapter.validate_json(raw)
    except ValidationError as exc:
        raise InvalidRequestError(
            f"cuts must be a JSON array of {{startTime, endTime, name?}}: "
            f"{exc.error_count()} invalid value(s)"
        ) from exc
    return [CutSpec(start=item.start_time, end=item.end_time, name=item.name) for item in items]


@router.post("/upload", response_model=CutVideoResponse)
@router.post("/cut-video", response_model=CutVideoResponse)
async def cut_video(
    request: Request,
    video: UploadFile | None = File(None),
    start_time: str | None = Form(None, alias="startTime"),
    end_time: str | None = Form(None, alias="endTime"),
    pipeline: CutPipeline = Depends(get_cut_pipeline),
) -> CutVideoResponse:
    """Store the uploaded video and return its (optionally cut) download URL."""
    cut = _single_cut(start_time, end_time)
    outcome = await pipeline.cut_single(
        video, cut, is_disconnected=request.is_disconnected
    )
    return CutVideoResponse(download_url=outcome.download_url, asset_id=outcome.ref.identifier)


@router.post("/video-info", response_model=VideoInfoResponse)
async def video_info(
    request: Request,
    video: UploadFile | None = File(None),
    pipeline: CutPipeline = Depends(get_cut_pipeline),
) -> VideoInfoResponse:
    asset, ref = await pipeline.describe(video, is_disconnected=request.is_disconnected)
    return VideoInfoResponse(
        duration=ref.duration,
        filename=asset.filename,
        file_size=asset.size_bytes,
    )


@router.post(
    "/cut-video-multiple",
    response_model=MultiCutResponse,
    response_model_exclude_none=True,
)
async def cut_video_multiple(
    request: Request,
    video: UploadFile | None = File(None),
    cuts: str | None = Form(None),
    pipeline: CutPipeline = Depends(get_cut_pipeline),
) -> MultiCutResponse:
    """Store the video once and compose one URL per requested cut."""
    specs = parse_cuts(cuts)
    outcome = await pipeline.cut_multiple(
        video, specs, is_disconnected=request.is_disconnected
    )
    logger.info(
        "cuts.request.done",
        extra={"asset_id": outcome.ref.identifier, "cuts_total": len(outcome.results)},
    )
    return MultiCutResponse(
        asset_id=outcome.ref.identifier,
        results=[
            CutResultSchema(
                success=result.success,
                name=result.name,
                duration=result.duration,
                download_url=result.url,
                error=result.reason,
                details=result.details,
            )
            for result in outcome.results
        ],
    )
