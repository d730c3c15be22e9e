"""Pydantic schemas for cut requests and responses."""

from pydantic import BaseModel, ConfigDict, Field


class CutRequestItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_time: float = Field(alias="startTime")
    end_time: float = Field(alias="endTime")
    name: str | None = None


class CutVideoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    download_url: str = Field(alias="downloadUrl")
    asset_id: str = Field(alias="assetId")


class VideoInfoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    duration: float | None
    filename: str
    file_size: int = Field(alias="fileSize")


class CutResultSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    name: str
    duration: float
    download_url: str | None = Field(default=None, alias="downloadUrl")
    error: str | None = None
    details: str | None = None


class MultiCutResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    asset_id: str = Field(alias="assetId")
    results: list[CutResultSchema]
