"""Application configuration builder.

Values are read from the environment (and an optional ``.env`` file). The
upload ceiling is a single setting shared by every upload route.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(slots=True)
class IngestLimits:
    max_upload_bytes: int
    chunk_size_bytes: int
    field_name: str = "video"


class AppConfig(BaseSettings):
    """Pydantic settings container for the service layer."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to.")
    port: int = Field(default=3001, ge=1, le=65535, description="Listening port.")
    log_level: str = Field(default="INFO")
    max_upload_size_mb: int = Field(
        default=100,
        ge=1,
        description="Upper bound for uploaded videos in megabytes.",
    )
    upload_chunk_size_bytes: int = Field(
        default=1 * 1024 * 1024,
        ge=1,
        description="Read size used while validating uploads.",
    )
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma separated list of CORS origins.",
    )
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    store_folder: str = Field(
        default="makeandcut",
        description="Logical folder uploaded videos are stored under.",
    )
    store_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Deadline applied around a single remote store upload.",
    )
    stripe_secret_key: str = ""
    stripe_price_id: str = ""
    stripe_webhook_secret: str = ""
    frontend_url: str = "http://localhost:3000"
    billing_timeout_seconds: float = Field(default=15.0, gt=0)

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def cors_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def ingest_limits(self) -> IngestLimits:
        return IngestLimits(
            max_upload_bytes=self.max_upload_bytes,
            chunk_size_bytes=self.upload_chunk_size_bytes,
        )


def load_config() -> AppConfig:
    """Load configuration from environment."""
    return AppConfig()


__all__ = ["AppConfig", "IngestLimits", "load_config"]
