"""Upload and video metadata schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from reelhouse.schema.base import ORMModel
from reelhouse.services.upload_service import UploadStatus


class UploadRead(BaseModel):
    url: str
    path: str


class UploadStatusRead(ORMModel):
    id: str
    filename: str
    status: UploadStatus
    started_at: datetime
    finished_at: datetime | None = None
    url: str | None = None


class OEmbedRequest(BaseModel):
    url: str = Field(min_length=1, max_length=2048)


class VideoMetadataRead(ORMModel):
    """Metadata derived from a YouTube or Vimeo link."""
    provider: str
    video_id: str
    canonical_url: str
    title: str | None = None
    description: str | None = None
    thumbnail_url: str | None = None
