"""User profile and library schemas."""

from __future__ import annotations

from pydantic import BaseModel

from reelhouse.models.user import UserRole
from reelhouse.schema.base import ORMModel
from reelhouse.schema.catalog import CategoryRead, VideoRead


class UserProfileRead(ORMModel):
    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    role: UserRole
    liked_video_ids: list[str] = []
    liked_category_titles: list[str] = []
    saved_short_ids: list[str] = []
    recently_viewed_short_ids: list[str] = []


class LibraryRead(BaseModel):
    """Affinity lists resolved into the referenced documents."""
    liked_videos: list[VideoRead]
    liked_categories: list[CategoryRead]
    saved_shorts: list[VideoRead]
    recently_viewed_shorts: list[VideoRead]
