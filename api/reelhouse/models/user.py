"""User profile document with per-user affinity lists."""

from __future__ import annotations

import enum

from pydantic import Field

from reelhouse.db.document_store import DocumentSnapshot
from reelhouse.models.catalog import DocumentModel

USERS = "users"


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


class AffinityList(str, enum.Enum):
    """Profile fields holding reference sets, by document field name."""

    LIKED_VIDEOS = "likedVideoIds"
    LIKED_CATEGORIES = "likedCategoryTitles"
    SAVED_SHORTS = "savedShortIds"
    RECENTLY_VIEWED_SHORTS = "recentlyViewedShortIds"


class UserProfile(DocumentModel):
    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
    role: UserRole = UserRole.USER
    liked_video_ids: list[str] = Field(default_factory=list)
    liked_category_titles: list[str] = Field(default_factory=list)
    saved_short_ids: list[str] = Field(default_factory=list)
    recently_viewed_short_ids: list[str] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: DocumentSnapshot) -> "UserProfile":
        return cls.model_validate({"uid": snapshot.id, **snapshot.data, "id": snapshot.id})

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN
