"""Document and ORM models for the Reelhouse API."""

from reelhouse.models.catalog import Category, CategoryStatus, Tag, Video, VideoKind
from reelhouse.models.document import Document
from reelhouse.models.user import UserProfile, UserRole

__all__ = [
    "Category",
    "CategoryStatus",
    "Document",
    "Tag",
    "UserProfile",
    "UserRole",
    "Video",
    "VideoKind",
]
