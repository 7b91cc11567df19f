from . import (
    category_service,
    feed_service,
    metadata_service,
    tag_service,
    upload_service,
    user_service,
    video_service,
)

__all__ = [
    "category_service",
    "feed_service",
    "metadata_service",
    "tag_service",
    "upload_service",
    "user_service",
    "video_service",
]
"""Service-layer helpers for API operations."""
