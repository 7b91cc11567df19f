"""Video and category request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from reelhouse.models.catalog import CategoryStatus
from reelhouse.schema.base import ORMModel


class VideoRead(ORMModel):
    """Video or short returned by the API."""
    id: str
    title: str
    description: str = ""
    thumbnail_url: str = ""
    poster_url: str = ""
    video_url: str = ""
    data_ai_hint: str | None = None
    tags: list[str] = []
    category_ids: list[str] = []
    is_short: bool = False


class VideoCreate(BaseModel):
    """Payload for creating a video or short.

    ``category_ids`` reference ``categories`` for videos and
    ``shortFilmCategories`` (keyed by name) for shorts.
    """
    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    video_url: str = ""
    thumbnail_url: str | None = None
    poster_url: str | None = None
    data_ai_hint: str | None = None
    tags: list[str] = Field(default_factory=list)
    category_ids: list[str] = Field(default_factory=list)


class VideoUpdate(BaseModel):
    """Partial update for a video or short."""
    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = None
    video_url: str | None = None
    thumbnail_url: str | None = None
    poster_url: str | None = None
    data_ai_hint: str | None = None
    tags: list[str] | None = None
    category_ids: list[str] | None = None


class CategoryRead(ORMModel):
    """Category returned by the API."""
    id: str
    title: str
    description: str = ""
    tags: list[str] = []
    href: str = ""
    status: CategoryStatus
    image_url: str = ""
    video_url: str | None = None
    featured_video_id: str | None = None
    hint: str | None = None
    sort_index: int | None = None


class CategoryCreate(BaseModel):
    """Payload for creating a category."""
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    status: CategoryStatus = CategoryStatus.DRAFT
    image_url: str | None = None
    video_url: str | None = None
    featured_video_id: str | None = None
    hint: str | None = None


class CategoryUpdate(BaseModel):
    """Partial update for a category."""
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    tags: list[str] | None = None
    status: CategoryStatus | None = None
    image_url: str | None = None
    video_url: str | None = None
    featured_video_id: str | None = None
    hint: str | None = None


class CategoryDraftCreate(BaseModel):
    """Create-or-reuse a category by title from a video form."""
    title: str = Field(min_length=1, max_length=200)


class CategoryDraftResult(BaseModel):
    category: CategoryRead
    created: bool


class CategoryOrderPayload(BaseModel):
    """Category ids in their new display order."""
    category_ids: list[str] = Field(min_length=1)


class CategoryTagsPayload(BaseModel):
    tags: list[str]


class PublishAllResult(BaseModel):
    published: int


class BrowseRow(BaseModel):
    """One browse row: a published category and its videos."""
    category: CategoryRead
    videos: list[VideoRead]


class ShortDetail(BaseModel):
    """Short with its category names and related shorts."""
    short: VideoRead
    categories: list[str]
    related: list[VideoRead]


class FeedPage(BaseModel):
    """One page of the long-form video feed."""
    items: list[VideoRead]
    next_cursor: str | None = None
    has_more: bool
