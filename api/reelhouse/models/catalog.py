"""Catalog documents: videos, categories and tags.

Documents keep the camelCase field names of the existing collections; the
Python attributes are snake_case.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from reelhouse.db.document_store import DocumentSnapshot

VIDEOS = "videos"
CATEGORIES = "categories"
SHORT_CATEGORIES = "shortFilmCategories"
TAGS = "tags"
SHORT_TAGS = "shortFilmTags"


class DocumentModel(BaseModel):
    """Base for models persisted as documents keyed by ``id``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str = ""

    @classmethod
    def from_snapshot(cls, snapshot: DocumentSnapshot):
        return cls.model_validate({**snapshot.data, "id": snapshot.id})

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True, mode="json")


class VideoKind(str, enum.Enum):
    VIDEO = "video"
    SHORT = "short"

    @property
    def tag_collection(self) -> str:
        return SHORT_TAGS if self is VideoKind.SHORT else TAGS

    @property
    def category_collection(self) -> str:
        return SHORT_CATEGORIES if self is VideoKind.SHORT else CATEGORIES


class CategoryStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Video(DocumentModel):
    title: str
    description: str = ""
    thumbnail_url: str = ""
    poster_url: str = ""
    video_url: str = ""
    data_ai_hint: str | None = None
    tags: list[str] = Field(default_factory=list)
    category_ids: list[str] = Field(default_factory=list)
    is_short: bool = False

    @model_validator(mode="before")
    @classmethod
    def _read_legacy_category_names(cls, data: Any) -> Any:
        """Shorts written before ids were unified store category names in ``categories``."""
        if isinstance(data, dict) and "categoryIds" not in data and "category_ids" not in data:
            legacy = data.get("categories")
            if isinstance(legacy, list):
                return {**data, "categoryIds": [str(name) for name in legacy]}
        return data

    @property
    def kind(self) -> VideoKind:
        return VideoKind.SHORT if self.is_short else VideoKind.VIDEO


class Category(DocumentModel):
    title: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    href: str = ""
    status: CategoryStatus = CategoryStatus.DRAFT
    image_url: str = ""
    video_url: str | None = None
    featured_video_id: str | None = None
    hint: str | None = None
    sort_index: int | None = None

    @classmethod
    def from_short_snapshot(cls, snapshot: DocumentSnapshot) -> "Category":
        """Short categories are bare ``{name}`` documents keyed by their name."""
        name = str(snapshot.data.get("name") or snapshot.id)
        return cls(id=snapshot.id, title=name, status=CategoryStatus.PUBLISHED)


class Tag(DocumentModel):
    name: str
    group: str | None = None

    @classmethod
    def from_snapshot(cls, snapshot: DocumentSnapshot) -> "Tag":
        return cls.model_validate({"name": snapshot.id, **snapshot.data, "id": snapshot.id})
