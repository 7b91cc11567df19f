"""Tag and category organizer schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from reelhouse.models.catalog import VideoKind
from reelhouse.services.taxonomy import MoveOutcome


class TagRead(BaseModel):
    name: str
    group: str | None = None


class BucketRead(BaseModel):
    """A named bucket and the labels it currently holds."""
    name: str
    labels: list[str]


class TaxonomyGroups(BaseModel):
    kind: VideoKind | None = None
    buckets: list[BucketRead]


class MovePayload(BaseModel):
    """Drop target for a drag-and-drop move."""
    target: str = Field(min_length=1)


class MoveResult(BaseModel):
    outcome: MoveOutcome
    buckets: list[BucketRead]


def bucket_reads(labels: dict[str, list[str]]) -> list[BucketRead]:
    return [BucketRead(name=name, labels=values) for name, values in labels.items()]
