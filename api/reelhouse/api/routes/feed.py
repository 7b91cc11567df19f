"""Public long-form video feed with cursor pagination."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from reelhouse.api.deps import get_store
from reelhouse.core.config import settings
from reelhouse.db.document_store import DocumentStore
from reelhouse.schema.catalog import FeedPage, VideoRead
from reelhouse.services import feed_service

router = APIRouter()


@router.get("", response_model=FeedPage)
async def read_feed(
    cursor: str | None = Query(default=None, min_length=1),
    limit: int = Query(default=settings.feed_page_size, ge=1, le=settings.feed_max_page_size),
    store: DocumentStore = Depends(get_store),
) -> FeedPage:
    """Return the page of videos that follows ``cursor`` in id order."""
    page = await feed_service.fetch_feed_page(store, page_size=limit, cursor=cursor)
    return FeedPage(
        items=[VideoRead.model_validate(video) for video in page.items],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )
