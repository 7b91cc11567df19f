"""Long-form video feed built on cursor pagination."""

from __future__ import annotations

from reelhouse.db.document_store import DocumentStore
from reelhouse.models.catalog import VIDEOS, Video, VideoKind
from reelhouse.services.pagination import CursorPaginator, Page, fetch_page
from reelhouse.services.video_service import kind_filter


async def fetch_feed_page(store: DocumentStore, *, page_size: int, cursor: str | None = None) -> Page[Video]:
    """One page of long-form videos after ``cursor`` in id order."""
    page = await fetch_page(
        store,
        VIDEOS,
        page_size=page_size,
        cursor=cursor,
        filters=(kind_filter(VideoKind.VIDEO),),
    )
    return Page(
        items=[Video.from_snapshot(doc) for doc in page.items],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )


def feed_paginator(store: DocumentStore, *, page_size: int) -> CursorPaginator[Video]:
    """An in-process feed paginator reading straight from the document store."""

    async def _fetch(cursor: str | None, limit: int) -> list[Video]:
        page = await fetch_feed_page(store, page_size=limit, cursor=cursor)
        return page.items

    return CursorPaginator(_fetch, page_size=page_size)
