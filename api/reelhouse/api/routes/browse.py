"""Public browse rows and category pages."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from reelhouse.api.deps import get_store
from reelhouse.db.document_store import DocumentStore
from reelhouse.schema.catalog import BrowseRow, CategoryRead, VideoRead
from reelhouse.services import category_service

router = APIRouter()


def _row(category, videos) -> BrowseRow:
    return BrowseRow(
        category=CategoryRead.model_validate(category),
        videos=[VideoRead.model_validate(video) for video in videos],
    )


@router.get("", response_model=list[BrowseRow])
async def list_browse_rows(store: DocumentStore = Depends(get_store)) -> list[BrowseRow]:
    """Published categories that have videos, busiest first."""
    rows = await category_service.browse_rows(store)
    return [_row(category, videos) for category, videos in rows]


@router.get("/{category_id}", response_model=BrowseRow)
async def read_category_page(category_id: str, store: DocumentStore = Depends(get_store)) -> BrowseRow:
    try:
        category, videos = await category_service.category_page(store, category_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _row(category, videos)
