"""Video and short endpoints; reads are public, writes are admin-only."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from reelhouse.api.deps import CurrentUser, get_store, require_admin
from reelhouse.db.document_store import DocumentStore
from reelhouse.models.catalog import VideoKind
from reelhouse.schema.catalog import ShortDetail, VideoCreate, VideoRead, VideoUpdate
from reelhouse.services import video_service

videos_router = APIRouter()
shorts_router = APIRouter()


async def _list(store: DocumentStore, kind: VideoKind, search: str | None, tag: str | None, category_id: str | None):
    videos = await video_service.list_videos(store, kind, search=search, tag=tag, category_id=category_id)
    return [VideoRead.model_validate(video) for video in videos]


async def _get(store: DocumentStore, kind: VideoKind, video_id: str):
    try:
        return await video_service.get_video(store, video_id, kind)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


async def _create(store: DocumentStore, kind: VideoKind, payload: VideoCreate) -> VideoRead:
    try:
        video = await video_service.create_video(store, kind, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return VideoRead.model_validate(video)


async def _update(store: DocumentStore, kind: VideoKind, video_id: str, payload: VideoUpdate) -> VideoRead:
    try:
        video = await video_service.update_video(store, kind, video_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return VideoRead.model_validate(video)


async def _delete(store: DocumentStore, kind: VideoKind, video_id: str) -> None:
    try:
        await video_service.delete_video(store, kind, video_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@videos_router.get("", response_model=list[VideoRead])
async def list_videos(
    search: str | None = Query(default=None),
    tag: str | None = Query(default=None),
    category_id: str | None = Query(default=None),
    store: DocumentStore = Depends(get_store),
) -> list[VideoRead]:
    return await _list(store, VideoKind.VIDEO, search, tag, category_id)


@videos_router.get("/{video_id}", response_model=VideoRead)
async def read_video(video_id: str, store: DocumentStore = Depends(get_store)) -> VideoRead:
    return VideoRead.model_validate(await _get(store, VideoKind.VIDEO, video_id))


@videos_router.post("", response_model=VideoRead, status_code=status.HTTP_201_CREATED)
async def create_video(
    payload: VideoCreate,
    store: DocumentStore = Depends(get_store),
    _: CurrentUser = Depends(require_admin),
) -> VideoRead:
    return await _create(store, VideoKind.VIDEO, payload)


@videos_router.put("/{video_id}", response_model=VideoRead)
async def update_video(
    video_id: str,
    payload: VideoUpdate,
    store: DocumentStore = Depends(get_store),
    _: CurrentUser = Depends(require_admin),
) -> VideoRead:
    return await _update(store, VideoKind.VIDEO, video_id, payload)


@videos_router.delete(
    "/{video_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def delete_video(
    video_id: str,
    store: DocumentStore = Depends(get_store),
    _: CurrentUser = Depends(require_admin),
) -> None:
    await _delete(store, VideoKind.VIDEO, video_id)


@shorts_router.get("", response_model=list[VideoRead])
async def list_shorts(
    search: str | None = Query(default=None),
    tag: str | None = Query(default=None),
    category: str | None = Query(default=None),
    store: DocumentStore = Depends(get_store),
) -> list[VideoRead]:
    return await _list(store, VideoKind.SHORT, search, tag, category)


@shorts_router.get("/{short_id}", response_model=ShortDetail)
async def read_short(short_id: str, store: DocumentStore = Depends(get_store)) -> ShortDetail:
    """A short with its category names and up to ten related shorts."""
    short = await _get(store, VideoKind.SHORT, short_id)
    related = await video_service.related_shorts(store, short)
    return ShortDetail(
        short=VideoRead.model_validate(short),
        categories=list(short.category_ids),
        related=[VideoRead.model_validate(video) for video in related],
    )


@shorts_router.post("", response_model=VideoRead, status_code=status.HTTP_201_CREATED)
async def create_short(
    payload: VideoCreate,
    store: DocumentStore = Depends(get_store),
    _: CurrentUser = Depends(require_admin),
) -> VideoRead:
    return await _create(store, VideoKind.SHORT, payload)


@shorts_router.put("/{short_id}", response_model=VideoRead)
async def update_short(
    short_id: str,
    payload: VideoUpdate,
    store: DocumentStore = Depends(get_store),
    _: CurrentUser = Depends(require_admin),
) -> VideoRead:
    return await _update(store, VideoKind.SHORT, short_id, payload)


@shorts_router.delete(
    "/{short_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def delete_short(
    short_id: str,
    store: DocumentStore = Depends(get_store),
    _: CurrentUser = Depends(require_admin),
) -> None:
    await _delete(store, VideoKind.SHORT, short_id)
