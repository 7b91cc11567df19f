"""Video and short CRUD, taxonomy bookkeeping and related-short lookups.

Invariants:
- A save writes the video and the tag/category index documents in one batch.
- Index documents are merged so an organizer ``group`` survives re-saves.
- Tags are stored trimmed, lower-cased and de-duplicated.
"""

from __future__ import annotations

import logging
from typing import Iterable

from slugify import slugify

from reelhouse.core.config import settings
from reelhouse.db.document_store import DocumentStore, FieldFilter, Query, new_document_id
from reelhouse.models.catalog import CATEGORIES, SHORT_CATEGORIES, VIDEOS, Category, Video, VideoKind
from reelhouse.schema.catalog import VideoCreate, VideoUpdate

DESCRIPTION_SUFFIX = " animation reference"

logger = logging.getLogger("reelhouse.services.videos")


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Trim, lower-case and de-duplicate tags, keeping first-seen order."""
    cleaned: list[str] = []
    for tag in tags:
        value = tag.strip().lower()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


def default_description(title: str) -> str:
    return f"{title}{DESCRIPTION_SUFFIX}"


def category_tags(categories: Iterable[Category]) -> list[str]:
    """Tags contributed by the categories a long-form video belongs to."""
    return [slugify(category.title) for category in categories if slugify(category.title)]


def kind_filter(kind: VideoKind) -> FieldFilter:
    if kind is VideoKind.SHORT:
        return FieldFilter("isShort", "==", True)
    return FieldFilter("isShort", "!=", True)


async def list_videos(
    store: DocumentStore,
    kind: VideoKind,
    *,
    search: str | None = None,
    tag: str | None = None,
    category_id: str | None = None,
) -> list[Video]:
    """List videos of one kind, optionally filtered, sorted by title."""
    filters = [kind_filter(kind)]
    if tag:
        filters.append(FieldFilter("tags", "array-contains", tag.strip().lower()))
    docs = await store.query(Query(VIDEOS, tuple(filters)))
    videos = [Video.from_snapshot(doc) for doc in docs]
    if category_id:
        videos = [video for video in videos if category_id in video.category_ids]
    if search:
        needle = search.casefold()
        videos = [video for video in videos if needle in video.title.casefold()]
    return sorted(videos, key=lambda video: video.title.casefold())


async def get_video(store: DocumentStore, video_id: str, kind: VideoKind | None = None) -> Video:
    snapshot = await store.get(VIDEOS, video_id)
    if snapshot is None:
        raise ValueError("Video not found")
    video = Video.from_snapshot(snapshot)
    if kind is not None and video.kind is not kind:
        raise ValueError("Video not found")
    return video


async def _selected_categories(store: DocumentStore, kind: VideoKind, category_ids: list[str]) -> list[Category]:
    if kind is VideoKind.SHORT:
        return [Category.from_short_snapshot(doc) for doc in await store.get_many(SHORT_CATEGORIES, category_ids)]
    return [Category.from_snapshot(doc) for doc in await store.get_many(CATEGORIES, category_ids)]


async def _write_video(store: DocumentStore, video: Video, *, existing: bool) -> Video:
    kind = video.kind
    batch = store.batch()
    if existing:
        batch.update(VIDEOS, video.id, video.to_document())
    else:
        batch.set(VIDEOS, video.id, video.to_document())
    for tag in video.tags:
        batch.set(kind.tag_collection, tag, {"name": tag}, merge=True)
    if kind is VideoKind.SHORT:
        for name in video.category_ids:
            batch.set(SHORT_CATEGORIES, name, {"name": name}, merge=True)
    await batch.commit()
    logger.info("Saved %s %s with %d tags", kind.value, video.id, len(video.tags))
    return video


def _clean_category_ids(kind: VideoKind, category_ids: Iterable[str]) -> list[str]:
    cleaned: list[str] = []
    for raw in category_ids:
        value = raw.strip() if kind is VideoKind.SHORT else raw
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


async def _build_video(
    store: DocumentStore,
    kind: VideoKind,
    *,
    video_id: str,
    title: str,
    description: str,
    video_url: str,
    thumbnail_url: str | None,
    poster_url: str | None,
    data_ai_hint: str | None,
    tags: list[str],
    category_ids: list[str],
) -> Video:
    category_ids = _clean_category_ids(kind, category_ids)
    tag_values = list(tags)
    if kind is VideoKind.VIDEO and category_ids:
        tag_values.extend(category_tags(await _selected_categories(store, kind, category_ids)))
    thumbnail = thumbnail_url or settings.placeholder_thumbnail_url
    if poster_url:
        poster = poster_url
    elif kind is VideoKind.SHORT:
        poster = thumbnail_url or settings.placeholder_poster_url
    else:
        poster = settings.placeholder_poster_url
    return Video(
        id=video_id,
        title=title.strip(),
        description=description.strip() or default_description(title.strip()),
        video_url=video_url,
        thumbnail_url=thumbnail,
        poster_url=poster,
        data_ai_hint=data_ai_hint,
        tags=normalize_tags(tag_values),
        category_ids=category_ids,
        is_short=kind is VideoKind.SHORT,
    )


async def create_video(store: DocumentStore, kind: VideoKind, payload: VideoCreate) -> Video:
    """Create a video or short along with its tag index documents."""
    if not payload.title.strip():
        raise ValueError("Title cannot be blank")
    video = await _build_video(
        store,
        kind,
        video_id=new_document_id(),
        title=payload.title,
        description=payload.description,
        video_url=payload.video_url,
        thumbnail_url=payload.thumbnail_url,
        poster_url=payload.poster_url,
        data_ai_hint=payload.data_ai_hint,
        tags=payload.tags,
        category_ids=payload.category_ids,
    )
    return await _write_video(store, video, existing=False)


async def update_video(store: DocumentStore, kind: VideoKind, video_id: str, payload: VideoUpdate) -> Video:
    """Apply a partial update; unspecified fields keep their stored values."""
    current = await get_video(store, video_id, kind)
    changes = payload.model_dump(exclude_unset=True)
    title = changes.get("title") or current.title
    description = changes.get("description")
    if description is None:
        description = current.description
        if description == default_description(current.title):
            description = ""
    video = await _build_video(
        store,
        kind,
        video_id=video_id,
        title=title,
        description=description,
        video_url=changes.get("video_url") if changes.get("video_url") is not None else current.video_url,
        thumbnail_url=changes.get("thumbnail_url") or current.thumbnail_url,
        poster_url=changes.get("poster_url") or current.poster_url,
        data_ai_hint=changes.get("data_ai_hint", current.data_ai_hint),
        tags=changes["tags"] if changes.get("tags") is not None else current.tags,
        category_ids=changes["category_ids"] if changes.get("category_ids") is not None else current.category_ids,
    )
    return await _write_video(store, video, existing=True)


async def delete_video(store: DocumentStore, kind: VideoKind, video_id: str) -> None:
    await get_video(store, video_id, kind)
    await store.delete(VIDEOS, video_id)
    logger.info("Deleted %s %s", kind.value, video_id)


async def related_shorts(store: DocumentStore, short: Video, *, limit: int | None = None) -> list[Video]:
    """Shorts sharing the first category of ``short``, excluding itself."""
    if not short.category_ids:
        return []
    cap = limit if limit is not None else settings.related_shorts_limit
    first = short.category_ids[0]
    related: list[Video] = []
    seen = {short.id}
    # Legacy shorts index the same names under ``categories``.
    for field_name in ("categoryIds", "categories"):
        docs = await store.query(
            Query(
                VIDEOS,
                (FieldFilter("isShort", "==", True), FieldFilter(field_name, "array-contains", first)),
                limit=cap + 1,
            )
        )
        for doc in docs:
            if doc.id in seen:
                continue
            seen.add(doc.id)
            related.append(Video.from_snapshot(doc))
    return related[:cap]
