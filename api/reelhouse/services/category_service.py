"""Category management, browse rows and the category organizer board."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from reelhouse.core.config import settings
from reelhouse.db.document_store import DocumentStore, FieldFilter, Query, new_document_id
from reelhouse.models.catalog import (
    CATEGORIES,
    SHORT_CATEGORIES,
    VIDEOS,
    Category,
    CategoryStatus,
    Video,
    VideoKind,
)
from reelhouse.schema.catalog import CategoryCreate, CategoryUpdate
from reelhouse.services.taxonomy import CATEGORY_SCHEME, TaxonomyBoard, retag_for_bucket
from reelhouse.services.video_service import kind_filter

NULLABLE_FIELDS = frozenset({"video_url", "featured_video_id", "hint"})
DRAFT_DESCRIPTION = "A compelling description of the category goes here."

logger = logging.getLogger("reelhouse.services.categories")


def _title_key(category: Category) -> str:
    return category.title.casefold()


def category_href(category_id: str) -> str:
    return f"/browse/{category_id}"


async def list_categories(store: DocumentStore, *, status: CategoryStatus | None = None) -> list[Category]:
    """List categories sorted by title, optionally restricted to one status."""
    filters = (FieldFilter("status", "==", status.value),) if status else ()
    docs = await store.query(Query(CATEGORIES, filters))
    return sorted((Category.from_snapshot(doc) for doc in docs), key=_title_key)


async def list_short_categories(store: DocumentStore) -> list[Category]:
    docs = await store.query(Query(SHORT_CATEGORIES))
    return sorted((Category.from_short_snapshot(doc) for doc in docs), key=_title_key)


async def get_category(store: DocumentStore, category_id: str) -> Category:
    snapshot = await store.get(CATEGORIES, category_id)
    if snapshot is None:
        raise ValueError("Category not found")
    return Category.from_snapshot(snapshot)


async def create_category(store: DocumentStore, payload: CategoryCreate) -> Category:
    category_id = new_document_id()
    category = Category(
        id=category_id,
        title=payload.title.strip(),
        description=payload.description,
        tags=list(payload.tags),
        href=category_href(category_id),
        status=payload.status,
        image_url=payload.image_url or settings.placeholder_category_image_url,
        video_url=payload.video_url,
        featured_video_id=payload.featured_video_id,
        hint=payload.hint,
    )
    if not category.title:
        raise ValueError("Category title cannot be blank")
    await store.set(CATEGORIES, category_id, category.to_document())
    logger.info("Created %s category %s (%s)", category.status.value, category.id, category.title)
    return category


async def resolve_or_create_category(store: DocumentStore, title: str) -> tuple[Category, bool]:
    """Return the category whose title matches case-insensitively, creating a draft if none does."""
    cleaned = title.strip()
    if not cleaned:
        raise ValueError("Category title cannot be blank")
    for category in await list_categories(store):
        if category.title.casefold() == cleaned.casefold():
            return category, False
    created = await create_category(
        store,
        CategoryCreate(title=cleaned, description=DRAFT_DESCRIPTION, status=CategoryStatus.DRAFT),
    )
    return created, True


async def update_category(store: DocumentStore, category_id: str, payload: CategoryUpdate) -> Category:
    current = await get_category(store, category_id)
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    if "title" in changes:
        changes["title"] = changes["title"].strip()
        if not changes["title"]:
            raise ValueError("Category title cannot be blank")
    updated = current.model_copy(update=changes)
    await store.set(CATEGORIES, category_id, updated.to_document())
    return updated


async def publish_category(store: DocumentStore, category_id: str) -> Category:
    category = await get_category(store, category_id)
    await store.update(CATEGORIES, category_id, {"status": CategoryStatus.PUBLISHED.value})
    return category.model_copy(update={"status": CategoryStatus.PUBLISHED})


async def publish_all_drafts(store: DocumentStore) -> int:
    """Publish every draft in one batch; returns the number published."""
    drafts = await list_categories(store, status=CategoryStatus.DRAFT)
    if not drafts:
        return 0
    batch = store.batch()
    for category in drafts:
        batch.update(CATEGORIES, category.id, {"status": CategoryStatus.PUBLISHED.value})
    await batch.commit()
    logger.info("Published %d draft categories", len(drafts))
    return len(drafts)


async def delete_category(store: DocumentStore, category_id: str) -> None:
    await get_category(store, category_id)
    await store.delete(CATEGORIES, category_id)


async def delete_short_category(store: DocumentStore, name: str) -> None:
    if await store.get(SHORT_CATEGORIES, name) is None:
        raise ValueError("Category not found")
    await store.delete(SHORT_CATEGORIES, name)


async def reorder_categories(store: DocumentStore, ordered_ids: list[str]) -> None:
    """Persist display order as ``sortIndex`` in a single batch."""
    found = {doc.id for doc in await store.get_many(CATEGORIES, ordered_ids)}
    missing = [category_id for category_id in ordered_ids if category_id not in found]
    if missing:
        raise ValueError(f"Unknown category ids: {', '.join(missing)}")
    batch = store.batch()
    for index, category_id in enumerate(ordered_ids):
        batch.update(CATEGORIES, category_id, {"sortIndex": index})
    await batch.commit()


async def update_category_tags(store: DocumentStore, category_id: str, tags: list[str]) -> None:
    await store.update(CATEGORIES, category_id, {"tags": list(tags)})


def with_featured_media(categories: Iterable[Category], videos_by_id: dict[str, Video]) -> list[Category]:
    """Let a category's featured video supply its image and preview clip."""
    enhanced: list[Category] = []
    for category in categories:
        featured = videos_by_id.get(category.featured_video_id or "")
        if featured is None:
            enhanced.append(category)
            continue
        enhanced.append(
            category.model_copy(
                update={
                    "image_url": featured.thumbnail_url or category.image_url,
                    "video_url": featured.video_url or category.video_url,
                }
            )
        )
    return enhanced


def filter_categories(categories: Iterable[Category], *, search: str | None = None, tag: str | None = None) -> list[Category]:
    needle = (search or "").casefold()
    return [
        category
        for category in categories
        if needle in category.title.casefold() and (not tag or tag in category.tags)
    ]


def distinct_tags(categories: Iterable[Category]) -> list[str]:
    return sorted({tag for category in categories for tag in category.tags})


async def _long_form_videos(store: DocumentStore) -> list[Video]:
    docs = await store.query(Query(VIDEOS, (kind_filter(VideoKind.VIDEO),)))
    return [Video.from_snapshot(doc) for doc in docs]


async def admin_categories(
    store: DocumentStore, *, search: str | None = None, tag: str | None = None
) -> list[Category]:
    categories = await list_categories(store)
    videos = await store.query(Query(VIDEOS))
    videos_by_id = {doc.id: Video.from_snapshot(doc) for doc in videos}
    return filter_categories(with_featured_media(categories, videos_by_id), search=search, tag=tag)


async def browse_rows(store: DocumentStore) -> list[tuple[Category, list[Video]]]:
    """Published categories with their long-form videos, busiest rows first."""
    categories = await list_categories(store, status=CategoryStatus.PUBLISHED)
    videos = await _long_form_videos(store)
    by_category: dict[str, list[Video]] = defaultdict(list)
    for video in videos:
        for category_id in video.category_ids:
            by_category[category_id].append(video)
    videos_by_id = {video.id: video for video in videos}
    rows = [
        (category, by_category[category.id])
        for category in with_featured_media(categories, videos_by_id)
        if by_category.get(category.id)
    ]
    rows.sort(key=lambda row: len(row[1]), reverse=True)
    return rows


async def category_page(store: DocumentStore, category_id: str) -> tuple[Category, list[Video]]:
    """A published category and its long-form videos."""
    category = await get_category(store, category_id)
    if category.status is not CategoryStatus.PUBLISHED:
        raise ValueError("Category not found")
    docs = await store.query(
        Query(VIDEOS, (kind_filter(VideoKind.VIDEO), FieldFilter("categoryIds", "array-contains", category_id)))
    )
    videos = [Video.from_snapshot(doc) for doc in docs]
    videos_by_id = {video.id: video for video in videos}
    if category.featured_video_id and category.featured_video_id not in videos_by_id:
        featured = await store.get(VIDEOS, category.featured_video_id)
        if featured is not None:
            videos_by_id[featured.id] = Video.from_snapshot(featured)
    return with_featured_media([category], videos_by_id)[0], videos


async def move_category_to_bucket(store: DocumentStore, category: Category, target: str) -> None:
    """Persist a bucket move by rewriting the category's marker tags."""
    await update_category_tags(store, category.id, retag_for_bucket(category.tags, target))


def category_board(store: DocumentStore, selection: Iterable[str] = ()) -> TaxonomyBoard[Category]:
    """Organizer board over long-form categories keyed by id."""

    async def _load() -> list[Category]:
        return await list_categories(store)

    async def _persist(category: Category, target: str) -> None:
        await move_category_to_bucket(store, category, target)

    async def _remove(category: Category) -> None:
        await store.delete(CATEGORIES, category.id)

    return TaxonomyBoard(
        CATEGORY_SCHEME,
        load=_load,
        persist_move=_persist,
        remove=_remove,
        key=lambda category: category.id,
        selection=selection,
    )
