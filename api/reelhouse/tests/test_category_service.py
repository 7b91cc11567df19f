from __future__ import annotations

import pytest

from reelhouse.models.catalog import CATEGORIES, SHORT_CATEGORIES, CategoryStatus
from reelhouse.schema.catalog import CategoryCreate, CategoryUpdate
from reelhouse.services import category_service
from reelhouse.tests.utils import put_video


async def _published(store, title: str, **kwargs):
    return await category_service.create_category(
        store, CategoryCreate(title=title, status=CategoryStatus.PUBLISHED, **kwargs)
    )


@pytest.mark.asyncio
async def test_resolve_or_create_matches_case_insensitively(store):
    first, created = await category_service.resolve_or_create_category(store, "  Stop Motion ")
    assert created is True
    assert first.status is CategoryStatus.DRAFT
    assert first.href == f"/browse/{first.id}"

    again, created_again = await category_service.resolve_or_create_category(store, "stop motion")
    assert created_again is False
    assert again.id == first.id

    with pytest.raises(ValueError):
        await category_service.resolve_or_create_category(store, "   ")


@pytest.mark.asyncio
async def test_publish_all_drafts(store):
    await category_service.resolve_or_create_category(store, "One")
    await category_service.resolve_or_create_category(store, "Two")
    await _published(store, "Three")
    assert await category_service.publish_all_drafts(store) == 2
    assert await category_service.publish_all_drafts(store) == 0
    drafts = await category_service.list_categories(store, status=CategoryStatus.DRAFT)
    assert drafts == []


@pytest.mark.asyncio
async def test_update_category_clears_nullable_fields(store):
    category = await _published(store, "Fights", hint="combat", featured_video_id="v01")
    updated = await category_service.update_category(
        store, category.id, CategoryUpdate(featured_video_id=None, description="New")
    )
    assert updated.featured_video_id is None
    assert updated.hint == "combat"
    stored = await store.get(CATEGORIES, category.id)
    assert "featuredVideoId" not in stored.data
    assert stored.data["description"] == "New"


@pytest.mark.asyncio
async def test_reorder_validates_ids(store):
    a = await _published(store, "A")
    b = await _published(store, "B")
    await category_service.reorder_categories(store, [b.id, a.id])
    assert (await category_service.get_category(store, b.id)).sort_index == 0
    assert (await category_service.get_category(store, a.id)).sort_index == 1
    with pytest.raises(ValueError):
        await category_service.reorder_categories(store, [a.id, "missing"])


@pytest.mark.asyncio
async def test_browse_rows_order_and_featured_media(store):
    busy = await _published(store, "Busy", featured_video_id="v02")
    quiet = await _published(store, "Quiet")
    await _published(store, "Empty")
    draft, _ = await category_service.resolve_or_create_category(store, "Hidden")
    await put_video(store, "v01", "One", category_ids=[busy.id, draft.id])
    await put_video(store, "v02", "Two", category_ids=[busy.id])
    await put_video(store, "v03", "Three", category_ids=[quiet.id])
    await put_video(store, "s01", "Short", is_short=True, category_ids=[quiet.id])
    await store.update("videos", "v02", {"thumbnailUrl": "https://img/two.png"})

    rows = await category_service.browse_rows(store)
    assert [category.title for category, _ in rows] == ["Busy", "Quiet"]
    busy_row, quiet_row = rows
    assert busy_row[0].image_url == "https://img/two.png"
    assert busy_row[0].video_url == "https://vimeo.com/v02"
    assert [video.id for video in quiet_row[1]] == ["v03"]


@pytest.mark.asyncio
async def test_category_page_hides_drafts(store):
    draft, _ = await category_service.resolve_or_create_category(store, "Hidden")
    with pytest.raises(ValueError):
        await category_service.category_page(store, draft.id)
    published = await _published(store, "Shown")
    await put_video(store, "v01", "One", category_ids=[published.id])
    category, videos = await category_service.category_page(store, published.id)
    assert category.id == published.id
    assert [video.id for video in videos] == ["v01"]


@pytest.mark.asyncio
async def test_admin_filters_and_distinct_tags(store):
    await _published(store, "Ghibli", tags=["Studio", "anime"])
    await _published(store, "Clay", tags=["Medium"])
    filtered = await category_service.admin_categories(store, search="gh")
    assert [category.title for category in filtered] == ["Ghibli"]
    tagged = await category_service.admin_categories(store, tag="Medium")
    assert [category.title for category in tagged] == ["Clay"]
    categories = await category_service.list_categories(store)
    assert category_service.distinct_tags(categories) == ["Medium", "Studio", "anime"]


@pytest.mark.asyncio
async def test_short_categories(store):
    await store.set(SHORT_CATEGORIES, "Loops", {"name": "Loops"})
    categories = await category_service.list_short_categories(store)
    assert [category.title for category in categories] == ["Loops"]
    await category_service.delete_short_category(store, "Loops")
    assert await category_service.list_short_categories(store) == []
    with pytest.raises(ValueError):
        await category_service.delete_short_category(store, "Loops")
