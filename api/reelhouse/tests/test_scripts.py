from __future__ import annotations

import pytest

from reelhouse.models.catalog import CategoryStatus, VideoKind
from reelhouse.models.user import USERS
from reelhouse.scripts import seed as seed_script
from reelhouse.scripts import set_admin as set_admin_script
from reelhouse.services import category_service, user_service, video_service


@pytest.mark.asyncio
async def test_seed_is_idempotent(store):
    await seed_script.seed(store=store)
    await seed_script.seed(store=store)

    categories = await category_service.list_categories(store)
    assert len(categories) == len(seed_script.SEED_CATEGORIES)
    assert all(category.status is CategoryStatus.PUBLISHED for category in categories)
    videos = await video_service.list_videos(store, VideoKind.VIDEO)
    shorts = await video_service.list_videos(store, VideoKind.SHORT)
    assert len(videos) + len(shorts) == len(seed_script.SEED_VIDEOS)

    rows = await category_service.browse_rows(store)
    assert len(rows) == len(seed_script.SEED_CATEGORIES)


@pytest.mark.asyncio
async def test_set_admin_promotes_existing_profile(store):
    with pytest.raises(ValueError):
        await set_admin_script.set_admin("u1", store=store)
    await store.set(USERS, "u1", {"uid": "u1", "role": "user"})
    assert await set_admin_script.set_admin("u1", store=store) is True
    assert await set_admin_script.set_admin("u1", store=store) is False
    assert (await user_service.get_profile(store, "u1")).is_admin
