"""Cursor paginator behaviour against the store and the feed endpoint."""

from __future__ import annotations

import asyncio

import pytest

from reelhouse.models.catalog import VIDEOS
from reelhouse.services.feed_service import feed_paginator
from reelhouse.services.pagination import CursorPaginator, HttpPageFetcher, fetch_page, store_page_fetcher
from reelhouse.tests.utils import put_video


async def _seed_feed(store, count: int) -> None:
    for index in range(1, count + 1):
        await put_video(store, f"v{index:02d}", f"Video {index}")


@pytest.mark.asyncio
async def test_twelve_videos_load_in_three_pages(store):
    await _seed_feed(store, 12)
    await put_video(store, "s01", "A short", is_short=True)
    paginator = feed_paginator(store, page_size=5)

    assert await paginator.load_next_page(initial=True)
    assert [video.id for video in paginator.items] == ["v01", "v02", "v03", "v04", "v05"]
    assert paginator.has_more and paginator.show_sentinel

    assert await paginator.on_sentinel_visible()
    assert len(paginator.items) == 10
    assert paginator.cursor == "v10"

    assert await paginator.on_sentinel_visible()
    assert [video.id for video in paginator.items][-2:] == ["v11", "v12"]
    assert paginator.has_more is False
    assert paginator.show_sentinel is False

    assert await paginator.on_sentinel_visible() is False
    assert len(paginator.items) == 12


@pytest.mark.asyncio
async def test_exact_multiple_needs_one_empty_page(store):
    await _seed_feed(store, 10)
    paginator = feed_paginator(store, page_size=5)
    await paginator.load_next_page(initial=True)
    await paginator.load_next_page()
    assert paginator.has_more is True
    assert await paginator.load_next_page()
    assert len(paginator.items) == 10
    assert paginator.has_more is False
    assert paginator.cursor == "v10"


@pytest.mark.asyncio
async def test_empty_collection(store):
    paginator = feed_paginator(store, page_size=5)
    assert await paginator.load_next_page(initial=True)
    assert paginator.items == []
    assert paginator.has_more is False
    assert paginator.cursor is None


@pytest.mark.asyncio
async def test_failed_load_keeps_state():
    calls = {"count": 0}

    async def _fetch(cursor, limit):
        calls["count"] += 1
        if calls["count"] == 2:
            raise RuntimeError("network down")
        start = 0 if cursor is None else int(cursor)
        return [str(value) for value in range(start + 1, start + limit + 1)]

    paginator = CursorPaginator(_fetch, page_size=3, key=str)
    await paginator.load_next_page(initial=True)
    before = (list(paginator.items), paginator.cursor, paginator.has_more)

    assert await paginator.load_next_page() is False
    assert (paginator.items, paginator.cursor, paginator.has_more) == before
    assert isinstance(paginator.last_error, RuntimeError)
    assert paginator.loading is False

    assert await paginator.load_next_page()
    assert paginator.items == ["1", "2", "3", "4", "5", "6"]
    assert paginator.last_error is None


@pytest.mark.asyncio
async def test_trigger_while_loading_is_dropped():
    release = asyncio.Event()
    calls: list[str | None] = []

    async def _fetch(cursor, limit):
        calls.append(cursor)
        await release.wait()
        return ["a", "b"]

    paginator = CursorPaginator(_fetch, page_size=2, key=str)
    pending = asyncio.create_task(paginator.load_next_page(initial=True))
    await asyncio.sleep(0)
    assert paginator.loading is True
    assert await paginator.on_sentinel_visible() is False
    assert await paginator.load_next_page() is False
    assert await paginator.load_next_page(initial=True) is False

    release.set()
    assert await pending
    assert calls == [None]
    assert paginator.items == ["a", "b"]


@pytest.mark.asyncio
async def test_initial_load_after_exhaustion_is_a_noop():
    calls: list[str | None] = []

    async def _fetch(cursor, limit):
        calls.append(cursor)
        return ["a", "b"]

    paginator = CursorPaginator(_fetch, page_size=5, key=str)
    assert await paginator.load_next_page(initial=True)
    assert paginator.has_more is False

    assert await paginator.load_next_page(initial=True) is False
    assert calls == [None]
    assert paginator.items == ["a", "b"]


@pytest.mark.asyncio
async def test_reset_allows_loading_from_the_beginning(store):
    await _seed_feed(store, 7)
    paginator = feed_paginator(store, page_size=5)
    await paginator.load_next_page(initial=True)
    await paginator.load_next_page()
    assert paginator.has_more is False

    paginator.reset()
    assert paginator.items == [] and paginator.cursor is None
    assert await paginator.load_next_page(initial=True)
    assert [video.id for video in paginator.items] == ["v01", "v02", "v03", "v04", "v05"]
    assert paginator.has_more is True


@pytest.mark.asyncio
async def test_fetch_page_keeps_cursor_on_empty_page(store):
    await _seed_feed(store, 2)
    page = await fetch_page(store, VIDEOS, page_size=5, cursor="v02")
    assert page.items == []
    assert page.next_cursor == "v02"
    assert page.has_more is False

    with pytest.raises(ValueError):
        await fetch_page(store, VIDEOS, page_size=0)


@pytest.mark.asyncio
async def test_store_page_fetcher_drives_a_paginator(store):
    await _seed_feed(store, 4)
    paginator = CursorPaginator(store_page_fetcher(store, VIDEOS), page_size=3)
    await paginator.load_next_page(initial=True)
    await paginator.load_next_page()
    assert [doc.id for doc in paginator.items] == ["v01", "v02", "v03", "v04"]
    assert paginator.has_more is False


@pytest.mark.asyncio
async def test_http_fetcher_reads_feed_endpoint(client, store):
    await _seed_feed(store, 6)
    fetcher = HttpPageFetcher(client, "/api/feed", parse=lambda item: item["id"])
    paginator = CursorPaginator(fetcher, page_size=4, key=str)

    await paginator.load_next_page(initial=True)
    assert paginator.items == ["v01", "v02", "v03", "v04"]
    await paginator.on_sentinel_visible()
    assert paginator.items == ["v01", "v02", "v03", "v04", "v05", "v06"]
    assert paginator.has_more is False
