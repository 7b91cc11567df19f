"""Cursor pagination over document collections.

Invariants:
- Pages are ordered by document id; the cursor is the last id received.
- ``has_more`` is true exactly when the last page was full.
- At most one load is in flight per paginator; extra triggers are dropped.
- A failed load leaves items, cursor and ``has_more`` untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Awaitable, Callable, Generic, Iterable, TypeVar

import httpx

from reelhouse.db.document_store import DocumentSnapshot, DocumentStore, FieldFilter, Query

T = TypeVar("T")
PageFetcher = Callable[[str | None, int], Awaitable[list[T]]]

logger = logging.getLogger("reelhouse.services.pagination")


@dataclass(slots=True)
class Page(Generic[T]):
    items: list[T]
    next_cursor: str | None
    has_more: bool


async def fetch_page(
    store: DocumentStore,
    collection: str,
    *,
    page_size: int,
    cursor: str | None = None,
    filters: Iterable[FieldFilter] = (),
) -> Page[DocumentSnapshot]:
    """Run one page query starting after ``cursor``."""
    if page_size < 1:
        raise ValueError("Page size must be positive")
    docs = await store.query(Query(collection, tuple(filters), limit=page_size, start_after=cursor))
    next_cursor = docs[-1].id if docs else cursor
    return Page(items=docs, next_cursor=next_cursor, has_more=len(docs) == page_size)


def store_page_fetcher(
    store: DocumentStore, collection: str, filters: Iterable[FieldFilter] = ()
) -> PageFetcher[DocumentSnapshot]:
    """Build a fetcher that queries the document store directly."""
    frozen = tuple(filters)

    async def _fetch(cursor: str | None, limit: int) -> list[DocumentSnapshot]:
        page = await fetch_page(store, collection, page_size=limit, cursor=cursor, filters=frozen)
        return page.items

    return _fetch


class HttpPageFetcher(Generic[T]):
    """Fetch pages from a cursor-paginated HTTP endpoint such as ``/api/feed``."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        path: str,
        *,
        parse: Callable[[dict[str, Any]], T] | None = None,
    ) -> None:
        self._client = client
        self._path = path
        self._parse = parse

    async def __call__(self, cursor: str | None, limit: int) -> list[T]:
        params: dict[str, Any] = {"limit": limit}
        if cursor is not None:
            params["cursor"] = cursor
        response = await self._client.get(self._path, params=params)
        response.raise_for_status()
        raw_items = response.json().get("items", [])
        if self._parse is None:
            return raw_items
        return [self._parse(item) for item in raw_items]


class CursorPaginator(Generic[T]):
    """Accumulates pages of a remote collection for an infinitely scrolling list."""

    def __init__(
        self,
        fetch: PageFetcher[T],
        *,
        page_size: int,
        key: Callable[[T], str] = attrgetter("id"),
    ) -> None:
        if page_size < 1:
            raise ValueError("Page size must be positive")
        self._fetch = fetch
        self._key = key
        self.page_size = page_size
        self.items: list[T] = []
        self.cursor: str | None = None
        self.has_more = True
        self.loading = False
        self.last_error: Exception | None = None

    async def load_next_page(self, initial: bool = False) -> bool:
        """Load one page; returns False when the call was a no-op or failed.

        An initial load fetches from the beginning and replaces the list. Once a
        short page has been seen every call is a no-op until ``reset()``.
        """
        if self.loading or not self.has_more:
            return False
        self.loading = True
        try:
            page = await self._fetch(None if initial else self.cursor, self.page_size)
        except Exception as exc:
            logger.exception("Page load failed (cursor=%s)", self.cursor)
            self.last_error = exc
            return False
        finally:
            self.loading = False
        self.last_error = None
        self.items = list(page) if initial else [*self.items, *page]
        if page:
            self.cursor = self._key(page[-1])
        elif initial:
            self.cursor = None
        self.has_more = len(page) == self.page_size
        return True

    def reset(self) -> None:
        """Forget loaded pages so the next initial load starts over."""
        self.items = []
        self.cursor = None
        self.has_more = True
        self.last_error = None

    async def on_sentinel_visible(self) -> bool:
        """Called when the end-of-list sentinel scrolls into view."""
        if self.loading or not self.has_more:
            return False
        return await self.load_next_page()

    @property
    def show_sentinel(self) -> bool:
        return self.has_more
