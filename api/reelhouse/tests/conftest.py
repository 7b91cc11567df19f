"""Shared pytest fixtures for API tests and document store isolation."""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from reelhouse.api.deps import get_storage, get_store, get_upload_tracker
from reelhouse.core.config import settings
from reelhouse.db.sql_store import SqlDocumentStore
from reelhouse.main import app
from reelhouse.services.upload_service import UploadTracker
from reelhouse.storage.local import LocalObjectStorage

TEST_BASE_URL = "http://testserver"


@pytest_asyncio.fixture()
async def store() -> SqlDocumentStore:
    store = SqlDocumentStore.from_url(settings.test_database_url or "sqlite+aiosqlite://")
    await store.create_schema()
    try:
        yield store
    finally:
        await store.drop_schema()
        await store.close()


@pytest.fixture()
def storage(tmp_path) -> LocalObjectStorage:
    return LocalObjectStorage(tmp_path / "media", f"{TEST_BASE_URL}/uploads")


@pytest.fixture()
def tracker() -> UploadTracker:
    return UploadTracker()


@pytest_asyncio.fixture()
async def client(store, storage, tracker) -> AsyncClient:
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_upload_tracker] = lambda: tracker
    async with AsyncClient(transport=ASGITransport(app=app), base_url=TEST_BASE_URL) as async_client:
        yield async_client
    app.dependency_overrides.clear()
