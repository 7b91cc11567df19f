from __future__ import annotations

import pytest

from reelhouse.db.document_store import (
    ArrayRemove,
    ArrayUnion,
    DocumentNotFoundError,
    FieldFilter,
    Query,
)


@pytest.mark.asyncio
async def test_set_get_and_merge(store):
    await store.set("things", "a", {"name": "first", "group": "Action & Combat"})
    await store.set("things", "a", {"name": "renamed"}, merge=True)
    snapshot = await store.get("things", "a")
    assert snapshot.data == {"name": "renamed", "group": "Action & Combat"}

    await store.set("things", "a", {"name": "replaced"})
    assert (await store.get("things", "a")).data == {"name": "replaced"}
    assert await store.get("things", "missing") is None


@pytest.mark.asyncio
async def test_update_missing_document_raises(store):
    with pytest.raises(DocumentNotFoundError):
        await store.update("things", "ghost", {"name": "x"})


@pytest.mark.asyncio
async def test_array_operators_are_idempotent(store):
    await store.set("users", "u1", {"likedVideoIds": ["v1"]})
    await store.update("users", "u1", {"likedVideoIds": ArrayUnion(["v2"])})
    await store.update("users", "u1", {"likedVideoIds": ArrayUnion(["v2", "v1"])})
    assert (await store.get("users", "u1")).data["likedVideoIds"] == ["v1", "v2"]

    await store.update("users", "u1", {"likedVideoIds": ArrayRemove(["v1"])})
    await store.update("users", "u1", {"likedVideoIds": ArrayRemove(["v1"])})
    assert (await store.get("users", "u1")).data["likedVideoIds"] == ["v2"]


@pytest.mark.asyncio
async def test_query_orders_by_id_and_pages_after_cursor(store):
    for doc_id in ("c", "a", "d", "b"):
        await store.set("things", doc_id, {"n": doc_id})
    first = await store.query(Query("things", limit=2))
    assert [doc.id for doc in first] == ["a", "b"]
    second = await store.query(Query("things", limit=2, start_after="b"))
    assert [doc.id for doc in second] == ["c", "d"]
    assert await store.query(Query("things", limit=2, start_after="d")) == []


@pytest.mark.asyncio
async def test_filters_never_match_missing_fields(store):
    await store.set("videos", "v1", {"title": "Long", "isShort": False, "tags": ["fx"]})
    await store.set("videos", "v2", {"title": "Short", "isShort": True, "tags": ["walk"]})
    await store.set("videos", "v3", {"title": "Legacy"})

    not_short = await store.query(Query("videos", (FieldFilter("isShort", "!=", True),)))
    assert [doc.id for doc in not_short] == ["v1"]

    tagged = await store.query(Query("videos", (FieldFilter("tags", "array-contains", "walk"),)))
    assert [doc.id for doc in tagged] == ["v2"]

    titled = await store.query(Query("videos", (FieldFilter("title", "in", ["Legacy", "Long"]),)))
    assert [doc.id for doc in titled] == ["v1", "v3"]


@pytest.mark.asyncio
async def test_filtered_query_limit_spans_scan_chunks(store):
    store._scan_batch_size = 3
    for index in range(10):
        await store.set("videos", f"v{index:02d}", {"isShort": index % 2 == 0})
    docs = await store.query(Query("videos", (FieldFilter("isShort", "==", True),), limit=4))
    assert [doc.id for doc in docs] == ["v00", "v02", "v04", "v06"]


@pytest.mark.asyncio
async def test_batch_is_atomic(store):
    batch = store.batch()
    batch.set("things", "kept", {"n": 1})
    batch.update("things", "ghost", {"n": 2})
    with pytest.raises(DocumentNotFoundError):
        await batch.commit()
    assert await store.get("things", "kept") is None


@pytest.mark.asyncio
async def test_get_many_preserves_order_and_skips_missing(store):
    await store.set("things", "x", {})
    await store.set("things", "y", {})
    docs = await store.get_many("things", ["y", "missing", "x", "y"])
    assert [doc.id for doc in docs] == ["y", "x"]


@pytest.mark.asyncio
async def test_add_assigns_random_id(store):
    snapshot = await store.add("things", {"tags": ArrayUnion(["a", "a"])})
    assert len(snapshot.id) == 20
    assert (await store.get("things", snapshot.id)).data == {"tags": ["a"]}
