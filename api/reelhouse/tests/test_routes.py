"""HTTP surface: public reads, admin gating and error mapping."""

from __future__ import annotations

import pytest

from reelhouse.models.catalog import TAGS
from reelhouse.models.user import USERS
from reelhouse.tests.utils import auth_headers, put_video


@pytest.mark.asyncio
async def test_health(client):
    for path in ("/health", "/api/health"):
        res = await client.get(path)
        assert res.status_code == 200
        assert res.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_feed_endpoint_pages(client, store):
    for index in range(1, 8):
        await put_video(store, f"v{index:02d}", f"Video {index}")
    first = (await client.get("/api/feed", params={"limit": 5})).json()
    assert [item["id"] for item in first["items"]] == ["v01", "v02", "v03", "v04", "v05"]
    assert first["has_more"] is True
    assert first["next_cursor"] == "v05"

    second = (await client.get("/api/feed", params={"limit": 5, "cursor": "v05"})).json()
    assert [item["id"] for item in second["items"]] == ["v06", "v07"]
    assert second["has_more"] is False

    assert (await client.get("/api/feed", params={"limit": 0})).status_code == 422


@pytest.mark.asyncio
async def test_admin_routes_reject_regular_users(client):
    payload = {"title": "Nope"}
    assert (await client.post("/api/videos", json=payload)).status_code == 401
    res = await client.post("/api/videos", json=payload, headers=auth_headers("viewer"))
    assert res.status_code == 403
    assert (await client.get("/api/categories", headers=auth_headers("viewer"))).status_code == 403


@pytest.mark.asyncio
async def test_admin_role_from_profile(client, store):
    headers = auth_headers("editor")
    await client.get("/api/me", headers=headers)
    await store.update(USERS, "editor", {"role": "admin"})
    res = await client.post("/api/videos", json={"title": "Allowed"}, headers=headers)
    assert res.status_code == 201


@pytest.mark.asyncio
async def test_video_crud_flow(client):
    admin = auth_headers("admin", admin=True)
    res = await client.post(
        "/api/videos",
        json={"title": "Punch", "tags": ["Impact"], "video_url": "https://vimeo.com/9"},
        headers=admin,
    )
    assert res.status_code == 201
    video = res.json()
    assert video["tags"] == ["impact"]

    res = await client.put(f"/api/videos/{video['id']}", json={"description": "Frames"}, headers=admin)
    assert res.status_code == 200
    assert res.json()["description"] == "Frames"

    assert (await client.get(f"/api/videos/{video['id']}")).status_code == 200
    assert (await client.get(f"/api/shorts/{video['id']}")).status_code == 404

    res = await client.delete(f"/api/videos/{video['id']}", headers=admin)
    assert res.status_code == 204
    assert (await client.get(f"/api/videos/{video['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_short_detail_lists_related(client, store):
    await put_video(store, "s01", "Main", is_short=True, category_ids=["Loops"])
    await put_video(store, "s02", "Other", is_short=True, category_ids=["Loops"])
    res = await client.get("/api/shorts/s01")
    assert res.status_code == 200
    body = res.json()
    assert body["categories"] == ["Loops"]
    assert [item["id"] for item in body["related"]] == ["s02"]


@pytest.mark.asyncio
async def test_category_admin_flow(client):
    admin = auth_headers("admin", admin=True)
    res = await client.post("/api/categories/draft", json={"title": "Ghibli"}, headers=admin)
    assert res.status_code == 200
    assert res.json()["created"] is True
    category_id = res.json()["category"]["id"]

    res = await client.put(f"/api/categories/{category_id}/tags", json={"tags": ["Studio"]}, headers=admin)
    assert res.json()["tags"] == ["Studio"]

    groups = (await client.get("/api/categories/groups", headers=admin)).json()
    assert {bucket["name"]: bucket["labels"] for bucket in groups["buckets"]}["Studio"] == [category_id]

    res = await client.post(f"/api/categories/{category_id}/move", json={"target": "Action"}, headers=admin)
    assert res.json()["outcome"] == "moved"

    res = await client.post("/api/categories/publish-all", headers=admin)
    assert res.json() == {"published": 1}
    assert (await client.get(f"/api/browse/{category_id}")).status_code == 200
    assert (await client.get("/api/categories/missing", headers=admin)).status_code == 404
    res = await client.put("/api/categories/order", json={"category_ids": ["missing"]}, headers=admin)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_tag_routes(client, store):
    admin = auth_headers("admin", admin=True)
    await store.set(TAGS, "robot", {"name": "robot"})
    listed = (await client.get("/api/tags", params={"kind": "video"}, headers=admin)).json()
    assert listed == [{"name": "robot", "group": None}]

    res = await client.post("/api/tags/robot/move", json={"target": "Uncategorized"}, headers=admin)
    assert res.json()["outcome"] == "moved"
    assert (await store.get(TAGS, "robot")).data["group"] == "Uncategorized"

    assert (await client.post("/api/tags/ghost/move", json={"target": "Uncategorized"}, headers=admin)).status_code == 404
    assert (await client.delete("/api/tags/robot", headers=admin)).status_code == 204
    assert (await client.delete("/api/tags/robot", headers=admin)).status_code == 404


@pytest.mark.asyncio
async def test_store_failures_map_to_bad_gateway(client, store, monkeypatch):
    from reelhouse.db.document_store import DocumentStoreError

    async def _broken(*args, **kwargs):
        raise DocumentStoreError("boom")

    monkeypatch.setattr(store, "query", _broken)
    res = await client.get("/api/browse")
    assert res.status_code == 502
    assert res.json()["detail"] == "Document store unavailable"
