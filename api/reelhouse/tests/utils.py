"""Shared helpers for API tests."""

from __future__ import annotations

import uuid

from reelhouse.core.security import create_access_token
from reelhouse.db.document_store import DocumentStore
from reelhouse.models.catalog import VIDEOS


def auth_headers(uid: str | None = None, *, admin: bool = False, email: str | None = None) -> dict[str, str]:
    """Bearer headers for a signed identity token."""
    subject = uid or f"user-{uuid.uuid4().hex[:8]}"
    claims = {"email": email or f"{subject}@example.com", "name": subject.title()}
    if admin:
        claims["admin"] = True
    return {"Authorization": f"Bearer {create_access_token(subject, **claims)}"}


async def put_video(
    store: DocumentStore,
    video_id: str,
    title: str,
    *,
    is_short: bool = False,
    category_ids: list[str] | None = None,
    tags: list[str] | None = None,
) -> None:
    """Write a video document with a fixed id, bypassing the service layer."""
    await store.set(
        VIDEOS,
        video_id,
        {
            "title": title,
            "videoUrl": f"https://vimeo.com/{video_id}",
            "isShort": is_short,
            "categoryIds": category_ids or [],
            "tags": tags or [],
        },
    )
