"""User profiles and affinity lists (likes, saved shorts, recently viewed).

Affinity lists are updated only with the store's array-union/array-remove
operators, so repeated or concurrent calls never duplicate entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from reelhouse.core.security import Identity
from reelhouse.db.document_store import ArrayRemove, ArrayUnion, DocumentNotFoundError, DocumentStore
from reelhouse.models.catalog import VIDEOS, Category, Video
from reelhouse.models.user import USERS, AffinityList, UserProfile, UserRole
from reelhouse.services import category_service

logger = logging.getLogger("reelhouse.services.users")


async def get_profile(store: DocumentStore, uid: str) -> UserProfile | None:
    snapshot = await store.get(USERS, uid)
    if snapshot is None:
        logger.warning("No user profile found for uid %s", uid)
        return None
    return UserProfile.from_snapshot(snapshot)


async def ensure_profile(store: DocumentStore, identity: Identity) -> UserProfile:
    """Create the profile on first sight of an identity; safe to call on every request."""
    snapshot = await store.get(USERS, identity.uid)
    if snapshot is not None:
        return UserProfile.from_snapshot(snapshot)
    profile = UserProfile(
        id=identity.uid,
        uid=identity.uid,
        email=identity.email,
        display_name=identity.display_name,
        photo_url=identity.photo_url,
        role=UserRole.USER,
    )
    await store.set(USERS, identity.uid, profile.to_document())
    logger.info("Created profile for %s", identity.uid)
    return profile


async def set_role(store: DocumentStore, uid: str, role: UserRole) -> None:
    try:
        await store.update(USERS, uid, {"role": role.value})
    except DocumentNotFoundError as exc:
        raise ValueError("User profile not found") from exc


async def add_affinity(store: DocumentStore, uid: str, field: AffinityList, value: str) -> None:
    """Add ``value`` to an affinity list, creating the profile by merge if it is missing."""
    try:
        await store.update(USERS, uid, {field.value: ArrayUnion([value])})
    except DocumentNotFoundError:
        await store.set(USERS, uid, {"uid": uid, field.value: [value]}, merge=True)


async def remove_affinity(store: DocumentStore, uid: str, field: AffinityList, value: str) -> None:
    try:
        await store.update(USERS, uid, {field.value: ArrayRemove([value])})
    except DocumentNotFoundError:
        logger.info("Skipped removing %s from %s; profile %s does not exist", value, field.value, uid)


async def like_video(store: DocumentStore, uid: str, video_id: str) -> None:
    await add_affinity(store, uid, AffinityList.LIKED_VIDEOS, video_id)


async def unlike_video(store: DocumentStore, uid: str, video_id: str) -> None:
    await remove_affinity(store, uid, AffinityList.LIKED_VIDEOS, video_id)


async def like_category(store: DocumentStore, uid: str, category_title: str) -> None:
    await add_affinity(store, uid, AffinityList.LIKED_CATEGORIES, category_title)


async def unlike_category(store: DocumentStore, uid: str, category_title: str) -> None:
    await remove_affinity(store, uid, AffinityList.LIKED_CATEGORIES, category_title)


async def save_short(store: DocumentStore, uid: str, short_id: str) -> None:
    await add_affinity(store, uid, AffinityList.SAVED_SHORTS, short_id)


async def unsave_short(store: DocumentStore, uid: str, short_id: str) -> None:
    await remove_affinity(store, uid, AffinityList.SAVED_SHORTS, short_id)


async def record_recently_viewed_short(store: DocumentStore, uid: str, short_id: str) -> None:
    await add_affinity(store, uid, AffinityList.RECENTLY_VIEWED_SHORTS, short_id)


@dataclass(slots=True)
class Library:
    liked_videos: list[Video]
    liked_categories: list[Category]
    saved_shorts: list[Video]
    recently_viewed_shorts: list[Video]


async def _videos(store: DocumentStore, ids: list[str], *, shorts_only: bool = False) -> list[Video]:
    videos = [Video.from_snapshot(doc) for doc in await store.get_many(VIDEOS, ids)]
    if shorts_only:
        return [video for video in videos if video.is_short]
    return videos


async def load_library(store: DocumentStore, profile: UserProfile) -> Library:
    """Resolve a profile's affinity lists into documents, skipping dangling references."""
    liked_titles = set(profile.liked_category_titles)
    categories = [
        category
        for category in await category_service.list_categories(store)
        if category.title in liked_titles
    ]
    return Library(
        liked_videos=await _videos(store, profile.liked_video_ids),
        liked_categories=categories,
        saved_shorts=await _videos(store, profile.saved_short_ids, shorts_only=True),
        recently_viewed_shorts=await _videos(store, profile.recently_viewed_short_ids, shorts_only=True),
    )
