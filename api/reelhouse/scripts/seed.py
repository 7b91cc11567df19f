"""Seed script for a demo catalogue in local/dev environments."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from reelhouse.core.log import configure_logging
from reelhouse.db.document_store import DocumentStore
from reelhouse.db.session import build_document_store
from reelhouse.models.catalog import CategoryStatus, VideoKind
from reelhouse.schema.catalog import CategoryUpdate, VideoCreate
from reelhouse.services import category_service, video_service


@dataclass(frozen=True)
class SeedCategory:
    title: str
    description: str
    tags: tuple[str, ...]


@dataclass(frozen=True)
class SeedVideo:
    kind: VideoKind
    title: str
    video_url: str
    tags: tuple[str, ...] = ()
    categories: tuple[str, ...] = field(default_factory=tuple)


SEED_CATEGORIES: tuple[SeedCategory, ...] = (
    SeedCategory("Studio Ghibli", "Hand-drawn features from the Ghibli archive.", ("Studio",)),
    SeedCategory("Stop Motion", "Frame-by-frame puppet and clay work.", ("Medium",)),
    SeedCategory("Fight Scenes", "Choreography and impact frames.", ("Action",)),
)

SEED_VIDEOS: tuple[SeedVideo, ...] = (
    SeedVideo(
        VideoKind.VIDEO,
        "Flying Sequence Breakdown",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        ("character", "camera"),
        ("Studio Ghibli",),
    ),
    SeedVideo(
        VideoKind.VIDEO,
        "Clay Walk Cycle",
        "https://vimeo.com/76979871",
        ("walk cycle",),
        ("Stop Motion",),
    ),
    SeedVideo(
        VideoKind.VIDEO,
        "Sakuga Impact Frames",
        "https://www.youtube.com/watch?v=9bZkp7q19f0",
        ("sakuga", "impact"),
        ("Fight Scenes",),
    ),
    SeedVideo(VideoKind.SHORT, "Paper Cranes", "https://vimeo.com/22439234", ("abstract",), ("Experimental",)),
    SeedVideo(VideoKind.SHORT, "Ink Drops", "https://vimeo.com/1084537", ("fx", "water"), ("Experimental",)),
)


async def seed(store: DocumentStore | None = None) -> None:
    """Populate the store with demo categories, videos and shorts; safe to re-run."""
    if store is None:
        managed = build_document_store()
        create_schema = getattr(managed, "create_schema", None)
        if create_schema is not None:
            await create_schema()
        try:
            await _seed_store(managed)
        finally:
            await managed.close()
    else:
        await _seed_store(store)


async def _seed_store(store: DocumentStore) -> None:
    category_ids = await _ensure_categories(store)
    await _ensure_videos(store, category_ids)


async def _ensure_categories(store: DocumentStore) -> dict[str, str]:
    """Create and publish the demo categories, returning title to id."""
    ids: dict[str, str] = {}
    for definition in SEED_CATEGORIES:
        category, created = await category_service.resolve_or_create_category(store, definition.title)
        if created:
            category = await category_service.update_category(
                store,
                category.id,
                CategoryUpdate(description=definition.description, tags=list(definition.tags)),
            )
        if category.status is not CategoryStatus.PUBLISHED:
            await category_service.publish_category(store, category.id)
        ids[definition.title] = category.id
    return ids


async def _ensure_videos(store: DocumentStore, category_ids: dict[str, str]) -> None:
    existing = {
        (video.kind, video.title)
        for kind in VideoKind
        for video in await video_service.list_videos(store, kind)
    }
    for definition in SEED_VIDEOS:
        if (definition.kind, definition.title) in existing:
            continue
        if definition.kind is VideoKind.SHORT:
            selected = list(definition.categories)
        else:
            selected = [category_ids[title] for title in definition.categories]
        await video_service.create_video(
            store,
            definition.kind,
            VideoCreate(
                title=definition.title,
                video_url=definition.video_url,
                tags=list(definition.tags),
                category_ids=selected,
            ),
        )


def main() -> None:
    """CLI entrypoint for seeding demo data."""
    configure_logging()
    asyncio.run(seed())


if __name__ == "__main__":
    main()
