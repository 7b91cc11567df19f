"""Tag index documents and the tag organizer board."""

from __future__ import annotations

import logging
from typing import Iterable

from reelhouse.db.document_store import DocumentNotFoundError, DocumentStore, Query
from reelhouse.models.catalog import Tag, VideoKind
from reelhouse.services.taxonomy import TAG_SCHEME, TaxonomyBoard

logger = logging.getLogger("reelhouse.services.tags")


async def list_tags(store: DocumentStore, kind: VideoKind) -> list[Tag]:
    """List tag documents for one video kind sorted by name."""
    docs = await store.query(Query(kind.tag_collection))
    return sorted((Tag.from_snapshot(doc) for doc in docs), key=lambda tag: tag.name)


async def set_tag_group(store: DocumentStore, kind: VideoKind, name: str, group: str) -> None:
    """Persist the organizer group for a tag."""
    try:
        await store.update(kind.tag_collection, name, {"group": group})
    except DocumentNotFoundError as exc:
        raise ValueError("Tag not found") from exc
    logger.info("Tag %r (%s) assigned to group %s", name, kind.value, group)


async def delete_tag(store: DocumentStore, kind: VideoKind, name: str) -> None:
    """Delete a tag document; videos keep their copies of the tag string."""
    await store.delete(kind.tag_collection, name)
    logger.info("Deleted tag %r (%s)", name, kind.value)


def tag_board(store: DocumentStore, kind: VideoKind, selection: Iterable[str] = ()) -> TaxonomyBoard[Tag]:
    """Organizer board over the tags of one video kind keyed by name."""

    async def _load() -> list[Tag]:
        return await list_tags(store, kind)

    async def _persist(tag: Tag, target: str) -> None:
        await set_tag_group(store, kind, tag.name, target)

    async def _remove(tag: Tag) -> None:
        await delete_tag(store, kind, tag.name)

    return TaxonomyBoard(
        TAG_SCHEME,
        load=_load,
        persist_move=_persist,
        remove=_remove,
        key=lambda tag: tag.name,
        selection=selection,
    )
