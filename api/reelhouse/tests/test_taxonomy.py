from __future__ import annotations

import asyncio

import pytest

from reelhouse.models.catalog import TAGS, Category, Tag, VideoKind
from reelhouse.services import category_service, tag_service
from reelhouse.services.taxonomy import (
    CATEGORY_SCHEME,
    TAG_SCHEME,
    BoardMode,
    MoveOutcome,
    TaxonomyBoard,
    classify,
    retag_for_bucket,
)

TAG_NAMES = ["fight choreography", "water fx", "walk cycle", "robot", "storyboard", "Smoke Sim"]


def _flatten(groups):
    return sorted(label for items in groups.values() for label in items)


def test_every_tag_lands_in_exactly_one_bucket():
    tags = [Tag(name=name) for name in TAG_NAMES]
    groups = classify(tags, TAG_SCHEME)
    assert list(groups) == TAG_SCHEME.names
    names = {bucket: [tag.name for tag in items] for bucket, items in groups.items()}
    assert _flatten(names) == sorted(TAG_NAMES)
    assert names["Action & Combat"] == ["fight choreography"]
    assert names["Effects & Technical"] == ["water fx", "Smoke Sim"]
    assert names["Character & Movement"] == ["walk cycle"]
    assert names["Subject & Genre"] == ["robot"]
    assert names["Uncategorized"] == ["storyboard"]


def test_classification_is_idempotent():
    tags = [Tag(name=name) for name in TAG_NAMES]
    first = classify(tags, TAG_SCHEME)
    regrouped = classify([tag for items in first.values() for tag in items], TAG_SCHEME)
    assert regrouped == first


def test_persisted_group_overrides_keywords():
    tag = Tag(name="fight choreography", group="Subject & Genre")
    assert TAG_SCHEME.bucket_for(tag) == "Subject & Genre"


def test_categories_use_first_matching_marker():
    categories = [
        Category(id="1", title="Ghibli", tags=["Studio", "Action"]),
        Category(id="2", title="Clay", tags=["Medium"]),
        Category(id="3", title="Misc", tags=["mood"]),
    ]
    groups = classify(categories, CATEGORY_SCHEME)
    assert [c.id for c in groups["Studio"]] == ["1"]
    assert groups["Action"] == []
    assert [c.id for c in groups["Medium"]] == ["2"]
    assert [c.id for c in groups["Other"]] == ["3"]


def test_retag_for_bucket_swaps_markers():
    assert retag_for_bucket(["Studio", "anime"], "Medium") == ["anime", "Medium"]
    assert retag_for_bucket(["Studio", "anime"], "Other") == ["anime"]


def _static_board(labels, persist):
    async def _load():
        return [Tag(name=label) for label in labels]

    async def _remove(tag):
        return None

    return TaxonomyBoard(TAG_SCHEME, load=_load, persist_move=persist, remove=_remove, key=lambda tag: tag.name)


@pytest.mark.asyncio
async def test_failed_move_reverts_to_store_state():
    async def _persist(tag, target):
        raise RuntimeError("permission denied")

    board = _static_board(["walk cycle", "robot"], _persist)
    await board.refresh()
    before = board.labels()
    board.set_mode(BoardMode.EDIT)

    assert await board.move("walk cycle", "Subject & Genre") is MoveOutcome.FAILED
    assert board.labels() == before


@pytest.mark.asyncio
async def test_failed_move_and_failed_refresh_restores_snapshot():
    fail = {"load": False}

    async def _load():
        if fail["load"]:
            raise RuntimeError("offline")
        return [Tag(name="robot")]

    async def _persist(tag, target):
        fail["load"] = True
        raise RuntimeError("offline")

    async def _remove(tag):
        return None

    board = TaxonomyBoard(TAG_SCHEME, load=_load, persist_move=_persist, remove=_remove, key=lambda tag: tag.name)
    await board.refresh()
    before = board.labels()
    board.set_mode(BoardMode.EDIT)
    assert await board.move("robot", "Uncategorized") is MoveOutcome.FAILED
    assert board.labels() == before


@pytest.mark.asyncio
async def test_noop_moves():
    async def _persist(tag, target):
        raise AssertionError("should not persist")

    board = _static_board(["robot"], _persist)
    await board.refresh()
    assert board.mode is BoardMode.SELECT
    assert await board.move("robot", "Uncategorized") is MoveOutcome.NOOP
    assert board.labels()["Subject & Genre"] == ["robot"]

    board.set_mode(BoardMode.EDIT)
    assert await board.move("robot", None) is MoveOutcome.NOOP
    assert await board.move("robot", "Subject & Genre") is MoveOutcome.NOOP
    assert await board.move("robot", "Nowhere") is MoveOutcome.NOOP
    assert await board.move("unknown", "Uncategorized") is MoveOutcome.NOOP


@pytest.mark.asyncio
async def test_move_shows_in_target_bucket_while_write_is_pending():
    started = asyncio.Event()
    release = asyncio.Event()

    async def _persist(tag, target):
        started.set()
        await release.wait()
        raise RuntimeError("permission denied")

    board = _static_board(["walk cycle", "robot"], _persist)
    await board.refresh()
    before = board.labels()
    board.set_mode(BoardMode.EDIT)

    pending = asyncio.create_task(board.move("walk cycle", "Subject & Genre"))
    await started.wait()
    assert board.labels()["Subject & Genre"] == ["robot", "walk cycle"]
    assert board.labels()["Character & Movement"] == []

    release.set()
    assert await pending is MoveOutcome.FAILED
    assert board.labels() == before


def test_toggle_only_in_select_mode():
    board = _static_board([], None)
    assert board.toggle("robot")
    assert board.selection == ["robot"]
    assert board.toggle("robot")
    assert board.selection == []
    board.set_mode(BoardMode.EDIT)
    assert board.toggle("robot") is False
    assert board.selection == []


@pytest.mark.asyncio
async def test_tag_move_persists_group(store):
    await store.set(TAGS, "fight choreography", {"name": "fight choreography"})
    await store.set(TAGS, "robot", {"name": "robot"})
    board = tag_service.tag_board(store, VideoKind.VIDEO)
    await board.refresh()
    board.set_mode(BoardMode.EDIT)
    assert await board.move("fight choreography", "Uncategorized") is MoveOutcome.MOVED
    assert (await store.get(TAGS, "fight choreography")).data["group"] == "Uncategorized"

    fresh = tag_service.tag_board(store, VideoKind.VIDEO)
    await fresh.refresh()
    assert "fight choreography" in fresh.labels()["Uncategorized"]


@pytest.mark.asyncio
async def test_tag_delete_removes_from_board_and_selection(store):
    await store.set(TAGS, "robot", {"name": "robot"})
    board = tag_service.tag_board(store, VideoKind.VIDEO, selection=["robot"])
    await board.refresh()
    assert await board.delete("robot")
    assert _flatten(board.labels()) == []
    assert board.selection == []
    assert await store.get(TAGS, "robot") is None
    assert await board.delete("robot") is False


@pytest.mark.asyncio
async def test_category_move_rewrites_marker_tags(store):
    created = await category_service.resolve_or_create_category(store, "Ghibli")
    category = created[0]
    await category_service.update_category_tags(store, category.id, ["Studio", "anime"])

    board = category_service.category_board(store)
    await board.refresh()
    assert board.labels()["Studio"] == [category.id]
    board.set_mode(BoardMode.EDIT)
    assert await board.move(category.id, "Medium") is MoveOutcome.MOVED
    stored = await category_service.get_category(store, category.id)
    assert stored.tags == ["anime", "Medium"]
