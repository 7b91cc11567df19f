"""Category administration endpoints, including the organizer board."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from reelhouse.api.deps import CurrentUser, get_store, require_admin
from reelhouse.db.document_store import DocumentStore
from reelhouse.schema.catalog import (
    CategoryCreate,
    CategoryDraftCreate,
    CategoryDraftResult,
    CategoryOrderPayload,
    CategoryRead,
    CategoryTagsPayload,
    CategoryUpdate,
    PublishAllResult,
)
from reelhouse.schema.taxonomy import MovePayload, MoveResult, TaxonomyGroups, bucket_reads
from reelhouse.services import category_service
from reelhouse.services.taxonomy import BoardMode

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[CategoryRead])
async def list_categories(
    search: str | None = Query(default=None),
    tag: str | None = Query(default=None),
    store: DocumentStore = Depends(get_store),
) -> list[CategoryRead]:
    """All long-form categories with featured media applied, filtered by title and tag."""
    categories = await category_service.admin_categories(store, search=search, tag=tag)
    return [CategoryRead.model_validate(category) for category in categories]


@router.get("/tags", response_model=list[str])
async def list_category_tags(store: DocumentStore = Depends(get_store)) -> list[str]:
    return category_service.distinct_tags(await category_service.list_categories(store))


@router.get("/groups", response_model=TaxonomyGroups)
async def read_category_groups(store: DocumentStore = Depends(get_store)) -> TaxonomyGroups:
    board = category_service.category_board(store)
    await board.refresh()
    return TaxonomyGroups(buckets=bucket_reads(board.labels()))


@router.get("/short", response_model=list[CategoryRead])
async def list_short_categories(store: DocumentStore = Depends(get_store)) -> list[CategoryRead]:
    categories = await category_service.list_short_categories(store)
    return [CategoryRead.model_validate(category) for category in categories]


@router.delete(
    "/short/{name}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def delete_short_category(name: str, store: DocumentStore = Depends(get_store)) -> None:
    try:
        await category_service.delete_short_category(store, name)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(payload: CategoryCreate, store: DocumentStore = Depends(get_store)) -> CategoryRead:
    try:
        category = await category_service.create_category(store, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return CategoryRead.model_validate(category)


@router.post("/draft", response_model=CategoryDraftResult)
async def create_draft_category(
    payload: CategoryDraftCreate, store: DocumentStore = Depends(get_store)
) -> CategoryDraftResult:
    """Reuse the category with a matching title or create a draft for it."""
    try:
        category, created = await category_service.resolve_or_create_category(store, payload.title)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return CategoryDraftResult(category=CategoryRead.model_validate(category), created=created)


@router.post("/publish-all", response_model=PublishAllResult)
async def publish_all(store: DocumentStore = Depends(get_store)) -> PublishAllResult:
    return PublishAllResult(published=await category_service.publish_all_drafts(store))


@router.put(
    "/order",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def reorder_categories(payload: CategoryOrderPayload, store: DocumentStore = Depends(get_store)) -> None:
    try:
        await category_service.reorder_categories(store, payload.category_ids)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/{category_id}", response_model=CategoryRead)
async def read_category(category_id: str, store: DocumentStore = Depends(get_store)) -> CategoryRead:
    try:
        category = await category_service.get_category(store, category_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CategoryRead.model_validate(category)


@router.put("/{category_id}", response_model=CategoryRead)
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    store: DocumentStore = Depends(get_store),
) -> CategoryRead:
    try:
        category = await category_service.update_category(store, category_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CategoryRead.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def delete_category(category_id: str, store: DocumentStore = Depends(get_store)) -> None:
    try:
        await category_service.delete_category(store, category_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("/{category_id}/publish", response_model=CategoryRead)
async def publish_category(category_id: str, store: DocumentStore = Depends(get_store)) -> CategoryRead:
    try:
        category = await category_service.publish_category(store, category_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CategoryRead.model_validate(category)


@router.put("/{category_id}/tags", response_model=CategoryRead)
async def update_category_tags(
    category_id: str,
    payload: CategoryTagsPayload,
    store: DocumentStore = Depends(get_store),
) -> CategoryRead:
    try:
        await category_service.get_category(store, category_id)
        await category_service.update_category_tags(store, category_id, payload.tags)
        category = await category_service.get_category(store, category_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CategoryRead.model_validate(category)


@router.post("/{category_id}/move", response_model=MoveResult)
async def move_category(
    category_id: str,
    payload: MovePayload,
    store: DocumentStore = Depends(get_store),
) -> MoveResult:
    """Drop a category onto another bucket of the organizer board."""
    board = category_service.category_board(store)
    await board.refresh()
    if board.find(category_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    board.set_mode(BoardMode.EDIT)
    outcome = await board.move(category_id, payload.target)
    return MoveResult(outcome=outcome, buckets=bucket_reads(board.labels()))
