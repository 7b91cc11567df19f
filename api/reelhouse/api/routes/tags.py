from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from reelhouse.api.deps import get_store, require_admin
from reelhouse.db.document_store import DocumentStore
from reelhouse.models.catalog import VideoKind
from reelhouse.schema.taxonomy import MovePayload, MoveResult, TagRead, TaxonomyGroups, bucket_reads
from reelhouse.services import tag_service
from reelhouse.services.taxonomy import BoardMode

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[TagRead])
async def list_tags(
    kind: VideoKind = Query(default=VideoKind.VIDEO),
    store: DocumentStore = Depends(get_store),
) -> list[TagRead]:
    tags = await tag_service.list_tags(store, kind)
    return [TagRead(name=tag.name, group=tag.group) for tag in tags]


@router.get("/groups", response_model=TaxonomyGroups)
async def read_tag_groups(
    kind: VideoKind = Query(default=VideoKind.VIDEO),
    store: DocumentStore = Depends(get_store),
) -> TaxonomyGroups:
    board = tag_service.tag_board(store, kind)
    await board.refresh()
    return TaxonomyGroups(kind=kind, buckets=bucket_reads(board.labels()))


@router.post("/{name}/move", response_model=MoveResult)
async def move_tag(
    name: str,
    payload: MovePayload,
    kind: VideoKind = Query(default=VideoKind.VIDEO),
    store: DocumentStore = Depends(get_store),
) -> MoveResult:
    board = tag_service.tag_board(store, kind)
    await board.refresh()
    if board.find(name) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
    board.set_mode(BoardMode.EDIT)
    outcome = await board.move(name, payload.target)
    return MoveResult(outcome=outcome, buckets=bucket_reads(board.labels()))


@router.delete(
    "/{name}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def delete_tag(
    name: str,
    kind: VideoKind = Query(default=VideoKind.VIDEO),
    store: DocumentStore = Depends(get_store),
) -> None:
    board = tag_service.tag_board(store, kind)
    await board.refresh()
    if not await board.delete(name):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
