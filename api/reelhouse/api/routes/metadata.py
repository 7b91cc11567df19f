from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from reelhouse.api.deps import require_admin
from reelhouse.schema.media import OEmbedRequest, VideoMetadataRead
from reelhouse.services import metadata_service

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/oembed", response_model=VideoMetadataRead)
async def fetch_oembed(payload: OEmbedRequest) -> VideoMetadataRead:
    """Prefill a video form from a YouTube or Vimeo link."""
    try:
        metadata = await metadata_service.fetch_metadata(payload.url)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except metadata_service.MetadataError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return VideoMetadataRead.model_validate(metadata)
