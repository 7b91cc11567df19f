"""Media upload, upload status and signed media redirects."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import RedirectResponse

from reelhouse.api.deps import get_storage, get_upload_tracker, require_admin
from reelhouse.core.config import settings
from reelhouse.schema.media import UploadRead, UploadStatusRead
from reelhouse.services import upload_service
from reelhouse.services.upload_service import UploadTracker
from reelhouse.storage import ObjectStorage, StorageError

router = APIRouter()


@router.post(
    "/uploads",
    response_model=UploadRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def upload_media(
    file: UploadFile | None = File(default=None),
    folder: str | None = Form(default=None),
    storage: ObjectStorage = Depends(get_storage),
    tracker: UploadTracker = Depends(get_upload_tracker),
) -> UploadRead:
    """Store a thumbnail, poster or clip and return its public URL."""
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")
    content = await file.read()
    try:
        url, path = await upload_service.upload_file(
            storage,
            tracker,
            filename=file.filename,
            content=content,
            content_type=file.content_type,
            folder=folder,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Upload failed.") from exc
    return UploadRead(url=url, path=path)


@router.get("/uploads", response_model=list[UploadStatusRead], dependencies=[Depends(require_admin)])
async def list_uploads(tracker: UploadTracker = Depends(get_upload_tracker)) -> list[UploadStatusRead]:
    return [UploadStatusRead.model_validate(record) for record in tracker.list()]


@router.get("/media/{path:path}", response_class=RedirectResponse)
async def redirect_to_media(path: str, storage: ObjectStorage = Depends(get_storage)) -> RedirectResponse:
    """Redirect to a short-lived signed URL for a stored object."""
    try:
        url = await upload_service.signed_media_url(storage, path, settings.signed_url_ttl_seconds)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Media unavailable") from exc
    return RedirectResponse(url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
