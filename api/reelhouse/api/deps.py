from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from reelhouse.core.security import Identity, decode_token, identity_from_claims
from reelhouse.db.document_store import DocumentStore, DocumentStoreError
from reelhouse.models.user import UserProfile
from reelhouse.services import user_service
from reelhouse.services.upload_service import UploadTracker
from reelhouse.storage import ObjectStorage

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(slots=True)
class CurrentUser:
    identity: Identity
    profile: UserProfile

    @property
    def uid(self) -> str:
        return self.identity.uid

    @property
    def is_admin(self) -> bool:
        return self.identity.admin_claim or self.profile.is_admin


def get_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.object_storage


def get_upload_tracker(request: Request) -> UploadTracker:
    return request.app.state.upload_tracker


async def _resolve_user_from_token(store: DocumentStore, token: str) -> CurrentUser:
    payload = decode_token(token)
    identity = identity_from_claims(payload) if payload else None
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    try:
        profile = await user_service.ensure_profile(store, identity)
    except DocumentStoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Profile store unavailable") from exc
    return CurrentUser(identity=identity, profile=profile)


async def get_current_user(
    store: DocumentStore = Depends(get_store),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return await _resolve_user_from_token(store, credentials.credentials)


async def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
