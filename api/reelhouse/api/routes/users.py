"""Profile endpoints for the signed-in user's likes, saves and history."""

from fastapi import APIRouter, Depends, Response, status

from reelhouse.api.deps import CurrentUser, get_current_user, get_store
from reelhouse.db.document_store import DocumentStore
from reelhouse.schema.catalog import CategoryRead, VideoRead
from reelhouse.schema.user import LibraryRead, UserProfileRead
from reelhouse.services import user_service

router = APIRouter()

_NO_CONTENT = {
    "status_code": status.HTTP_204_NO_CONTENT,
    "response_class": Response,
    "response_model": None,
}


@router.get("/me", response_model=UserProfileRead)
async def read_current_user(current_user: CurrentUser = Depends(get_current_user)) -> UserProfileRead:
    """Return the current user's profile, created on first sign-in."""
    return UserProfileRead.model_validate(current_user.profile)


@router.get("/me/library", response_model=LibraryRead)
async def read_library(
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> LibraryRead:
    """Resolve liked videos and categories, saved shorts and recently viewed shorts."""
    library = await user_service.load_library(store, current_user.profile)
    return LibraryRead(
        liked_videos=[VideoRead.model_validate(video) for video in library.liked_videos],
        liked_categories=[CategoryRead.model_validate(category) for category in library.liked_categories],
        saved_shorts=[VideoRead.model_validate(video) for video in library.saved_shorts],
        recently_viewed_shorts=[VideoRead.model_validate(video) for video in library.recently_viewed_shorts],
    )


@router.put("/me/likes/videos/{video_id}", **_NO_CONTENT)
async def like_video(
    video_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> None:
    await user_service.like_video(store, current_user.uid, video_id)


@router.delete("/me/likes/videos/{video_id}", **_NO_CONTENT)
async def unlike_video(
    video_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> None:
    await user_service.unlike_video(store, current_user.uid, video_id)


@router.put("/me/likes/categories/{title}", **_NO_CONTENT)
async def like_category(
    title: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> None:
    await user_service.like_category(store, current_user.uid, title)


@router.delete("/me/likes/categories/{title}", **_NO_CONTENT)
async def unlike_category(
    title: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> None:
    await user_service.unlike_category(store, current_user.uid, title)


@router.put("/me/saved-shorts/{short_id}", **_NO_CONTENT)
async def save_short(
    short_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> None:
    await user_service.save_short(store, current_user.uid, short_id)


@router.delete("/me/saved-shorts/{short_id}", **_NO_CONTENT)
async def unsave_short(
    short_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> None:
    await user_service.unsave_short(store, current_user.uid, short_id)


@router.post("/me/recently-viewed/{short_id}", **_NO_CONTENT)
async def record_recently_viewed(
    short_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> None:
    await user_service.record_recently_viewed_short(store, current_user.uid, short_id)
