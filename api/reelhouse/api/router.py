"""API router composition for all route groups."""

from fastapi import APIRouter

from .routes import browse, categories, feed, metadata, tags, uploads, users, videos

api_router = APIRouter()
api_router.include_router(feed.router, prefix="/feed", tags=["feed"])
api_router.include_router(browse.router, prefix="/browse", tags=["browse"])
api_router.include_router(videos.videos_router, prefix="/videos", tags=["videos"])
api_router.include_router(videos.shorts_router, prefix="/shorts", tags=["shorts"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])
api_router.include_router(users.router, tags=["users"])
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(metadata.router, prefix="/metadata", tags=["metadata"])
