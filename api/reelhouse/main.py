"""FastAPI application entrypoint.

Invariants:
- The document store, object storage and upload tracker are created once per
  process in the lifespan and reached through ``app.state``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reelhouse.api.router import api_router
from reelhouse.core.config import settings
from reelhouse.core.log import configure_logging
from reelhouse.db.document_store import DocumentStoreError
from reelhouse.db.session import build_document_store
from reelhouse.services.upload_service import UploadTracker
from reelhouse.storage import build_object_storage

configure_logging()
logger = logging.getLogger("reelhouse.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = build_document_store(settings)
    create_schema = getattr(store, "create_schema", None)
    if create_schema is not None:
        await create_schema()
    storage = build_object_storage(settings)
    app.state.document_store = store
    app.state.object_storage = storage
    app.state.upload_tracker = UploadTracker()
    logger.info("%s started (%s)", settings.app_name, settings.environment)
    try:
        yield
    finally:
        await storage.close()
        await store.close()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix=settings.api_prefix)


@app.exception_handler(DocumentStoreError)
async def _document_store_error(request: Request, exc: DocumentStoreError) -> JSONResponse:
    """Report backend failures as a bad gateway without leaking details."""
    logger.error("Document store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "Document store unavailable"},
    )


@app.get("/health", tags=["internal"])
@app.get(f"{settings.api_prefix}/health", tags=["internal"])
async def health() -> dict[str, Any]:
    return {"status": "ok", "app": settings.app_name}
