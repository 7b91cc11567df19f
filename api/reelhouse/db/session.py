"""Document store construction from application settings."""

from __future__ import annotations

import logging

from reelhouse.core.config import Settings, settings
from reelhouse.db.document_store import DocumentStore

logger = logging.getLogger("reelhouse.db.session")


def build_document_store(config: Settings = settings) -> DocumentStore:
    """Create the configured backend; the caller owns its lifetime."""
    if config.document_backend == "firestore":
        from reelhouse.db.firestore_store import FirestoreDocumentStore

        logger.info("Using Firestore document store (project=%s)", config.firestore_project_id or "default")
        return FirestoreDocumentStore.from_project(config.firestore_project_id)

    from reelhouse.db.sql_store import SqlDocumentStore

    logger.info("Using SQL document store (%s)", config.database_url.split("://", 1)[0])
    return SqlDocumentStore.from_url(config.database_url)
