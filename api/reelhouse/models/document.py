"""Generic JSON document row backing the SQL document store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from reelhouse.db.base import Base

JSON_COMPATIBLE = JSON().with_variant(JSONB, "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    """One document of one collection, keyed by ``(collection, id)``."""
    __tablename__ = "documents"
    __table_args__ = (Index("ix_documents_collection_id", "collection", "id"),)

    collection: Mapped[str] = mapped_column(String(128), primary_key=True)
    id: Mapped[str] = mapped_column(String(1500), primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON_COMPATIBLE, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
