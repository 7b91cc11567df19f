"""SQLAlchemy-backed document store.

Invariants:
- Every public operation runs in its own transaction; batches share one.
- Query scans walk the collection in id order in bounded chunks and stop as
  soon as ``limit`` matching documents are collected.
"""

from __future__ import annotations

import copy
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from reelhouse.db.base import Base
from reelhouse.db.document_store import (
    DocumentNotFoundError,
    DocumentSnapshot,
    DocumentStore,
    DocumentStoreError,
    Query,
    _BatchOp,
    apply_changes,
    resolve_sentinels,
)
from reelhouse.models.document import Document

DEFAULT_SCAN_BATCH_SIZE = 200

logger = logging.getLogger("reelhouse.db.sql_store")


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url)


class SqlDocumentStore(DocumentStore):
    """Stores each document as a JSON body in the ``documents`` table."""

    def __init__(self, engine: AsyncEngine, *, scan_batch_size: int = DEFAULT_SCAN_BATCH_SIZE) -> None:
        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
        self._scan_batch_size = scan_batch_size

    @classmethod
    def from_url(cls, database_url: str, **kwargs: Any) -> "SqlDocumentStore":
        engine_kwargs: dict[str, Any] = {"future": True}
        if _is_memory_sqlite(database_url):
            # One shared connection keeps the in-memory database alive across sessions.
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        return cls(create_async_engine(database_url, **engine_kwargs), **kwargs)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def close(self) -> None:
        await self._engine.dispose()

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._sessions() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Document store operation failed: %s", exc.__class__.__name__)
            raise DocumentStoreError("Document store operation failed") from exc

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot | None:
        async with self._session() as session:
            row = await session.get(Document, (collection, doc_id))
            if row is None:
                return None
            return DocumentSnapshot(id=row.id, data=copy.deepcopy(row.data or {}))

    async def set(self, collection: str, doc_id: str, data: dict[str, Any], *, merge: bool = False) -> None:
        await self._commit_batch([_BatchOp("set", collection, doc_id, data, merge)])

    async def update(self, collection: str, doc_id: str, changes: dict[str, Any]) -> None:
        await self._commit_batch([_BatchOp("update", collection, doc_id, changes)])

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._commit_batch([_BatchOp("delete", collection, doc_id)])

    async def query(self, query: Query) -> list[DocumentSnapshot]:
        if query.limit is not None and query.limit <= 0:
            return []
        batch_size = self._scan_batch_size
        if query.limit is not None and not query.filters:
            batch_size = query.limit
        results: list[DocumentSnapshot] = []
        last_id = query.start_after
        async with self._session() as session:
            while True:
                stmt = select(Document).where(Document.collection == query.collection)
                if last_id is not None:
                    stmt = stmt.where(Document.id > last_id)
                stmt = stmt.order_by(Document.id.asc()).limit(batch_size)
                rows = (await session.execute(stmt)).scalars().all()
                for row in rows:
                    data = row.data or {}
                    if not query.matches(data):
                        continue
                    results.append(DocumentSnapshot(id=row.id, data=copy.deepcopy(data)))
                    if query.limit is not None and len(results) >= query.limit:
                        return results
                if len(rows) < batch_size:
                    return results
                last_id = rows[-1].id

    async def _commit_batch(self, operations: list[_BatchOp]) -> None:
        async with self._session() as session:
            for op in operations:
                await self._apply(session, op)
            await session.commit()

    async def _apply(self, session: AsyncSession, op: _BatchOp) -> None:
        row = await session.get(Document, (op.collection, op.doc_id))
        if op.kind == "delete":
            if row is not None:
                await session.delete(row)
            return
        if op.kind == "update":
            if row is None:
                raise DocumentNotFoundError(op.collection, op.doc_id)
            row.data = apply_changes(row.data or {}, op.data or {})
            return
        if row is None:
            session.add(Document(collection=op.collection, id=op.doc_id, data=resolve_sentinels(op.data or {})))
        elif op.merge:
            row.data = apply_changes(row.data or {}, op.data or {})
        else:
            row.data = resolve_sentinels(op.data or {})
