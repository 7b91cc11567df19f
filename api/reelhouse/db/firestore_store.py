"""Cloud Firestore document store backed by the async client."""

from __future__ import annotations

import logging
from typing import Any

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter as FirestoreFieldFilter

from reelhouse.db.document_store import (
    ArrayRemove,
    ArrayUnion,
    DocumentNotFoundError,
    DocumentSnapshot,
    DocumentStore,
    DocumentStoreError,
    Query,
    _BatchOp,
)

DOCUMENT_ID_FIELD = "__name__"

logger = logging.getLogger("reelhouse.db.firestore_store")


def _to_firestore_value(value: Any) -> Any:
    if isinstance(value, ArrayUnion):
        return firestore.ArrayUnion(list(value.values))
    if isinstance(value, ArrayRemove):
        return firestore.ArrayRemove(list(value.values))
    return value


def _to_firestore_changes(changes: dict[str, Any]) -> dict[str, Any]:
    return {key: _to_firestore_value(value) for key, value in changes.items()}


class FirestoreDocumentStore(DocumentStore):
    """Thin adapter from the document store contract to Firestore."""

    def __init__(self, client: firestore.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_project(cls, project_id: str | None) -> "FirestoreDocumentStore":
        return cls(firestore.AsyncClient(project=project_id))

    def _ref(self, collection: str, doc_id: str) -> firestore.AsyncDocumentReference:
        return self._client.collection(collection).document(doc_id)

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot | None:
        try:
            snapshot = await self._ref(collection, doc_id).get()
        except gcp_exceptions.GoogleAPICallError as exc:
            raise DocumentStoreError(f"Could not read {collection}/{doc_id}") from exc
        if not snapshot.exists:
            return None
        return DocumentSnapshot(id=snapshot.id, data=snapshot.to_dict() or {})

    async def set(self, collection: str, doc_id: str, data: dict[str, Any], *, merge: bool = False) -> None:
        try:
            await self._ref(collection, doc_id).set(_to_firestore_changes(data), merge=merge)
        except gcp_exceptions.GoogleAPICallError as exc:
            raise DocumentStoreError(f"Could not write {collection}/{doc_id}") from exc

    async def update(self, collection: str, doc_id: str, changes: dict[str, Any]) -> None:
        try:
            await self._ref(collection, doc_id).update(_to_firestore_changes(changes))
        except gcp_exceptions.NotFound as exc:
            raise DocumentNotFoundError(collection, doc_id) from exc
        except gcp_exceptions.GoogleAPICallError as exc:
            raise DocumentStoreError(f"Could not update {collection}/{doc_id}") from exc

    async def delete(self, collection: str, doc_id: str) -> None:
        try:
            await self._ref(collection, doc_id).delete()
        except gcp_exceptions.GoogleAPICallError as exc:
            raise DocumentStoreError(f"Could not delete {collection}/{doc_id}") from exc

    async def query(self, query: Query) -> list[DocumentSnapshot]:
        collection_ref = self._client.collection(query.collection)
        fs_query = collection_ref
        for item in query.filters:
            fs_query = fs_query.where(filter=FirestoreFieldFilter(item.field, item.op, item.value))
        fs_query = fs_query.order_by(DOCUMENT_ID_FIELD)
        if query.start_after is not None:
            fs_query = fs_query.start_after({DOCUMENT_ID_FIELD: collection_ref.document(query.start_after)})
        if query.limit is not None:
            fs_query = fs_query.limit(query.limit)
        try:
            snapshots = await fs_query.get()
        except gcp_exceptions.GoogleAPICallError as exc:
            raise DocumentStoreError(f"Query against {query.collection} failed") from exc
        return [DocumentSnapshot(id=snap.id, data=snap.to_dict() or {}) for snap in snapshots]

    async def _commit_batch(self, operations: list[_BatchOp]) -> None:
        batch = self._client.batch()
        for op in operations:
            ref = self._ref(op.collection, op.doc_id)
            if op.kind == "set":
                batch.set(ref, _to_firestore_changes(op.data or {}), merge=op.merge)
            elif op.kind == "update":
                batch.update(ref, _to_firestore_changes(op.data or {}))
            else:
                batch.delete(ref)
        try:
            await batch.commit()
        except gcp_exceptions.NotFound as exc:
            raise DocumentStoreError("Batch referenced a missing document") from exc
        except gcp_exceptions.GoogleAPICallError as exc:
            logger.error("Batch commit of %d writes failed", len(operations))
            raise DocumentStoreError("Batch commit failed") from exc

    async def close(self) -> None:
        self._client.close()
