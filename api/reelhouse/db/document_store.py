"""Document collection contract shared by every storage backend.

Invariants:
- Query results are always ordered by document id, so a cursor is just the
  last id seen on the previous page.
- A filter on a field the document does not carry never matches.
- ArrayUnion/ArrayRemove apply as set operations and are idempotent.
"""

from __future__ import annotations

import copy
import secrets
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

FilterOp = Literal["==", "!=", "array-contains", "in"]

_ID_ALPHABET = string.ascii_letters + string.digits
_MISSING = object()


class DocumentStoreError(RuntimeError):
    """Opaque failure raised by a document store backend."""


class DocumentNotFoundError(DocumentStoreError):
    """Raised when updating a document that does not exist."""

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"Document {collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


def new_document_id() -> str:
    """Return a 20 character random id in the style of Firestore auto ids."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(20))


@dataclass(slots=True)
class ArrayUnion:
    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        self.values = tuple(self.values)

    def apply(self, current: Any) -> list[Any]:
        merged = list(current) if isinstance(current, list) else []
        for value in self.values:
            if value not in merged:
                merged.append(value)
        return merged


@dataclass(slots=True)
class ArrayRemove:
    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        self.values = tuple(self.values)

    def apply(self, current: Any) -> list[Any]:
        if not isinstance(current, list):
            return []
        return [value for value in current if value not in self.values]


@dataclass(frozen=True, slots=True)
class FieldFilter:
    """Single field predicate evaluated against a document body."""

    field: str
    op: FilterOp
    value: Any

    def matches(self, data: dict[str, Any]) -> bool:
        current = data.get(self.field, _MISSING)
        if current is _MISSING:
            return False
        if self.op == "==":
            return current == self.value
        if self.op == "!=":
            return current != self.value
        if self.op == "array-contains":
            return isinstance(current, list) and self.value in current
        if self.op == "in":
            return current in self.value
        raise ValueError(f"Unsupported filter operator: {self.op}")


@dataclass(slots=True)
class Query:
    collection: str
    filters: tuple[FieldFilter, ...] = ()
    limit: int | None = None
    start_after: str | None = None

    def matches(self, data: dict[str, Any]) -> bool:
        return all(item.matches(data) for item in self.filters)


@dataclass(slots=True)
class DocumentSnapshot:
    id: str
    data: dict[str, Any] = field(default_factory=dict)


def apply_changes(data: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with field updates and array operators applied."""
    updated = copy.deepcopy(data)
    for key, value in changes.items():
        if isinstance(value, (ArrayUnion, ArrayRemove)):
            updated[key] = value.apply(updated.get(key))
        else:
            updated[key] = value
    return updated


def resolve_sentinels(changes: dict[str, Any]) -> dict[str, Any]:
    """Materialize array operators for writes that create a new document."""
    return apply_changes({}, changes)


@dataclass(slots=True)
class _BatchOp:
    kind: Literal["set", "update", "delete"]
    collection: str
    doc_id: str
    data: dict[str, Any] | None = None
    merge: bool = False


class WriteBatch:
    """Collects writes and commits them atomically through the owning store."""

    def __init__(self, store: "DocumentStore") -> None:
        self._store = store
        self._ops: list[_BatchOp] = []

    def set(self, collection: str, doc_id: str, data: dict[str, Any], *, merge: bool = False) -> "WriteBatch":
        self._ops.append(_BatchOp("set", collection, doc_id, dict(data), merge))
        return self

    def update(self, collection: str, doc_id: str, changes: dict[str, Any]) -> "WriteBatch":
        self._ops.append(_BatchOp("update", collection, doc_id, dict(changes)))
        return self

    def delete(self, collection: str, doc_id: str) -> "WriteBatch":
        self._ops.append(_BatchOp("delete", collection, doc_id))
        return self

    @property
    def operations(self) -> list[_BatchOp]:
        return list(self._ops)

    def __len__(self) -> int:
        return len(self._ops)

    async def commit(self) -> None:
        if not self._ops:
            return
        await self._store._commit_batch(self._ops)
        self._ops = []


class DocumentStore(ABC):
    """Async document collection API (Firestore semantics)."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot | None: ...

    async def get_many(self, collection: str, doc_ids: Iterable[str]) -> list[DocumentSnapshot]:
        """Fetch documents by id, preserving input order and skipping missing ids."""
        snapshots: list[DocumentSnapshot] = []
        seen: set[str] = set()
        for doc_id in doc_ids:
            if doc_id in seen:
                continue
            seen.add(doc_id)
            snapshot = await self.get(collection, doc_id)
            if snapshot is not None:
                snapshots.append(snapshot)
        return snapshots

    async def add(self, collection: str, data: dict[str, Any]) -> DocumentSnapshot:
        doc_id = new_document_id()
        await self.set(collection, doc_id, data)
        return DocumentSnapshot(id=doc_id, data=resolve_sentinels(data))

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: dict[str, Any], *, merge: bool = False) -> None: ...

    @abstractmethod
    async def update(self, collection: str, doc_id: str, changes: dict[str, Any]) -> None: ...

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None: ...

    @abstractmethod
    async def query(self, query: Query) -> list[DocumentSnapshot]: ...

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    @abstractmethod
    async def _commit_batch(self, operations: list[_BatchOp]) -> None: ...

    async def close(self) -> None:
        return None
