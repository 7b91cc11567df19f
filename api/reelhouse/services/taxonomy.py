"""Bucket classification and drag-style reassignment for tags and categories.

Invariants:
- Classification is pure: every label lands in exactly one bucket, the first
  whose predicate matches, otherwise the fallback bucket.
- Buckets are a presentation aid; the persisted signal is the tag ``group``
  field or the category marker tag, so buckets can always be re-derived.
- A board never keeps an optimistic move whose write failed.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterable, Sequence, TypeVar

from reelhouse.models.catalog import Category, Tag
from reelhouse.services.speculation import apply_speculatively

T = TypeVar("T")

logger = logging.getLogger("reelhouse.services.taxonomy")


@dataclass(frozen=True, slots=True)
class Bucket(Generic[T]):
    name: str
    predicate: Callable[[T], bool]


@dataclass(frozen=True, slots=True)
class BucketScheme(Generic[T]):
    buckets: tuple[Bucket[T], ...]
    fallback: str

    @property
    def names(self) -> list[str]:
        return [bucket.name for bucket in self.buckets] + [self.fallback]

    @property
    def bucket_names(self) -> list[str]:
        return [bucket.name for bucket in self.buckets]

    def bucket_for(self, item: T) -> str:
        for bucket in self.buckets:
            if bucket.predicate(item):
                return bucket.name
        return self.fallback


def classify(items: Iterable[T], scheme: BucketScheme[T]) -> dict[str, list[T]]:
    """Partition items into the scheme's buckets, keeping declared order."""
    groups: dict[str, list[T]] = {name: [] for name in scheme.names}
    for item in items:
        groups[scheme.bucket_for(item)].append(item)
    return groups


def keyword_matcher(keywords: Sequence[str]) -> Callable[[str], bool]:
    lowered = tuple(keyword.lower() for keyword in keywords)

    def _matches(label: str) -> bool:
        text = label.lower()
        return any(keyword in text for keyword in lowered)

    return _matches


TAG_FALLBACK = "Uncategorized"
TAG_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Action & Combat", ("action", "fight", "combat", "impact", "explosion", "sakuga")),
    ("Effects & Technical", ("fx", "elemental", "water", "fire", "smoke", "camera", "layout", "cinematography")),
    ("Character & Movement", ("character", "acting", "emotion", "walk", "run", "cycle", "locomotion", "fundamentals")),
    ("Subject & Genre", ("creature", "monster", "animal", "mecha", "robot", "sci-fi", "storytelling", "abstract")),
)

CATEGORY_FALLBACK = "Other"
CATEGORY_MARKERS: tuple[str, ...] = ("Studio", "Medium", "Action")


def _tag_bucket(name: str, keywords: Sequence[str]) -> Bucket[Tag]:
    matches = keyword_matcher(keywords)

    def _predicate(tag: Tag) -> bool:
        if tag.group:
            return tag.group == name
        return matches(tag.name)

    return Bucket(name, _predicate)


def _marker_bucket(marker: str) -> Bucket[Category]:
    return Bucket(marker, lambda category: marker in category.tags)


TAG_SCHEME: BucketScheme[Tag] = BucketScheme(
    buckets=tuple(_tag_bucket(name, keywords) for name, keywords in TAG_KEYWORDS),
    fallback=TAG_FALLBACK,
)

CATEGORY_SCHEME: BucketScheme[Category] = BucketScheme(
    buckets=tuple(_marker_bucket(marker) for marker in CATEGORY_MARKERS),
    fallback=CATEGORY_FALLBACK,
)


def retag_for_bucket(tags: Sequence[str], target: str) -> list[str]:
    """Strip every bucket marker and add the target's marker unless it is the fallback."""
    retagged = [tag for tag in tags if tag not in CATEGORY_MARKERS]
    if target != CATEGORY_FALLBACK:
        retagged.append(target)
    return retagged


class BoardMode(str, enum.Enum):
    SELECT = "select"
    EDIT = "edit"


class MoveOutcome(str, enum.Enum):
    MOVED = "moved"
    NOOP = "noop"
    FAILED = "failed"


class TaxonomyBoard(Generic[T]):
    """Organizer state for one label collection.

    In select mode clicks toggle labels in the working selection; in edit mode
    labels are moved between buckets.
    """

    def __init__(
        self,
        scheme: BucketScheme[T],
        *,
        load: Callable[[], Awaitable[list[T]]],
        persist_move: Callable[[T, str], Awaitable[None]],
        remove: Callable[[T], Awaitable[None]],
        key: Callable[[T], str],
        selection: Iterable[str] = (),
    ) -> None:
        self.scheme = scheme
        self._load = load
        self._persist_move = persist_move
        self._remove = remove
        self._key = key
        self.mode = BoardMode.SELECT
        self.selection: list[str] = list(selection)
        self.groups: dict[str, list[T]] = classify([], scheme)

    async def refresh(self) -> None:
        """Re-derive buckets from the authoritative store."""
        items = await self._load()
        self.groups = classify(items, self.scheme)

    def labels(self) -> dict[str, list[str]]:
        """Bucket name to the labels it holds, in declared bucket order."""
        return {bucket: [self._key(item) for item in items] for bucket, items in self.groups.items()}

    def set_mode(self, mode: BoardMode) -> None:
        self.mode = mode

    def find(self, label: str) -> tuple[str, T] | None:
        for bucket, items in self.groups.items():
            for item in items:
                if self._key(item) == label:
                    return bucket, item
        return None

    def toggle(self, label: str) -> bool:
        """Toggle a label in the working selection; ignored in edit mode."""
        if self.mode is not BoardMode.SELECT:
            return False
        if label in self.selection:
            self.selection = [selected for selected in self.selection if selected != label]
        else:
            self.selection = [*self.selection, label]
        return True

    async def move(self, label: str, target: str | None) -> MoveOutcome:
        """Move a label to ``target`` optimistically, then persist the assignment.

        Only edit mode moves labels.
        """
        if self.mode is not BoardMode.EDIT:
            return MoveOutcome.NOOP
        if target is None or target not in self.groups:
            return MoveOutcome.NOOP
        located = self.find(label)
        if located is None:
            return MoveOutcome.NOOP
        source, item = located
        if source == target:
            return MoveOutcome.NOOP

        snapshot = self.groups

        def _apply() -> None:
            groups = dict(self.groups)
            groups[source] = [entry for entry in groups[source] if self._key(entry) != label]
            groups[target] = [*groups[target], item]
            self.groups = groups

        def _rollback() -> None:
            self.groups = snapshot

        ok = await apply_speculatively(
            apply=_apply,
            commit=lambda: self._persist_move(item, target),
            reconcile=self.refresh,
            rollback=_rollback,
            description=f"move {label!r} to {target!r}",
        )
        if ok:
            logger.info("Moved %r from %s to %s", label, source, target)
        return MoveOutcome.MOVED if ok else MoveOutcome.FAILED

    async def delete(self, label: str) -> bool:
        """Delete the backing document and drop the label from the board and selection."""
        located = self.find(label)
        if located is None:
            return False
        bucket, item = located
        await self._remove(item)
        groups = dict(self.groups)
        groups[bucket] = [entry for entry in groups[bucket] if self._key(entry) != label]
        self.groups = groups
        self.selection = [selected for selected in self.selection if selected != label]
        return True
