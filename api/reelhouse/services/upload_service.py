"""Media uploads to object storage with per-upload status tracking.

Invariants:
- Object paths are ``<folder or "uploads">/<epoch ms>_<file basename>``.
- Every tracked upload ends in ``success`` or ``error``; a failed upload is
  not retried and nothing it wrote is rolled back.
"""

from __future__ import annotations

import enum
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePosixPath

from reelhouse.storage import ObjectStorage

DEFAULT_FOLDER = "uploads"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

logger = logging.getLogger("reelhouse.services.uploads")


class UploadStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(slots=True)
class UploadRecord:
    id: str
    filename: str
    status: UploadStatus
    started_at: datetime
    finished_at: datetime | None = None
    url: str | None = None


class UploadTracker:
    """In-process record of uploads started by this server, newest first."""

    def __init__(self, max_records: int = 100) -> None:
        self.max_records = max_records
        self._records: dict[str, UploadRecord] = {}

    def start(self, filename: str) -> UploadRecord:
        record = UploadRecord(
            id=uuid.uuid4().hex,
            filename=filename,
            status=UploadStatus.IN_PROGRESS,
            started_at=datetime.now(timezone.utc),
        )
        self._records[record.id] = record
        while len(self._records) > self.max_records:
            oldest = next(iter(self._records))
            del self._records[oldest]
        return record

    def finish(self, upload_id: str, status: UploadStatus, url: str | None = None) -> None:
        record = self._records.get(upload_id)
        if record is None:
            return
        record.status = status
        record.url = url
        record.finished_at = datetime.now(timezone.utc)

    def list(self) -> list[UploadRecord]:
        return sorted(self._records.values(), key=lambda record: record.started_at, reverse=True)


def build_object_path(folder: str | None, filename: str, now_ms: int | None = None) -> str:
    """Build the storage path for an upload; path components in ``filename`` are dropped."""
    name = PurePosixPath(filename.replace("\\", "/")).name
    if not name:
        raise ValueError("No file uploaded.")
    prefix = (folder or "").strip().strip("/") or DEFAULT_FOLDER
    if ".." in PurePosixPath(prefix).parts:
        raise ValueError("Invalid upload folder")
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{prefix}/{stamp}_{name}"


async def upload_file(
    storage: ObjectStorage,
    tracker: UploadTracker,
    *,
    filename: str,
    content: bytes,
    content_type: str | None = None,
    folder: str | None = None,
) -> tuple[str, str]:
    """Upload one file and return ``(public_url, path)``."""
    path = build_object_path(folder, filename)
    record = tracker.start(filename)
    try:
        url = await storage.upload(path, content, content_type or DEFAULT_CONTENT_TYPE)
    except Exception:
        tracker.finish(record.id, UploadStatus.ERROR)
        logger.exception("Upload of %s failed", filename)
        raise
    tracker.finish(record.id, UploadStatus.SUCCESS, url)
    logger.info("Uploaded %s (%d bytes) to %s", filename, len(content), path)
    return url, path


async def signed_media_url(storage: ObjectStorage, path: str, ttl_seconds: int) -> str:
    """Short-lived read URL for a stored object."""
    url = await storage.signed_url(path, ttl_seconds)
    if url is None:
        raise ValueError("Media not found")
    return url
