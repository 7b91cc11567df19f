"""Filesystem-backed object storage for development and tests."""

from __future__ import annotations

import asyncio
from pathlib import Path, PurePosixPath

from reelhouse.storage.base import ObjectStorage, StorageError


class LocalObjectStorage(ObjectStorage):
    backend = "local"

    def __init__(self, root: str | Path, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise StorageError(f"Invalid object path {path!r}")
        return self.root.joinpath(*relative.parts)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        target = self._resolve(path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise StorageError(f"Upload to {path} failed") from exc
        return self.public_url(path)

    async def signed_url(self, path: str, ttl_seconds: int) -> str | None:
        # Local files are served unsigned; expiry does not apply.
        target = self._resolve(path)
        exists = await asyncio.to_thread(target.is_file)
        return self.public_url(path) if exists else None
