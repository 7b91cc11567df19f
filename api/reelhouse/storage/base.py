"""Object storage primitives for uploaded media."""

from __future__ import annotations


class StorageError(Exception):
    pass


class ObjectStorage:
    """Abstract blob store holding uploaded thumbnails, posters and clips."""

    backend: str

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store ``content`` at ``path``, make it publicly readable and return its URL."""
        raise NotImplementedError

    async def signed_url(self, path: str, ttl_seconds: int) -> str | None:
        """Return a short-lived read URL, or ``None`` when the object is missing."""
        raise NotImplementedError

    async def close(self) -> None:
        return None
