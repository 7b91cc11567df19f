"""Google Cloud Storage backend.

Authentication uses Application Default Credentials. The client library is
synchronous, so blocking calls run in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

import google.auth
from google.api_core.exceptions import GoogleAPICallError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from reelhouse.storage.base import ObjectStorage, StorageError

logger = logging.getLogger("reelhouse.storage.gcs")


def get_gcs_client() -> storage.Client:
    """Return an authenticated client without the ADC quota project."""
    credentials, project = google.auth.default()
    credentials = credentials.with_quota_project(None)
    return storage.Client(project=project, credentials=credentials)


class GcsObjectStorage(ObjectStorage):
    backend = "gcs"

    def __init__(self, bucket_name: str, client: storage.Client | None = None) -> None:
        self._client = client or get_gcs_client()
        self._bucket = self._client.bucket(bucket_name)

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        blob = self._bucket.blob(path)

        def _upload() -> str:
            blob.upload_from_string(content, content_type=content_type)
            blob.make_public()
            return blob.public_url

        try:
            return await asyncio.to_thread(_upload)
        except (GoogleAPICallError, GoogleAuthError) as exc:
            logger.error("Upload of %s to gs://%s failed: %s", path, self._bucket.name, exc)
            raise StorageError("Upload to GCS failed.") from exc

    async def signed_url(self, path: str, ttl_seconds: int) -> str | None:
        blob = self._bucket.blob(path)

        def _sign() -> str | None:
            if not blob.exists():
                return None
            return blob.generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=ttl_seconds),
                method="GET",
            )

        try:
            return await asyncio.to_thread(_sign)
        except (GoogleAPICallError, GoogleAuthError) as exc:
            raise StorageError(f"Could not sign {path}") from exc

    async def close(self) -> None:
        await asyncio.to_thread(self._client.close)
