"""Object storage backends selected from settings."""

from __future__ import annotations

import logging

from reelhouse.core.config import Settings, settings
from reelhouse.storage.base import ObjectStorage, StorageError

logger = logging.getLogger("reelhouse.storage")


def build_object_storage(config: Settings = settings) -> ObjectStorage:
    """Return the configured storage backend."""
    if config.storage_backend == "gcs":
        from reelhouse.storage.gcs import GcsObjectStorage

        logger.info("Using GCS object storage (bucket=%s)", config.storage_bucket)
        return GcsObjectStorage(config.storage_bucket or "")
    if config.storage_backend == "local":
        from reelhouse.storage.local import LocalObjectStorage

        logger.info("Using local object storage at %s", config.local_storage_dir)
        return LocalObjectStorage(config.local_storage_dir, config.local_storage_base_url)
    raise ValueError(f"Unsupported storage backend {config.storage_backend}")


__all__ = ["ObjectStorage", "StorageError", "build_object_storage"]
