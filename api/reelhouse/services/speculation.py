"""Speculative local updates confirmed or reverted by a remote write."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

logger = logging.getLogger("reelhouse.services.speculation")


async def apply_speculatively(
    *,
    apply: Callable[[], None],
    commit: Callable[[], Awaitable[None]],
    reconcile: Callable[[], Awaitable[None]],
    rollback: Callable[[], None] | None = None,
    description: str = "speculative update",
) -> bool:
    """Apply a local change ahead of its remote write.

    ``apply`` runs immediately. If ``commit`` fails, local state is re-derived
    with ``reconcile`` from the authoritative store; if that fails as well,
    ``rollback`` restores the snapshot taken before ``apply``. Returns True
    only when the remote write succeeded.
    """
    apply()
    try:
        await commit()
    except Exception:
        logger.exception("Remote write failed for %s; reconciling", description)
        try:
            await reconcile()
        except Exception:
            logger.exception("Reconcile failed for %s; restoring last known-good state", description)
            if rollback is not None:
                rollback()
        return False
    return True
