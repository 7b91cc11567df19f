"""Promote a user profile to the admin role.

Usage: ``python -m reelhouse.scripts.set_admin <uid>``
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from reelhouse.core.log import configure_logging
from reelhouse.db.document_store import DocumentStore
from reelhouse.db.session import build_document_store
from reelhouse.models.user import UserRole
from reelhouse.services import user_service

logger = logging.getLogger("reelhouse.scripts.set_admin")


async def set_admin(uid: str, store: DocumentStore | None = None) -> bool:
    """Return False when the profile was already an admin."""
    managed = store is None
    active = store or build_document_store()
    try:
        profile = await user_service.get_profile(active, uid)
        if profile is None:
            raise ValueError(f"No profile for uid {uid}; the user must sign in once first")
        if profile.is_admin:
            logger.info("User %s is already an admin", uid)
            return False
        await user_service.set_role(active, uid, UserRole.ADMIN)
        logger.info("User %s (%s) is now an administrator", uid, profile.email or "no email")
        return True
    finally:
        if managed:
            await active.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Grant the admin role to a user profile.")
    parser.add_argument("uid", help="uid (token subject) of the user to promote")
    args = parser.parse_args(argv)
    configure_logging()
    try:
        asyncio.run(set_admin(args.uid))
    except ValueError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
