"""Bearer token helpers for identities issued by the external auth provider."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from .config import settings


def create_access_token(subject: str, expires_delta: timedelta | None = None, **claims: Any) -> str:
    """Create a signed identity token; used by local tooling and tests."""
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": subject,
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=1)),
        **claims,
    }
    if settings.jwt_audience:
        payload.setdefault("aud", settings.jwt_audience)
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode a JWT and return its payload if valid."""
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError:
        return None


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated caller as described by a verified token."""

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    admin_claim: bool = False


def identity_from_claims(payload: Dict[str, Any]) -> Optional[Identity]:
    """Map decoded token claims onto an identity; ``None`` without a subject."""
    uid = payload.get("sub") or payload.get("uid")
    if not uid:
        return None
    return Identity(
        uid=str(uid),
        email=payload.get("email"),
        display_name=payload.get("name"),
        photo_url=payload.get("picture"),
        admin_claim=payload.get("admin") is True,
    )
