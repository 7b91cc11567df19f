"""Redaction helpers for URLs and messages that end up in logs."""

from __future__ import annotations

import re

_URL_USERINFO_RE = re.compile(r"([a-z][a-z0-9+.-]*://)([^@/]+)@", re.IGNORECASE)
# Query secrets, including the credential and signature of GCS v4 signed URLs.
_QUERY_SECRET_RE = re.compile(
    r"(?i)(token|secret|password|api_key|apikey|key|x-goog-signature|x-goog-credential)=([^&\s]+)"
)
_BEARER_RE = re.compile(r"(?i)(bearer\s+)([A-Za-z0-9._~+/=-]+)")


def redact_secrets(text: str) -> str:
    """Mask credentials embedded in a URL or log line."""
    if not text:
        return text
    redacted = _URL_USERINFO_RE.sub(r"\1***@", text)
    redacted = _QUERY_SECRET_RE.sub(r"\1=***", redacted)
    return _BEARER_RE.sub(r"\1***", redacted)
