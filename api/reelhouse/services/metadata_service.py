"""Video link recognition and oEmbed metadata lookup.

YouTube and Vimeo links are canonicalised before lookup. Lookups go through a
noembed-compatible endpoint; its "no matching providers" answer is treated as
"no metadata", not as a failure.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import httpx

from reelhouse.core.config import settings
from reelhouse.utils.redaction import redact_secrets

YOUTUBE_RE = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?|shorts?|watch)/?(?:\?v=)?|v/|e/|watch\?v=)|youtu\.be/)"
    r"([^\"&?/ ]{11})"
)
VIMEO_RE = re.compile(r"vimeo\.com/(?:video/)?(\d+)")
NO_PROVIDER_ERROR = "no matching providers found"

logger = logging.getLogger("reelhouse.services.metadata")


class MetadataError(Exception):
    pass


@dataclass(slots=True)
class VideoLink:
    provider: str
    video_id: str
    canonical_url: str


@dataclass(slots=True)
class VideoMetadata:
    provider: str
    video_id: str
    canonical_url: str
    title: str | None = None
    description: str | None = None
    thumbnail_url: str | None = None


def parse_video_url(url: str) -> VideoLink | None:
    """Recognise a YouTube or Vimeo link; anything else returns ``None``."""
    match = YOUTUBE_RE.search(url)
    if match:
        video_id = match.group(1)
        return VideoLink("youtube", video_id, f"https://www.youtube.com/watch?v={video_id}")
    match = VIMEO_RE.search(url)
    if match:
        video_id = match.group(1)
        return VideoLink("vimeo", video_id, f"https://vimeo.com/{video_id}")
    return None


def youtube_thumbnail(video_id: str) -> str:
    return f"https://i.ytimg.com/vi/{video_id}/maxresdefault.jpg"


def _describe(payload: dict, title: str | None) -> str | None:
    author = payload.get("author_name")
    if author:
        return f"A film by {author}."
    if title:
        return f"{title} animation reference"
    return None


async def fetch_metadata(url: str, *, client: httpx.AsyncClient | None = None) -> VideoMetadata:
    """Fetch oEmbed metadata for a supported video link."""
    link = parse_video_url(url.strip())
    if link is None:
        raise ValueError("Unsupported video URL; use a YouTube or Vimeo link")
    result = VideoMetadata(link.provider, link.video_id, link.canonical_url)
    if link.provider == "youtube":
        result.thumbnail_url = youtube_thumbnail(link.video_id)

    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=settings.oembed_timeout_seconds)
    try:
        response = await http.get(settings.oembed_endpoint, params={"url": link.canonical_url})
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("oEmbed lookup failed for %s: %s", redact_secrets(link.canonical_url), exc)
        raise MetadataError("Could not fetch video metadata") from exc
    finally:
        if owns_client:
            await http.aclose()

    if not isinstance(payload, dict):
        raise MetadataError("Unexpected oEmbed response")
    error = payload.get("error")
    if error:
        if NO_PROVIDER_ERROR in str(error).lower():
            return result
        logger.warning("oEmbed error for %s: %s", redact_secrets(link.canonical_url), error)
        raise MetadataError(str(error))

    result.title = payload.get("title") or None
    result.description = _describe(payload, result.title)
    if not result.thumbnail_url:
        result.thumbnail_url = payload.get("thumbnail_url") or None
    return result
