"""Utility helpers for URL normalization and media extensions."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit

from .models import MediaType

# Query parameters that select a byte range of the same resource.
BYTE_RANGE_PARAMS = frozenset({"bytestart", "byteend", "range"})

EXTENSION_TYPES = {
    "mp4": MediaType.VIDEO,
    "webm": MediaType.VIDEO,
    "m3u8": MediaType.VIDEO,
    "mkv": MediaType.VIDEO,
    "mp3": MediaType.AUDIO,
    "aac": MediaType.AUDIO,
    "ogg": MediaType.AUDIO,
    "opus": MediaType.AUDIO,
    "wav": MediaType.AUDIO,
    "flac": MediaType.AUDIO,
    "m4a": MediaType.AUDIO,
    "jpg": MediaType.IMAGE,
    "jpeg": MediaType.IMAGE,
    "png": MediaType.IMAGE,
    "gif": MediaType.IMAGE,
    "bmp": MediaType.IMAGE,
    "webp": MediaType.IMAGE,
}

MEDIA_EXTENSION_PATTERN = re.compile(
    r"\.(" + "|".join(sorted(EXTENSION_TYPES)) + r")$", re.IGNORECASE
)


def normalize_url(url: str) -> str:
    """Drop byte-range query parameters so partial fetches share one key."""
    base, sep, rest = url.partition("?")
    if not sep:
        return url
    query, hash_sep, fragment = rest.partition("#")
    kept = [
        pair
        for pair in query.split("&")
        if pair and pair.split("=", 1)[0].lower() not in BYTE_RANGE_PARAMS
    ]
    normalized = base
    if kept:
        normalized += "?" + "&".join(kept)
    if hash_sep:
        normalized += "#" + fragment
    return normalized


def url_extension_type(
    url: str, pattern: re.Pattern = MEDIA_EXTENSION_PATTERN
) -> Optional[MediaType]:
    """Return the media type implied by the URL path's extension, if any."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    match = pattern.search(path)
    if not match:
        return None
    return EXTENSION_TYPES.get(match.group(1).lower(), MediaType.UNKNOWN)


def is_absolute_http_url(url: str) -> bool:
    try:
        parsed = urlsplit(url)
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)
