"""List stream formats embedded in a page's player response.

Some video pages ship their player configuration inline as a
``ytInitialPlayerResponse`` JavaScript assignment. Formats with a plain
``url`` are directly playable. Formats carrying ``signatureCipher`` (or the
older ``cipher``) are reported with ``needs_cipher=True`` and their decoded
parameters; the signature is never solved here.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl

from bs4 import BeautifulSoup

from .models import FormatInfo

logger = logging.getLogger("media_probe.formats")

PLAYER_RESPONSE_MARKER = "ytInitialPlayerResponse"
_ASSIGNMENT_PATTERNS = (
    re.compile(r"ytInitialPlayerResponse\s*=\s*(?=\{)"),
    re.compile(r"window\[\s*[\"']ytInitialPlayerResponse[\"']\s*\]\s*=\s*(?=\{)"),
    re.compile(r"[\"']ytInitialPlayerResponse[\"']\s*:\s*(?=\{)"),
)
_MIME_PATTERN = re.compile(r"^\s*([^;]+?)\s*(?:;\s*codecs\s*=\s*\"?([^\"]*)\"?)?\s*$", re.I)

_decoder = json.JSONDecoder()


def _decode_object_at(text: str, index: int) -> Optional[Dict[str, Any]]:
    try:
        value, _ = _decoder.raw_decode(text, index)
    except json.JSONDecodeError as exc:
        logger.debug("Malformed player response at offset %d: %s", index, exc)
        return None
    return value if isinstance(value, dict) else None


def extract_player_response(html: str) -> Optional[Dict[str, Any]]:
    """Find and decode the inline player response in page HTML."""
    if not html or PLAYER_RESPONSE_MARKER not in html:
        return None
    soup = BeautifulSoup(html, "html.parser")
    for script in soup.find_all("script"):
        text = script.string or script.get_text()
        if not text or PLAYER_RESPONSE_MARKER not in text:
            continue
        for pattern in _ASSIGNMENT_PATTERNS:
            for match in pattern.finditer(text):
                player = _decode_object_at(text, match.end())
                if player is not None:
                    return player
    return None


def parse_mime_type(value: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split ``video/mp4; codecs="avc1.4d401e"`` into mime type and codecs."""
    if not value:
        return None, None
    match = _MIME_PATTERN.match(value)
    if not match:
        return value, None
    return match.group(1), match.group(2) or None


def _as_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def format_info(raw: Dict[str, Any], kind: str) -> FormatInfo:
    mime_type, codecs = parse_mime_type(raw.get("mimeType") or raw.get("mime_type"))
    url = raw.get("url") if isinstance(raw.get("url"), str) else None
    cipher: Dict[str, str] = {}
    needs_cipher = False
    if url is None:
        encoded = raw.get("signatureCipher") or raw.get("cipher")
        if isinstance(encoded, str) and encoded:
            needs_cipher = True
            cipher = dict(parse_qsl(encoded, keep_blank_values=True))
            url = cipher.get("url")
    return FormatInfo(
        kind=kind,
        itag=_as_int(raw.get("itag")),
        mime_type=mime_type,
        codecs=codecs,
        bitrate=_as_int(raw.get("bitrate")),
        width=_as_int(raw.get("width")),
        height=_as_int(raw.get("height")),
        url=url,
        needs_cipher=needs_cipher,
        cipher=cipher,
    )


def collect_formats(player_response: Optional[Dict[str, Any]]) -> List[FormatInfo]:
    """Flatten ``formats`` and ``adaptiveFormats`` into ``FormatInfo`` entries."""
    if not isinstance(player_response, dict):
        return []
    streaming = player_response.get("streamingData")
    if not isinstance(streaming, dict):
        return []
    formats: List[FormatInfo] = []
    for key, kind in (("formats", "format"), ("adaptiveFormats", "adaptive")):
        entries = streaming.get(key)
        if not isinstance(entries, list):
            continue
        for raw in entries:
            if isinstance(raw, dict):
                formats.append(format_info(raw, kind))
    return formats


def player_title(player_response: Optional[Dict[str, Any]]) -> Optional[str]:
    """Return ``videoDetails.title`` from a player response, if non-blank."""
    if not isinstance(player_response, dict):
        return None
    details = player_response.get("videoDetails")
    if not isinstance(details, dict):
        return None
    title = details.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return None


def inspect_player_html(html: str) -> Tuple[List[FormatInfo], Optional[str]]:
    """List the formats and video title from a page's inline player response."""
    player = extract_player_response(html)
    formats = collect_formats(player)
    if formats:
        ciphered = sum(1 for fmt in formats if fmt.needs_cipher)
        logger.info(
            "Player response lists %d formats (%d need a cipher)",
            len(formats),
            ciphered,
        )
    return formats, player_title(player)


def formats_from_html(html: str) -> List[FormatInfo]:
    return inspect_player_html(html)[0]
