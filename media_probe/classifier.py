"""Classify observed network responses and DOM sources into media candidates."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from .errors import ObserverError
from .models import CandidateResource, CandidateSource, MediaType
from .utils import MEDIA_EXTENSION_PATTERN, url_extension_type

logger = logging.getLogger("media_probe.classifier")

CONTENT_TYPE_FAMILIES = {
    "video/": MediaType.VIDEO,
    "audio/": MediaType.AUDIO,
    "image/": MediaType.IMAGE,
}

# Streaming manifests are served with application/* types.
MANIFEST_CONTENT_TYPES = {
    "application/vnd.apple.mpegurl": MediaType.VIDEO,
    "application/x-mpegurl": MediaType.VIDEO,
    "application/dash+xml": MediaType.VIDEO,
}

SKIPPED_SCHEMES = ("data:", "blob:", "javascript:")
IMAGE_TAGS = {"img", "image"}

DOM_SCAN_SCRIPT = """() => {
    const resolve = (value) => {
        if (!value) return null;
        try {
            return new URL(value, document.baseURI).href;
        } catch (e) {
            return null;
        }
    };
    const declared = (el, tag) => {
        if (tag === 'image') return el.getAttribute('href') || el.getAttribute('xlink:href');
        if (tag === 'object') return el.getAttribute('data');
        return el.getAttribute('src');
    };
    const nodes = document.querySelectorAll(
        'video, audio, img, source, image, embed[src], object[data]'
    );
    return Array.from(nodes).map((el) => {
        const tag = el.tagName.toLowerCase();
        return {
            tag: tag,
            src: resolve(declared(el, tag)),
            currentSrc: el.currentSrc || null,
        };
    });
}"""


def content_type_family(content_type: Optional[str]) -> Optional[MediaType]:
    """Map a Content-Type header onto a media family."""
    if not content_type:
        return None
    mime = content_type.split(";", 1)[0].strip().lower()
    for prefix, media_type in CONTENT_TYPE_FAMILIES.items():
        if mime.startswith(prefix):
            return media_type
    return MANIFEST_CONTENT_TYPES.get(mime)


def classify_response(
    url: str,
    content_type: Optional[str],
    pattern: re.Pattern = MEDIA_EXTENSION_PATTERN,
) -> Optional[CandidateResource]:
    """Classify a network response, or return ``None`` if it is not media."""
    media_type = content_type_family(content_type)
    if media_type is not None:
        return CandidateResource(
            url=url,
            declared_type=media_type,
            content_type=content_type,
            source=CandidateSource.NETWORK_RESPONSE,
        )
    media_type = url_extension_type(url, pattern)
    if media_type is not None:
        return CandidateResource(
            url=url,
            declared_type=media_type,
            content_type=content_type or None,
            source=CandidateSource.NETWORK_RESPONSE_EXT,
        )
    return None


def classify_dom_element(tag: str, src: Optional[str]) -> Optional[CandidateResource]:
    """Classify a ``src`` found on a media element in the page DOM."""
    if not src or src.lower().startswith(SKIPPED_SCHEMES):
        return None
    if (tag or "").lower() in IMAGE_TAGS:
        media_type = MediaType.IMAGE
    else:
        media_type = url_extension_type(src) or MediaType.UNKNOWN
    return CandidateResource(
        url=src,
        declared_type=media_type,
        content_type=None,
        source=CandidateSource.DOM_SCAN,
    )


class CandidateCollector:
    """Accumulates candidates from the response observer and the DOM scan.

    Observer callbacks and the extraction sequence share one event loop, so
    appends never interleave. The collector is closed on page teardown; events
    delivered afterwards are dropped. ``drain`` hands the candidates over
    exactly once.
    """

    def __init__(self, pattern: re.Pattern = MEDIA_EXTENSION_PATTERN) -> None:
        self.pattern = pattern
        self.errors = 0
        self._candidates: List[CandidateResource] = []
        self._closed = False
        self._drained = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._candidates)

    def _add(self, candidate: Optional[CandidateResource]) -> None:
        if candidate is not None:
            self._candidates.append(candidate)

    def _classify(self, response: Any) -> Optional[CandidateResource]:
        try:
            url = response.url
            headers = response.headers or {}
            content_type = headers.get("content-type")
            return classify_response(url, content_type, self.pattern)
        except Exception as exc:  # pylint: disable=broad-except
            raise ObserverError(f"Could not classify response: {exc}") from exc

    def on_response(self, response: Any) -> None:
        """Playwright ``response`` event handler."""
        if self._closed:
            return
        try:
            candidate = self._classify(response)
        except ObserverError as exc:
            self.errors += 1
            logger.debug("Ignoring response: %s", exc)
            return
        if candidate is not None:
            logger.debug(
                "Captured %s %s (%s)",
                candidate.declared_type.value,
                candidate.url,
                candidate.source.value,
            )
        self._add(candidate)

    def add_dom_entries(self, entries: Iterable[Dict[str, Any]]) -> int:
        """Record sources returned by the DOM scan script."""
        if self._closed:
            return 0
        added = 0
        for entry in entries:
            try:
                tag = entry.get("tag") or ""
                sources = [entry.get("src"), entry.get("currentSrc")]
            except AttributeError as exc:
                self.errors += 1
                logger.debug("Ignoring malformed DOM entry %r: %s", entry, exc)
                continue
            for src in dict.fromkeys(sources):
                candidate = classify_dom_element(tag, src)
                if candidate is not None:
                    self._add(candidate)
                    added += 1
        return added

    def close(self) -> None:
        self._closed = True

    def drain(self) -> List[CandidateResource]:
        """Close the collector and return everything captured, in order."""
        if self._drained:
            raise RuntimeError("Candidate collector has already been drained")
        self._closed = True
        self._drained = True
        candidates, self._candidates = self._candidates, []
        return candidates
