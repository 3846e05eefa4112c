"""Deduplicate media candidates and order them by domain priority."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from .config import DEFAULT_PRIORITY_DOMAINS
from .models import CandidateResource, MediaResource, MediaType
from .utils import normalize_url, url_extension_type

logger = logging.getLogger("media_probe.ranking")


def is_priority(url: str, priority_domains: Sequence[str]) -> bool:
    lowered = url.lower()
    return any(domain.lower() in lowered for domain in priority_domains)


def _resolve_type(candidate: CandidateResource, url: str) -> MediaType:
    if candidate.declared_type is not MediaType.UNKNOWN:
        return candidate.declared_type
    return url_extension_type(url) or MediaType.UNKNOWN


def deduplicate(candidates: Iterable[CandidateResource]) -> List[MediaResource]:
    """Collapse candidates by normalized URL; the first one seen wins."""
    unique: Dict[str, MediaResource] = {}
    for candidate in candidates:
        key = normalize_url(candidate.url)
        if key in unique:
            continue
        unique[key] = MediaResource(
            url=key,
            type=_resolve_type(candidate, key),
            content_type=candidate.content_type,
            source=candidate.source,
        )
    return list(unique.values())


def rank(
    candidates: Iterable[CandidateResource],
    priority_domains: Sequence[str] = DEFAULT_PRIORITY_DOMAINS,
) -> List[MediaResource]:
    """Deduplicate, then put priority-domain resources ahead of the rest.

    Both partitions keep first-seen order.
    """
    resources = deduplicate(candidates)
    priority = [r for r in resources if is_priority(r.url, priority_domains)]
    normal = [r for r in resources if not is_priority(r.url, priority_domains)]
    logger.debug(
        "Ranked %d resources (%d priority, %d normal)",
        len(resources),
        len(priority),
        len(normal),
    )
    return priority + normal
