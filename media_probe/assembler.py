"""Attach page metadata to ranked media and build the final result."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from .models import ExtractionResult, FormatInfo, MediaResource


def assemble_result(
    url: str,
    title: str,
    resources: Sequence[MediaResource],
    partial: bool = False,
    formats: Iterable[FormatInfo] = (),
) -> ExtractionResult:
    """Stamp the page title on every resource and wrap the ranked list."""
    return ExtractionResult(
        url=url,
        title=title,
        results=[replace(resource, title=title) for resource in resources],
        partial=partial,
        formats=list(formats),
    )
