"""Exceptions raised while discovering media on a page."""

from __future__ import annotations

from typing import Optional


class MediaProbeError(Exception):
    """Base class for media discovery failures."""


class LaunchError(MediaProbeError):
    """The browser automation engine could not be started."""


class NavigationTimeout(MediaProbeError):
    """The page did not become idle before the navigation timeout."""

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(f"Navigation to {url} did not settle within {timeout:.1f}s")
        self.url = url
        self.timeout = timeout


class ObserverError(MediaProbeError):
    """A single observed response or DOM scan could not be classified."""


class ExtractionError(MediaProbeError):
    """The navigation sequence for a page failed.

    The root cause is available as ``__cause__``.
    """

    def __init__(self, url: str, title: Optional[str] = None) -> None:
        super().__init__(f"Failed to extract media from {url}")
        self.url = url
        self.title = title
