"""High-level orchestration for loading pages and capturing their media."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Sequence, Tuple

from playwright.async_api import (
    Error as PlaywrightError,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from .assembler import assemble_result
from .classifier import DOM_SCAN_SCRIPT, CandidateCollector
from .config import ProbeConfig
from .errors import ExtractionError, NavigationTimeout, ObserverError
from .formats import inspect_player_html
from .models import ExtractionResult, FormatInfo
from .ranking import rank
from .session import BrowserSession
from .utils import is_absolute_http_url

logger = logging.getLogger("media_probe.crawler")


async def navigate(page: Page, url: str, config: ProbeConfig) -> None:
    """Load ``url`` and wait for the network to go idle."""
    try:
        await page.goto(
            url,
            wait_until="networkidle",
            timeout=config.navigation_timeout * 1000,
        )
    except PlaywrightTimeoutError as exc:
        raise NavigationTimeout(url, config.navigation_timeout) from exc


async def scan_dom(page: Page, collector: CandidateCollector) -> int:
    """Record the declared and current sources of media elements."""
    try:
        entries = await page.evaluate(DOM_SCAN_SCRIPT)
    except PlaywrightError as exc:
        raise ObserverError(f"DOM scan failed: {exc}") from exc
    return collector.add_dom_entries(entries or [])


async def read_player(page: Page) -> Tuple[List[FormatInfo], Optional[str]]:
    """Return the inline player response's formats and video title."""
    try:
        html = await page.content()
    except PlaywrightError as exc:
        logger.debug("Could not read page HTML for player response: %s", exc)
        return [], None
    return inspect_player_html(html)


async def read_title(page: Page, default: str) -> str:
    try:
        title = await page.title()
    except PlaywrightError as exc:
        logger.debug("Could not read page title: %s", exc)
        return default
    title = (title or "").strip()
    return title or default


async def extract(
    session: BrowserSession,
    url: str,
    config: Optional[ProbeConfig] = None,
) -> ExtractionResult:
    """Load a page and return the media it fetched or embedded, ranked.

    A navigation timeout is not an error: the result is marked ``partial``
    and holds whatever was captured. Any other failure, including opening
    the page, raises ``ExtractionError``. The page and its response listener are
    released before this returns or raises.
    """
    if not is_absolute_http_url(url):
        raise ValueError(f"Expected an absolute http(s) URL, got {url!r}")
    config = config or session.config

    collector = CandidateCollector()
    title: Optional[str] = None
    partial = False
    formats: List[FormatInfo] = []
    fallback_title: Optional[str] = None
    start = time.perf_counter()

    try:
        async with session.page() as page:
            on_response = collector.on_response
            page.on("response", on_response)
            try:
                logger.info("Loading %s", url)
                try:
                    await navigate(page, url, config)
                except NavigationTimeout as exc:
                    logger.warning("%s; continuing with partial results", exc)
                    partial = True

                try:
                    found = await scan_dom(page, collector)
                    logger.debug("DOM scan found %d sources on %s", found, url)
                except ObserverError as exc:
                    logger.warning("%s (%s)", exc, url)

                if config.inspect_player_response:
                    formats, fallback_title = await read_player(page)

                if config.grace_period:
                    await page.wait_for_timeout(config.grace_period * 1000)

                title = await read_title(page, fallback_title or config.default_title)
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("Extraction failed for %s: %s", url, exc)
                raise ExtractionError(url, title) from exc
            finally:
                page.remove_listener("response", on_response)
                collector.close()
    except PlaywrightError as exc:
        # new_page() failed; failures inside the page are wrapped above.
        logger.error("Could not open a page for %s: %s", url, exc)
        raise ExtractionError(url) from exc

    candidates = collector.drain()
    resources = rank(candidates, config.priority_domains)
    logger.info(
        "Found %d media resources (%d candidates) on %s in %.2fs",
        len(resources),
        len(candidates),
        url,
        time.perf_counter() - start,
    )
    return assemble_result(
        url,
        title or config.default_title,
        resources,
        partial=partial,
        formats=formats,
    )


async def run_extractions(
    urls: Sequence[str],
    config: ProbeConfig,
) -> List[ExtractionResult]:
    """Extract every URL on one shared browser, skipping pages that fail."""
    async with BrowserSession(config) as session:

        async def _extract_one(url: str) -> Optional[ExtractionResult]:
            try:
                return await extract(session, url, config)
            except (ExtractionError, ValueError) as exc:
                logger.error("Skipping %s: %s", url, exc)
                return None

        outcomes = await asyncio.gather(*(_extract_one(url) for url in urls))
    return [result for result in outcomes if result is not None]
