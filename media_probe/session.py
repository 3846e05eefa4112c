"""Lifecycle of the shared headless browser and the pages opened on it."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from .config import ProbeConfig
from .errors import LaunchError

logger = logging.getLogger("media_probe.session")


class BrowserSession:
    """One lazily launched Chromium process shared by many extractions.

    Construct it once, pass it to every ``extract`` call, and close it on
    shutdown. Concurrent ``acquire`` calls wait on the same launch. ``page``
    admits at most ``max_concurrent_pages`` open pages at a time.
    """

    def __init__(self, config: Optional[ProbeConfig] = None) -> None:
        self.config = config or ProbeConfig()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(self.config.max_concurrent_pages)
        self.launch_count = 0

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def _launch(self) -> Browser:
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        logger.info("Launching Chromium (headless=%s)", self.config.headless)
        browser = await self._playwright.chromium.launch(
            headless=self.config.headless,
            args=list(self.config.launch_args),
        )
        self.launch_count += 1
        return browser

    async def acquire(self) -> Browser:
        """Return the shared browser, launching it on first use."""
        async with self._lock:
            if self._browser is not None and not self._browser.is_connected():
                logger.warning("Browser disconnected; relaunching")
                self._browser = None
            if self._browser is None:
                try:
                    self._browser = await self._launch()
                except PlaywrightError as exc:
                    raise LaunchError(f"Could not launch Chromium: {exc}") from exc
                except OSError as exc:
                    raise LaunchError(f"Could not start Playwright driver: {exc}") from exc
            return self._browser

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Open a page for one extraction and always close it afterwards."""
        async with self._slots:
            browser = await self.acquire()
            page = await browser.new_page(
                user_agent=self.config.user_agent,
                extra_http_headers=self.config.extra_headers or None,
            )
            try:
                yield page
            finally:
                try:
                    await page.close()
                except PlaywrightError as exc:
                    logger.warning("Failed to close page: %s", exc)

    async def close(self) -> None:
        async with self._lock:
            browser, self._browser = self._browser, None
            playwright, self._playwright = self._playwright, None
            if browser is not None:
                try:
                    await browser.close()
                except PlaywrightError as exc:
                    logger.warning("Failed to close browser: %s", exc)
            if playwright is not None:
                try:
                    await playwright.stop()
                except PlaywrightError as exc:
                    logger.warning("Failed to stop Playwright driver: %s", exc)

    async def __aenter__(self) -> "BrowserSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
