import asyncio
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from media_probe.config import ProbeConfig


def make_response(url, content_type=None):
    headers = {"content-type": content_type} if content_type else {}
    return SimpleNamespace(url=url, headers=headers)


def mock_playwright(browser=None, launch_error=None, launch_delay=0.0):
    browser = browser or mock_browser()

    async def launch(**kwargs):
        await asyncio.sleep(launch_delay)
        if launch_error is not None:
            raise launch_error
        return browser

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(side_effect=launch)
    playwright.stop = AsyncMock()
    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)
    return MagicMock(return_value=starter), playwright


def mock_browser():
    browser = MagicMock()
    browser.is_connected.return_value = True
    browser.new_page = AsyncMock(side_effect=lambda **kwargs: mock_page())
    browser.close = AsyncMock()
    return browser


def mock_page():
    page = MagicMock()
    page.close = AsyncMock()
    return page


class FakePage:
    """Stand-in for a Playwright page that replays canned events."""

    def __init__(
        self,
        responses=(),
        late_responses=(),
        dom_entries=(),
        title="Test Page",
        html="",
        goto_error=None,
        evaluate_error=None,
        title_error=None,
        wait_error=None,
    ):
        self.responses = list(responses)
        self.late_responses = list(late_responses)
        self.dom_entries = list(dom_entries)
        self._title = title
        self.html = html
        self.goto_error = goto_error
        self.evaluate_error = evaluate_error
        self.title_error = title_error
        self.wait_error = wait_error
        self.handlers = {}
        self.goto_calls = []
        self.waits = []
        self.closed = False

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def remove_listener(self, event, handler):
        self.handlers[event].remove(handler)

    def emit(self, event, payload):
        for handler in list(self.handlers.get(event, [])):
            handler(payload)

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((url, wait_until, timeout))
        for response in self.responses:
            self.emit("response", response)
        if self.goto_error is not None:
            raise self.goto_error

    async def evaluate(self, script):
        if self.evaluate_error is not None:
            raise self.evaluate_error
        return list(self.dom_entries)

    async def content(self):
        return self.html

    async def wait_for_timeout(self, timeout):
        self.waits.append(timeout)
        for response in self.late_responses:
            self.emit("response", response)
        if self.wait_error is not None:
            raise self.wait_error

    async def title(self):
        if self.title_error is not None:
            raise self.title_error
        return self._title

    async def close(self):
        self.closed = True


class FakeSession:
    """Session that hands out a single prepared page."""

    def __init__(self, page, config=None):
        self._page = page
        self.config = config or ProbeConfig(grace_period=1.5)
        self.pages_opened = 0

    @asynccontextmanager
    async def page(self):
        self.pages_opened += 1
        try:
            yield self._page
        finally:
            self._page.closed = True


@pytest.fixture
def config():
    return ProbeConfig(navigation_timeout=5.0, grace_period=1.5)
