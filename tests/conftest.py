# conftest.py
# Puts the repository root on sys.path so `pricematch` imports without an
# editable install, and provides browser stand-ins that serve fixture HTML.

import asyncio
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from playwright.async_api import TimeoutError as PWTimeout

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)

if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from pricematch.scraping.extractor import ResultsExtractor  # noqa: E402
from pricematch.scraping.pacing import PacingController  # noqa: E402
from pricematch.resolver import CompetitorResolver  # noqa: E402


class FakePage:
    """Minimal async Page: goto picks the fixture whose key is in the URL."""

    def __init__(self, routes, nav_error=None, nav_delay=0.0):
        self._routes = routes
        self._nav_error = nav_error
        self._nav_delay = nav_delay
        self._soup = BeautifulSoup("", "lxml")
        self.html = ""
        self.url = ""
        self.visited = []
        self.waited = []
        self.timeouts = []

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        if self._nav_delay:
            await asyncio.sleep(self._nav_delay)
        if self._nav_error is not None:
            raise self._nav_error
        self.url = url
        for key, html in self._routes.items():
            if key in url:
                self.html = html
                break
        self._soup = BeautifulSoup(self.html, "lxml")

    async def wait_for_selector(self, selector, timeout=None):
        self.waited.append(selector)
        self.timeouts.append(timeout)
        await asyncio.sleep(0)
        if self._soup.select_one(selector) is None:
            raise PWTimeout(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def text_content(self, selector):
        el = self._soup.select_one(selector)
        return el.get_text() if el is not None else None

    async def content(self):
        return self.html


class FakeSession:
    """Stands in for PlaywrightManager.page(); counts opened/closed contexts."""

    def __init__(self, routes=None, nav_error=None, nav_delay=0.0):
        self.routes = routes or {}
        self.nav_error = nav_error
        self.nav_delay = nav_delay
        self.opened = 0
        self.closed = 0
        self.pages = []
        self.stopped = 0

    @asynccontextmanager
    async def page(self):
        self.opened += 1
        pg = FakePage(self.routes, self.nav_error, self.nav_delay)
        self.pages.append(pg)
        try:
            yield pg
        finally:
            self.closed += 1

    async def stop(self):
        self.stopped += 1


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def fast_extractor():
    return ResultsExtractor(selector_wait_ms=0, settle_delay_ms=0)


@pytest.fixture
def pacing_sleep():
    return RecordingSleep()


@pytest.fixture
def make_resolver(fast_extractor, pacing_sleep):
    def _make(session, **kwargs):
        return CompetitorResolver(
            session=session,
            extractor=fast_extractor,
            pacing=PacingController(base_ms=0, jitter_ms=0, sleep=pacing_sleep),
            **kwargs,
        )
    return _make
