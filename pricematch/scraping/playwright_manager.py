# -*- coding: utf-8 -*-
from __future__ import annotations
import asyncio
import random
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import (
    async_playwright, Browser, BrowserContext,
    Page, Playwright, Route,
)
from pricematch.config import settings
from pricematch.exceptions import BrowserLaunchError
from pricematch.utils.logger import get_logger

logger = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

VIEWPORTS = [
    {"width": 1366, "height": 768},
    {"width": 1440, "height": 900},
    {"width": 1920, "height": 1080},
]

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
]

# Runs before any page script in every frame of the context
_STEALTH_JS = """
Object.defineProperty(navigator, 'webdriver', {get: () => undefined});
"""

BLOCKED_RESOURCE_TYPES = frozenset({"image", "font", "media", "stylesheet"})


async def block_heavy_resources(route: Route):
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class PlaywrightManager:
    """
    One Chromium process for the whole service, one throwaway context per
    resolution. `page()` is the only way the pipeline touches the browser.
    """
    _instance:   Optional["PlaywrightManager"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance               = super().__new__(cls)
            cls._instance._playwright   = None
            cls._instance._browser      = None
            cls._instance._launch_error = None
            cls._instance._lock         = None
            cls._instance._stopped      = False
        return cls._instance

    def _get_lock(self) -> asyncio.Lock:
        # created lazily so it binds to the running loop
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    @property
    def started(self) -> bool:
        return self._browser is not None

    async def acquire(self) -> Browser:
        if self._browser:
            return self._browser
        if self._launch_error:
            raise self._launch_error
        async with self._get_lock():
            if self._browser:
                return self._browser
            if self._launch_error:
                raise self._launch_error
            pw = None
            try:
                pw = await async_playwright().start()
                browser = await pw.chromium.launch(
                    headless=settings.playwright_headless,
                    args=LAUNCH_ARGS,
                )
            except Exception as e:
                if pw is not None:
                    try:
                        await pw.stop()
                    except Exception as stop_err:
                        logger.debug("Playwright driver stop failed: %s", stop_err)
                self._launch_error = BrowserLaunchError(
                    f"Chromium failed to launch: {e}"
                )
                logger.error("%s", self._launch_error)
                raise self._launch_error from e
            self._playwright = pw
            self._browser    = browser
            self._stopped    = False
            logger.info(
                "Playwright started (headless=%s)", settings.playwright_headless
            )
        return self._browser

    async def create_context(self) -> BrowserContext:
        browser = await self.acquire()
        ctx = await browser.new_context(
            viewport=random.choice(VIEWPORTS),
            user_agent=USER_AGENT,
            locale="es-MX",
            timezone_id="America/Mexico_City",
            java_script_enabled=True,
            accept_downloads=False,
            extra_http_headers={
                "Accept-Language": "es-MX,es;q=0.9,en;q=0.8",
            },
        )
        await ctx.add_init_script(_STEALTH_JS)
        await ctx.route("**/*", block_heavy_resources)
        return ctx

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Fresh context + page; the context is closed whatever happens."""
        ctx = await self.create_context()
        try:
            pg = await ctx.new_page()
            pg.set_default_timeout(settings.page_timeout_ms)
            yield pg
        finally:
            try:
                await ctx.close()
            except Exception as e:
                logger.warning("Context close failed: %s", e)

    async def stop(self):
        if self._stopped:
            return
        self._stopped = True
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning("Browser close failed: %s", e)
            self._browser = None
        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning("Playwright stop failed: %s", e)
            self._playwright = None
        logger.info("Playwright stopped")


playwright_manager = PlaywrightManager()
