# -*- coding: utf-8 -*-
"""
Search-results extraction: Playwright drives the page, BeautifulSoup parses it.

  1. navigate (domcontentloaded, bounded, no retry)
  2. wait for the first item selector of the cascade that shows up
  3. "no results" phrase check on the body text
  4. per-card field cascades (name / price / link), capped
  5. JSON-LD fallback when the cards gave nothing
"""
from __future__ import annotations
import asyncio
from typing import Awaitable, Callable, Optional

from bs4 import BeautifulSoup
from playwright.async_api import Page, Error as PWError, TimeoutError as PWTimeout

from pricematch.config import settings
from pricematch.competitors.registry import CompetitorConfig
from pricematch.schemas import ExtractOutcome, ExtractStatus
from pricematch.scraping.selector_engine import extract_cards, extract_structured_data
from pricematch.utils.logger import get_logger


class ResultsExtractor:

    def __init__(
        self,
        navigation_timeout_ms: Optional[int] = None,
        selector_wait_ms: Optional[int] = None,
        settle_delay_ms: Optional[int] = None,
        max_candidates: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.navigation_timeout_ms = navigation_timeout_ms or settings.navigation_timeout_ms
        self.selector_wait_ms = (
            settings.selector_wait_ms if selector_wait_ms is None else selector_wait_ms
        )
        self.settle_delay_ms = (
            settings.settle_delay_ms if settle_delay_ms is None else settle_delay_ms
        )
        self.max_candidates = max_candidates or settings.max_candidates
        self._sleep = sleep

    async def extract(
        self, page: Page, config: CompetitorConfig, query: str,
    ) -> ExtractOutcome:
        log = get_logger("scraper." + config.key)
        url = config.search_url(query)
        outcome = ExtractOutcome(search_url=url)

        # ---------------------------------------------------------- #
        # Step 1: Navigate                                           #
        # ---------------------------------------------------------- #
        log.info("GET %s", url)
        try:
            await page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.navigation_timeout_ms,
            )
        except PWTimeout as e:
            log.warning("Navigation timeout on %s: %s", config.key, e)
            outcome.status  = ExtractStatus.TIMEOUT
            outcome.message = "Timeout: " + str(e)
            return outcome
        except PWError as e:
            log.warning("Navigation error on %s: %s", config.key, e)
            outcome.status  = ExtractStatus.ERROR
            outcome.message = "Navigation error: " + str(e)
            return outcome

        # ---------------------------------------------------------- #
        # Step 2: Wait for result cards                              #
        # ---------------------------------------------------------- #
        container_sel = await self._wait_for_items(page, config)
        if container_sel is None:
            log.info(
                "No item selector appeared, settling %dms", self.settle_delay_ms
            )
            await self._sleep(self.settle_delay_ms / 1000.0)

        # ---------------------------------------------------------- #
        # Step 3: "No results" page                                  #
        # ---------------------------------------------------------- #
        body_text = await self._body_text(page)
        for phrase in config.no_result_phrases:
            if phrase in body_text:
                log.info("No-results phrase found: '%s'", phrase)
                outcome.status  = ExtractStatus.NO_RESULTS
                outcome.message = f"No-results page ('{phrase}')"
                return outcome

        # ---------------------------------------------------------- #
        # Step 4/5: Cards, then JSON-LD                              #
        # ---------------------------------------------------------- #
        soup = BeautifulSoup(await page.content(), "lxml")
        base_url = page.url or url
        candidates = extract_cards(
            soup, container_sel, config.selectors, base_url, self.max_candidates,
        )
        if not candidates:
            candidates = extract_structured_data(soup, base_url, self.max_candidates)
            if candidates:
                log.info("JSON-LD fallback: %d candidates", len(candidates))

        outcome.candidates = candidates
        outcome.message    = f"{len(candidates)} candidates extracted"
        log.info("%s: %s", config.name, outcome.message)
        return outcome

    async def _wait_for_items(
        self, page: Page, config: CompetitorConfig,
    ) -> Optional[str]:
        # Playwright treats timeout=0 as "no limit"
        timeout = max(1, self.selector_wait_ms)
        for sel in config.selectors.item:
            try:
                await page.wait_for_selector(sel, timeout=timeout)
                return sel
            except PWError:
                continue
        return None

    async def _body_text(self, page: Page) -> str:
        try:
            return ((await page.text_content("body")) or "").lower()
        except PWError:
            return ""


results_extractor = ResultsExtractor()
