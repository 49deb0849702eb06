# -*- coding: utf-8 -*-
"""
Single entry point: resolve(product, competitor_key) -> Found | NotFound.

Registry lookup → browser context → extraction → best match → price → pacing.
Runtime failures never escape; they come back as NotFound with a reason and a
human-readable detail. Only malformed input (ValidationError) and a dead
browser launch (BrowserLaunchError) are raised.
"""
from __future__ import annotations
from typing import Any, Mapping, Optional, Union

from pricematch.agents.matcher import select_best
from pricematch.agents.price_parser import parse_price
from pricematch.competitors.registry import CompetitorRegistry, competitor_registry
from pricematch.config import settings
from pricematch.exceptions import BrowserLaunchError
from pricematch.schemas import (
    ExtractStatus, Found, NotFound, NotFoundReason, Product,
    ResolutionResult, ServiceStatus,
)
from pricematch.scraping.extractor import ResultsExtractor, results_extractor
from pricematch.scraping.pacing import PacingController
from pricematch.scraping.playwright_manager import playwright_manager
from pricematch.utils.logger import get_logger

logger = get_logger(__name__)


class CompetitorResolver:

    def __init__(
        self,
        session=None,
        registry: Optional[CompetitorRegistry] = None,
        extractor: Optional[ResultsExtractor] = None,
        pacing: Optional[PacingController] = None,
        threshold: Optional[float] = None,
        query_token_limit: Optional[int] = None,
    ):
        self.session   = session or playwright_manager
        self.registry  = registry or competitor_registry
        self.extractor = extractor or results_extractor
        self.pacing    = pacing or PacingController()
        self.threshold = settings.match_threshold if threshold is None else threshold
        self.query_token_limit = query_token_limit or settings.query_token_limit

    def describe(self) -> ServiceStatus:
        return ServiceStatus(competitors=self.registry.keys())

    async def resolve(
        self, product: Union[Product, Mapping[str, Any]], competitor_key: str,
    ) -> ResolutionResult:
        if not isinstance(product, Product):
            product = Product.model_validate(product)

        config = self.registry.lookup(competitor_key)
        if not config:
            logger.info("Unsupported competitor: %s", competitor_key)
            return NotFound(
                reason=NotFoundReason.UNSUPPORTED_COMPETITOR,
                detail=f"Competitor '{competitor_key}' is not supported",
            )

        log   = get_logger("resolver." + config.key)
        query = product.search_term(self.query_token_limit)
        log.info("Resolving '%s' (query='%s')", product.name, query)

        try:
            async with self.session.page() as page:
                outcome = await self.extractor.extract(page, config, query)
            return self._finalize(product, outcome, log)
        except BrowserLaunchError:
            raise
        except Exception as e:
            log.exception("Resolution error on %s", config.key)
            return NotFound(reason=NotFoundReason.NAVIGATION_FAILURE, detail=str(e))
        finally:
            await self.pacing.pause()

    def _finalize(self, product: Product, outcome, log) -> ResolutionResult:
        if outcome.status in (ExtractStatus.TIMEOUT, ExtractStatus.ERROR):
            return NotFound(
                reason=NotFoundReason.NAVIGATION_FAILURE, detail=outcome.message,
            )
        if outcome.status == ExtractStatus.NO_RESULTS:
            return NotFound(
                reason=NotFoundReason.NO_RESULTS_PAGE, detail=outcome.message,
            )
        if not outcome.candidates:
            return NotFound(
                reason=NotFoundReason.NO_CANDIDATES,
                detail="No products extracted from the DOM or JSON-LD",
            )

        best, score = select_best(outcome.candidates, product.name)
        if best is None or score < self.threshold:
            log.info("Best score %.2f below %.2f", score, self.threshold)
            return NotFound(
                reason=NotFoundReason.BELOW_THRESHOLD,
                detail=f"No sufficient match (max score: {score:.2f})",
            )

        price = parse_price(best.raw_price_text)
        if price is None:
            return NotFound(
                reason=NotFoundReason.PRICE_UNPARSABLE,
                detail=f"Price not extractable from '{best.raw_price_text}'",
            )

        log.info("Match %.2f | %s | %.2f", score, best.raw_name[:60], price)
        return Found(
            matched_name=best.raw_name,
            price=price,
            url=best.url or outcome.search_url,
            match_score=score,
        )


resolver = CompetitorResolver()


async def resolve(
    product: Union[Product, Mapping[str, Any]], competitor_key: str,
) -> ResolutionResult:
    return await resolver.resolve(product, competitor_key)


def describe() -> ServiceStatus:
    return resolver.describe()
