from __future__ import annotations
import asyncio
import random
from typing import Awaitable, Callable, Optional

from pricematch.config import settings
from pricematch.utils.logger import get_logger

logger = get_logger(__name__)


class PacingController:
    """
    Randomised pause after each search so the target site does not see a
    fixed request interval. The pause is local to the calling task; it does
    not throttle other in-flight resolutions.
    """

    def __init__(
        self,
        base_ms: Optional[int] = None,
        jitter_ms: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.base_ms   = settings.pause_between_searches_ms if base_ms is None else base_ms
        self.jitter_ms = settings.pause_jitter_ms if jitter_ms is None else jitter_ms
        self._sleep    = sleep

    def next_delay(self) -> float:
        """Seconds to wait: base + uniform jitter in [0, jitter_ms]."""
        jitter = random.uniform(0, self.jitter_ms) if self.jitter_ms > 0 else 0.0
        return max(self.base_ms + jitter, 0.0) / 1000.0

    async def pause(self) -> float:
        delay = self.next_delay()
        logger.debug("Pacing %.2fs", delay)
        await self._sleep(delay)
        return delay
