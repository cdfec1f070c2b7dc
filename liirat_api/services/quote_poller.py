from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from liirat_api.core.exceptions import (
    ConfigurationError,
    UpstreamError,
    UpstreamRateLimitError,
)
from liirat_api.schemas.quote import ConnectionStatus, Quote
from liirat_api.services.quote_cache import QuoteCache

logger = logging.getLogger(__name__)

BatchFetcher = Callable[[List[str]], Awaitable[List[Quote]]]
Sleeper = Callable[[float], Awaitable[None]]


class QuotePoller:
    """
    One batch request per cycle for the whole symbol list.

    Every cycle takes a new generation number and cancels the previous
    cycle; a cycle applies its results only while its generation is still
    the current one, so a late response can never overwrite a newer one.
    """

    def __init__(
        self,
        batch_fetcher: BatchFetcher,
        cache: QuoteCache,
        interval: float = 15.0,
        sleep: Sleeper = asyncio.sleep,
    ):
        self._fetcher = batch_fetcher
        self._cache = cache
        self.interval = interval
        self._sleep = sleep
        self._generation = 0
        self._cycle_task: Optional[asyncio.Task] = None
        self._loop_task: Optional[asyncio.Task] = None
        self._symbols: List[str] = []

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def _mark_all(self, symbols: Sequence[str], status: ConnectionStatus, error: str) -> None:
        for symbol in symbols:
            self._cache.mark_failure(symbol, status, error)

    async def _cycle(self, symbols: List[str], generation: int) -> bool:
        try:
            quotes = await self._fetcher(symbols)
        except UpstreamRateLimitError as e:
            if generation == self._generation:
                self._mark_all(symbols, ConnectionStatus.DEGRADED, str(e))
            return False
        except (UpstreamError, ConfigurationError) as e:
            logger.warning(f"Batch quote fetch failed: {e}")
            if generation == self._generation:
                self._mark_all(symbols, ConnectionStatus.DISCONNECTED, str(e))
            return False
        except Exception as e:
            logger.error(f"Unexpected error in quote cycle {generation}: {e}", exc_info=True)
            if generation == self._generation:
                self._mark_all(symbols, ConnectionStatus.DISCONNECTED, str(e))
            return False

        if generation != self._generation:
            logger.debug(f"Discarding stale quote cycle {generation} (current {self._generation})")
            return False

        for quote in quotes:
            if quote.price is None:
                self._cache.mark_failure(quote.symbol, ConnectionStatus.DISCONNECTED, "No price data")
            else:
                self._cache.publish(quote)
        return True

    def trigger(self, symbols: Sequence[str]) -> asyncio.Task:
        """Start a new cycle, cancelling the one still in flight."""
        self._generation += 1
        if self._cycle_task is not None and not self._cycle_task.done():
            self._cycle_task.cancel()
        self._cycle_task = asyncio.create_task(
            self._cycle([s.upper() for s in symbols], self._generation)
        )
        return self._cycle_task

    async def poll_once(self, symbols: Sequence[str]) -> bool:
        """Run one cycle; False when it failed or was superseded."""
        task = self.trigger(symbols)
        # wait() does not raise when the cycle itself is cancelled
        await asyncio.wait({task})
        if task.cancelled():
            return False
        return task.result()

    async def _run(self) -> None:
        while True:
            await self.poll_once(self._symbols)
            await self._sleep(self.interval)

    def start(self, symbols: Sequence[str]) -> asyncio.Task:
        self._symbols = list(symbols)
        if not self.running:
            self._loop_task = asyncio.create_task(self._run())
        return self._loop_task

    def pause(self) -> None:
        """Stop polling and drop the cycle in flight (page hidden)."""
        self._generation += 1
        for task in (self._loop_task, self._cycle_task):
            if task is not None and not task.done():
                task.cancel()
        self._loop_task = None
        self._cycle_task = None

    def resume(self) -> asyncio.Task:
        """Restart polling with an immediate cycle."""
        return self.start(self._symbols)

    async def stop(self) -> None:
        loop_task = self._loop_task
        self.pause()
        if loop_task is not None:
            try:
                await loop_task
            except asyncio.CancelledError:
                pass
