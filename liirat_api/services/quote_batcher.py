from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Set

from liirat_api.core.exceptions import (
    ConfigurationError,
    UpstreamError,
    UpstreamRateLimitError,
)
from liirat_api.schemas.quote import ConnectionStatus, Quote
from liirat_api.services.quote_cache import QuoteCache

logger = logging.getLogger(__name__)

SymbolFetcher = Callable[[str], Awaitable[Optional[Quote]]]
Sleeper = Callable[[float], Awaitable[None]]


def partition(symbols: Sequence[str], size: int) -> List[List[str]]:
    size = max(1, size)
    return [list(symbols[i : i + size]) for i in range(0, len(symbols), size)]


class QuoteBatcher:
    """
    Per-symbol quote fetching in small batches.

    - symbols fresher than ``interval`` seconds are skipped
    - at most one in-flight request per symbol
    - each batch runs concurrently and fully settles before the next one
      starts, with ``batch_delay`` seconds between batches
    - rate-limited symbols become ``degraded``, other failures
      ``disconnected``; the cached quote is kept either way
    """

    def __init__(
        self,
        fetcher: SymbolFetcher,
        cache: QuoteCache,
        batch_size: int = 3,
        batch_delay: float = 2.0,
        interval: float = 60.0,
        sleep: Sleeper = asyncio.sleep,
    ):
        self._fetcher = fetcher
        self._cache = cache
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.interval = interval
        self._sleep = sleep
        self._in_flight: Set[str] = set()
        self._concurrency: Dict[str, int] = defaultdict(int)
        self._max_in_flight: Dict[str, int] = defaultdict(int)
        self._task: Optional[asyncio.Task] = None

    def is_pending(self, symbol: str) -> bool:
        return symbol.upper() in self._in_flight

    def max_in_flight(self, symbol: str) -> int:
        """Highest number of simultaneous requests ever seen for ``symbol``."""
        return self._max_in_flight.get(symbol.upper(), 0)

    def is_fresh(self, symbol: str) -> bool:
        age = self._cache.age_seconds(symbol)
        return age is not None and age < self.interval

    async def fetch_symbol(self, symbol: str) -> None:
        key = symbol.upper()
        if key in self._in_flight:
            return
        self._in_flight.add(key)
        self._concurrency[key] += 1
        self._max_in_flight[key] = max(self._max_in_flight[key], self._concurrency[key])
        try:
            quote = await self._fetcher(key)
            if quote is None or quote.price is None:
                self._cache.mark_failure(key, ConnectionStatus.DISCONNECTED, "No price data")
            else:
                self._cache.publish(quote)
        except UpstreamRateLimitError as e:
            logger.warning(f"Rate limited while fetching {key}: {e}")
            self._cache.mark_failure(key, ConnectionStatus.DEGRADED, str(e))
        except (UpstreamError, ConfigurationError) as e:
            logger.warning(f"Quote fetch failed for {key}: {e}")
            self._cache.mark_failure(key, ConnectionStatus.DISCONNECTED, str(e))
        except Exception as e:
            logger.error(f"Unexpected error fetching {key}: {e}", exc_info=True)
            self._cache.mark_failure(key, ConnectionStatus.DISCONNECTED, str(e))
        finally:
            self._concurrency[key] -= 1
            self._in_flight.discard(key)

    async def poll_once(self, symbols: Sequence[str]) -> List[str]:
        """Fetch every stale symbol once; returns the symbols requested."""
        due: List[str] = []
        for symbol in symbols:
            key = symbol.upper()
            if key in due or self.is_fresh(key):
                continue
            due.append(key)

        batches = partition(due, self.batch_size)
        for index, batch in enumerate(batches):
            if index > 0 and self.batch_delay > 0:
                await self._sleep(self.batch_delay)
            await asyncio.gather(
                *(self.fetch_symbol(symbol) for symbol in batch), return_exceptions=True
            )
        return due

    async def run(self, symbols: Sequence[str]) -> None:
        while True:
            await self.poll_once(symbols)
            await self._sleep(self.interval)

    def start(self, symbols: Sequence[str]) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(list(symbols)))
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
