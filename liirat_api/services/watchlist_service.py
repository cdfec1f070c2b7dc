from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from liirat_api.adapters.quote import normalize_quote_payload
from liirat_api.config import Settings
from liirat_api.providers.eodhd import EodhdClient
from liirat_api.schemas.quote import CachedQuote, Quote
from liirat_api.services.quote_batcher import QuoteBatcher
from liirat_api.services.quote_cache import QuoteCache
from liirat_api.services.quote_poller import QuotePoller

logger = logging.getLogger(__name__)


class WatchlistService:
    """Keeps the configured watch list warm in the shared ``QuoteCache``."""

    def __init__(self, settings: Settings, cache: QuoteCache, client: EodhdClient):
        self._settings = settings
        self._cache = cache
        self._client = client
        self.batcher = QuoteBatcher(
            self.fetch_symbol,
            cache,
            batch_size=settings.QUOTE_BATCH_SIZE,
            batch_delay=settings.QUOTE_BATCH_DELAY_SECONDS,
            interval=settings.QUOTE_POLL_INTERVAL_SECONDS,
        )
        self.poller = QuotePoller(
            self.fetch_batch,
            cache,
            interval=settings.QUOTE_BATCH_POLL_INTERVAL_SECONDS,
        )

    @property
    def symbols(self) -> List[str]:
        return [symbol.upper() for symbol in self._settings.WATCHLIST]

    async def fetch_symbol(self, symbol: str) -> Optional[Quote]:
        payload = await self._client.real_time([symbol])
        quotes = normalize_quote_payload(payload)
        for quote in quotes:
            if quote.symbol.upper() == symbol.upper():
                return quote
        return quotes[0] if quotes else None

    async def fetch_batch(self, symbols: List[str]) -> List[Quote]:
        payload = await self._client.real_time(symbols)
        return normalize_quote_payload(payload)

    async def refresh(self, symbols: Optional[Sequence[str]] = None) -> List[CachedQuote]:
        """Fetch stale symbols now (per-symbol batches) and return the snapshot."""
        wanted = [s.upper() for s in symbols] if symbols else self.symbols
        await self.batcher.poll_once(wanted)
        return self._cache.snapshot(wanted)

    def snapshot(self, symbols: Optional[Sequence[str]] = None) -> List[CachedQuote]:
        wanted = [s.upper() for s in symbols] if symbols else self.symbols
        return self._cache.snapshot(wanted)

    def start(self) -> None:
        logger.info(f"Starting watchlist polling for {len(self.symbols)} symbols")
        self.poller.start(self.symbols)

    def pause(self) -> None:
        self.poller.pause()

    def resume(self) -> None:
        self.poller.resume()

    async def stop(self) -> None:
        await self.poller.stop()
        await self.batcher.stop()
