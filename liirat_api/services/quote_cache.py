from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, List, Optional, Set

from liirat_api.schemas.quote import CachedQuote, ConnectionStatus, Quote
from liirat_api.utils.date_utils import utc_now, utc_now_iso

logger = logging.getLogger(__name__)

Subscriber = Callable[[Quote], None]

# Subscribers registered under this key receive every symbol
WILDCARD = "*"


class QuoteCache:
    """
    Last known quote per symbol plus per-symbol subscribers.

    A failure never clears a stored quote: ``mark_failure`` only changes the
    connection status and error text.
    """

    def __init__(self):
        self._entries: Dict[str, CachedQuote] = {}
        self._fetched_at: Dict[str, datetime] = {}
        self._subscribers: Dict[str, Set[Subscriber]] = defaultdict(set)

    @staticmethod
    def _key(symbol: str) -> str:
        return symbol.strip().upper()

    def get(self, symbol: str) -> Optional[CachedQuote]:
        return self._entries.get(self._key(symbol))

    def age_seconds(self, symbol: str) -> Optional[float]:
        """Seconds since the last successful publish, None when never fetched."""
        fetched_at = self._fetched_at.get(self._key(symbol))
        if fetched_at is None:
            return None
        return (utc_now() - fetched_at).total_seconds()

    def subscribe(self, symbol: str, callback: Subscriber) -> Callable[[], None]:
        key = WILDCARD if symbol == WILDCARD else self._key(symbol)
        self._subscribers[key].add(callback)

        def unsubscribe() -> None:
            self._subscribers[key].discard(callback)

        return unsubscribe

    def publish(self, quote: Quote) -> CachedQuote:
        key = self._key(quote.symbol)
        entry = CachedQuote(
            symbol=key,
            quote=quote,
            status=ConnectionStatus.CONNECTED,
            lastUpdate=utc_now_iso(),
            error=None,
        )
        self._entries[key] = entry
        self._fetched_at[key] = utc_now()
        self._notify(key, quote)
        return entry

    def mark_failure(
        self, symbol: str, status: ConnectionStatus, error: Optional[str] = None
    ) -> CachedQuote:
        key = self._key(symbol)
        previous = self._entries.get(key)
        entry = CachedQuote(
            symbol=key,
            quote=previous.quote if previous else None,
            status=status,
            lastUpdate=previous.lastUpdate if previous else None,
            error=error,
        )
        self._entries[key] = entry
        return entry

    def snapshot(self, symbols: Optional[List[str]] = None) -> List[CachedQuote]:
        if symbols is None:
            return list(self._entries.values())
        return [
            self._entries.get(self._key(symbol)) or CachedQuote(symbol=self._key(symbol))
            for symbol in symbols
        ]

    def clear(self) -> None:
        """Drops stored quotes; subscribers stay registered."""
        self._entries.clear()
        self._fetched_at.clear()

    def _notify(self, key: str, quote: Quote) -> None:
        listeners = list(self._subscribers.get(key, ())) + list(
            self._subscribers.get(WILDCARD, ())
        )
        for callback in listeners:
            try:
                callback(quote)
            except Exception as e:
                logger.error(f"Quote subscriber failed for {key}: {e}", exc_info=True)
