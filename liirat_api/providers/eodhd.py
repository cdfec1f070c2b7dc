from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Sequence, Tuple
from urllib.parse import quote

from liirat_api.providers.base import UpstreamClient

_FOREX_MARKERS = ("USD", "EUR", "GBP", "JPY", "CHF", "CAD", "AUD", "XAU")


class MarketKind(str, Enum):
    CRYPTO = "crypto"
    FOREX = "forex"
    INDEX = "index"
    STOCK = "stock"


def classify_symbol(symbol: str) -> MarketKind:
    """Market family of a ticker, as the EODHD real-time routes expect it."""
    upper = symbol.upper()
    if "-USD" in upper or "BTC" in upper or "ETH" in upper or upper.endswith(".CC"):
        return MarketKind.CRYPTO
    if upper.endswith(".INDX") or upper == "GSPC":
        return MarketKind.INDEX
    if upper.endswith(".FOREX") or any(marker in upper for marker in _FOREX_MARKERS):
        return MarketKind.FOREX
    return MarketKind.STOCK


def split_symbols(raw: Optional[str]) -> list:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


class EodhdClient(UpstreamClient):
    """EODHD REST API (real-time quotes, economic events, news, search)."""

    provider = "EODHD"
    auth_param = "api_token"
    extra_params = {"fmt": "json"}

    @property
    def api_key(self) -> Optional[str]:
        return self._settings.EODHD_API_KEY

    @property
    def base_url(self) -> str:
        return self._settings.EODHD_BASE_URL.rstrip("/")

    @property
    def default_timeout(self) -> float:
        return self._settings.EODHD_PRICE_TIMEOUT_SECONDS

    @property
    def fast_timeout(self) -> float:
        """Timeout of the ``/api/eodhd/*`` routes."""
        return self._settings.EODHD_FAST_TIMEOUT_SECONDS

    async def real_time(
        self, symbols: Sequence[str], *, timeout: Optional[float] = None
    ) -> Any:
        """First symbol goes in the path, the rest in ``s=``."""
        if not symbols:
            return []
        first, rest = symbols[0].upper(), [s.upper() for s in symbols[1:]]
        return await self.fetch(
            f"/real-time/{quote(first, safe='')}",
            {"s": ",".join(rest) or None},
            timeout=timeout,
            cache_category="prices",
        )

    def route_by_kind(self, symbols: str) -> Tuple[str, str, MarketKind]:
        """(path, s-parameter, kind) for the legacy price route."""
        kind = classify_symbol(symbols)
        if kind is MarketKind.CRYPTO:
            return "/real-time/crypto", symbols, kind
        if kind is MarketKind.FOREX:
            value = symbols if ".FOREX" in symbols.upper() else f"{symbols}.FOREX"
            return "/real-time/forex", value, kind
        if kind is MarketKind.INDEX:
            value = symbols if ".INDX" in symbols.upper() else f"{symbols}.INDX"
            return "/real-time/stocks", value, kind
        return "/real-time/stocks", symbols, kind

    async def real_time_by_kind(
        self, symbols: str, filter: Optional[str] = "live", *, timeout: Optional[float] = None
    ) -> Any:
        path, value, kind = self.route_by_kind(symbols)
        params = {"s": value}
        if filter and kind is not MarketKind.CRYPTO:
            params["filter"] = filter
        return await self.fetch(path, params, timeout=timeout, cache_category="prices")

    async def economic_events(
        self,
        from_date: str,
        to_date: str,
        country: Optional[str] = None,
        type: Optional[str] = None,
        importance: Optional[int] = None,
        limit: Optional[int] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        return await self.fetch(
            "/economic-events",
            {
                "from": from_date,
                "to": to_date,
                "country": country,
                "type": type,
                "importance": importance,
                "limit": limit,
            },
            timeout=timeout or self._settings.EODHD_CALENDAR_TIMEOUT_SECONDS,
            cache_category="calendar",
        )

    async def news(
        self,
        s: Optional[str] = None,
        t: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        return await self.fetch(
            "/news",
            {
                "s": s,
                "t": t,
                "from": from_date,
                "to": to_date,
                "limit": limit,
                "offset": offset,
            },
            timeout=timeout or self._settings.EODHD_NEWS_TIMEOUT_SECONDS,
            cache_category="news",
        )

    async def search(
        self,
        q: str,
        limit: int = 15,
        type: str = "all",
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        return await self.fetch(
            f"/search/{quote(q, safe='')}",
            {"limit": limit, "type": type},
            timeout=timeout,
        )
