from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

from liirat_api.adapters.fields import parse_number, parse_positive
from liirat_api.providers.base import UpstreamClient
from liirat_api.schemas.quote import PriceSnapshot
from liirat_api.utils.date_utils import utc_now

_FOREX_MARKERS = ("USD", "EUR", "GBP", "JPY", "CAD", "AUD", "CHF", "NZD")
_CRYPTO_MARKERS = ("BTC", "ETH", "LTC", "XRP", "ADA", "DOT")


def snapshot_path(symbol: str) -> str:
    """Market-routed snapshot endpoint: crypto ``X:``, forex ``C:``, else stocks."""
    upper = symbol.upper()
    if any(marker in upper for marker in _CRYPTO_MARKERS):
        return f"/v2/snapshot/locale/global/markets/crypto/tickers/X:{upper}"
    if any(marker in upper for marker in _FOREX_MARKERS):
        return f"/v2/snapshot/locale/global/markets/forex/tickers/C:{upper}"
    return f"/v2/snapshot/locale/us/markets/stocks/tickers/{upper}"


def extract_price(payload: Any) -> Tuple[Optional[float], Optional[int]]:
    """(price, timestamp ms) from ``value``, ``lastTrade.p`` or ``last.price``."""
    if not isinstance(payload, Mapping):
        return None, None
    results = payload.get("results")
    if isinstance(results, list) and results:
        ticker = results[0]
    else:
        ticker = payload.get("ticker") or payload.get("results")
    if not isinstance(ticker, Mapping):
        return None, None

    price = parse_positive(ticker.get("value"))
    if price is not None:
        return price, None
    last_trade = ticker.get("lastTrade")
    if isinstance(last_trade, Mapping):
        price = parse_positive(last_trade.get("p"))
        if price is not None:
            return price, _as_int(last_trade.get("t"))
    last = ticker.get("last")
    if isinstance(last, Mapping):
        price = parse_positive(last.get("price"))
        if price is not None:
            return price, _as_int(last.get("timestamp"))
    return None, None


def _as_int(value: Any) -> Optional[int]:
    number = parse_number(value)
    return int(number) if number is not None else None


class PolygonClient(UpstreamClient):
    """Polygon.io snapshot endpoints used by the price-alert lookup."""

    provider = "Polygon"
    auth_param = "apiKey"

    @property
    def api_key(self) -> Optional[str]:
        return self._settings.POLYGON_API_KEY

    @property
    def base_url(self) -> str:
        return self._settings.POLYGON_BASE_URL.rstrip("/")

    @property
    def default_timeout(self) -> float:
        return self._settings.POLYGON_TIMEOUT_SECONDS

    async def snapshot(self, symbol: str) -> Optional[PriceSnapshot]:
        payload = await self.fetch(snapshot_path(symbol), cache_category="prices")
        price, timestamp = extract_price(payload)
        if price is None:
            return None
        return PriceSnapshot(
            symbol=symbol.upper(),
            price=price,
            timestamp=timestamp or int(utc_now().timestamp() * 1000),
        )
