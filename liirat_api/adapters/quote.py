from typing import Any, Dict, List, Mapping, Optional

from liirat_api.adapters.fields import (
    FieldRule,
    parse_number,
    parse_positive,
    parse_text,
    pick,
    rules,
)
from liirat_api.schemas.quote import LegacyPrice, Quote
from liirat_api.utils.date_utils import to_iso_utc

SYMBOL_FIELDS = rules(parse_text, "code", "symbol", "ticker")
PRICE_FIELDS = rules(parse_positive, "close", "price", "last", "value")
PREVIOUS_CLOSE_FIELDS = rules(parse_number, "previousClose", "previous_close", "prev_close")
CHANGE_FIELDS = rules(parse_number, "change", "change_price", "diff")
CHANGE_PERCENT_FIELDS = rules(parse_number, "change_p", "change_percent", "chg_percent")
TIMESTAMP_FIELDS = (
    FieldRule("timestamp", to_iso_utc),
    FieldRule("ts", to_iso_utc),
)


def derive_change(price: Optional[float], previous_close: Optional[float]) -> Optional[float]:
    if price is None or previous_close is None or previous_close <= 0:
        return None
    return price - previous_close


def derive_change_percent(change: Optional[float], previous_close: Optional[float]) -> Optional[float]:
    """``change / previousClose * 100``; 0 when previous close is not positive."""
    if change is None or previous_close is None:
        return None
    if previous_close <= 0:
        return 0.0
    return change / previous_close * 100


def adapt_quote(raw: Mapping[str, Any]) -> Quote:
    symbol = pick(raw, SYMBOL_FIELDS) or ""
    price = pick(raw, PRICE_FIELDS)
    previous_close = pick(raw, PREVIOUS_CLOSE_FIELDS)

    change = pick(raw, CHANGE_FIELDS)
    if change is None:
        change = derive_change(price, previous_close)

    change_percent = pick(raw, CHANGE_PERCENT_FIELDS)
    if change_percent is None:
        change_percent = derive_change_percent(change, previous_close)

    # Without a price the movement fields are meaningless
    if price is None:
        change = None
        change_percent = None

    return Quote(
        symbol=symbol,
        price=price,
        change=change,
        changePercent=change_percent,
        previousClose=previous_close if previous_close and previous_close > 0 else None,
        timestamp=pick(raw, TIMESTAMP_FIELDS),
    )


def quote_rows(payload: Any) -> List[Mapping[str, Any]]:
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, Mapping)]
    if isinstance(payload, Mapping):
        if pick(payload, SYMBOL_FIELDS):
            return [payload]
        data = payload.get("data")
        if isinstance(data, list):
            return quote_rows(data)
        if isinstance(data, Mapping):
            return quote_rows(data)
        # {"AAPL.US": {...}, "MSFT.US": {...}}
        return [row for row in payload.values() if isinstance(row, Mapping)]
    return []


def normalize_quote_payload(payload: Any) -> List[Quote]:
    """Accepts every real-time payload shape EODHD returns; rows without a
    symbol are dropped."""
    quotes = [adapt_quote(row) for row in quote_rows(payload)]
    return [quote for quote in quotes if quote.symbol]


def to_legacy_price(raw: Mapping[str, Any]) -> LegacyPrice:
    quote = adapt_quote(raw)
    extra: Dict[str, Any] = {
        "name": parse_text(raw.get("name")),
        "currency": parse_text(raw.get("currency")),
        "market_status": parse_text(raw.get("market_status")),
        "volume": parse_positive(raw.get("volume")),
        "high": parse_positive(raw.get("high")),
        "low": parse_positive(raw.get("low")),
        "open": parse_positive(raw.get("open")),
    }
    return LegacyPrice(
        symbol=quote.symbol or "Unknown",
        price=quote.price,
        change=quote.change,
        change_percent=quote.changePercent,
        timestamp=quote.timestamp,
        previous_close=quote.previousClose,
        **extra,
    )
