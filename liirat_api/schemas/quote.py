from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Quote(BaseModel):
    """정규화된 시세 레코드 (업스트림 종류와 무관)"""

    symbol: str = Field(..., description="Ticker symbol, e.g. AAPL.US")
    price: Optional[float] = Field(None, description="Last price, null when unknown")
    change: Optional[float] = Field(None, description="Absolute change vs previous close")
    changePercent: Optional[float] = Field(None, description="Percent change vs previous close")
    previousClose: Optional[float] = Field(None, description="Previous close")
    timestamp: Optional[str] = Field(None, description="Quote time (ISO-8601 UTC)")

    def to_code_row(self) -> dict:
        """``/api/quotes`` row shape."""
        return {
            "code": self.symbol,
            "price": self.price,
            "change": self.change,
            "changePercent": self.changePercent,
        }


class ConnectionStatus(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DEGRADED = "degraded"
    DISCONNECTED = "disconnected"


class CachedQuote(BaseModel):
    """Last known value for one watch-list symbol."""

    symbol: str
    quote: Optional[Quote] = None
    status: ConnectionStatus = ConnectionStatus.CONNECTING
    lastUpdate: Optional[str] = None
    error: Optional[str] = None


class LegacyPrice(BaseModel):
    """``/api/eodhd-price`` row"""

    symbol: str
    name: Optional[str] = None
    price: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None
    currency: Optional[str] = None
    timestamp: Optional[str] = None
    market_status: Optional[str] = None
    volume: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    open: Optional[float] = None
    previous_close: Optional[float] = None


class PriceSnapshot(BaseModel):
    """Polygon snapshot price used by ``/api/price-alert``"""

    symbol: str
    price: float
    timestamp: int
    source: str = "polygon.io"
