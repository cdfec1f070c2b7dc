import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from liirat_api.adapters.quote import normalize_quote_payload, quote_rows, to_legacy_price
from liirat_api.core.exceptions import ProviderFailure
from liirat_api.core.responses import NO_STORE, legacy_error, legacy_error_from
from liirat_api.deps import get_eodhd_client, get_polygon_client
from liirat_api.providers.eodhd import EodhdClient, split_symbols
from liirat_api.providers.polygon import PolygonClient
from liirat_api.utils.date_utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["prices"])

# /api/quotes accepts at most this many symbols per call
MAX_QUOTE_SYMBOLS = 20


@router.get("/quotes")
async def get_quotes(
    symbols: Optional[str] = Query(default=None, description="콤마 구분 심볼, 최대 20개"),
    client: EodhdClient = Depends(get_eodhd_client),
) -> Any:
    """``[{code, price, change, changePercent}]`` 형태의 단순 시세 목록"""
    wanted = split_symbols(symbols)[:MAX_QUOTE_SYMBOLS]
    if not wanted:
        return legacy_error(400, "symbols required")

    try:
        payload = await client.real_time(wanted)
    except ProviderFailure as e:
        return legacy_error_from(e)

    rows = [quote.to_code_row() for quote in normalize_quote_payload(payload)]
    return JSONResponse(status_code=200, content=rows, headers=NO_STORE)


@router.get("/eodhd-price")
async def get_eodhd_price(
    symbol: Optional[str] = None,
    symbols: Optional[str] = None,
    filter: Optional[str] = "live",
    client: EodhdClient = Depends(get_eodhd_client),
) -> Any:
    """시장 종류(crypto/forex/index/stock)별 실시간 가격"""
    requested = (symbol or symbols or "").strip()
    if not requested:
        return legacy_error(400, "Missing required parameter: symbol or symbols", prices=[])

    try:
        payload = await client.real_time_by_kind(requested, filter=filter)
    except ProviderFailure as e:
        return legacy_error_from(e, prices=[], symbol=requested)

    prices = [to_legacy_price(row).model_dump() for row in quote_rows(payload)]
    return {
        "prices": prices,
        "total": len(prices),
        "symbol": requested,
        "timestamp": utc_now_iso(),
    }


@router.get("/price-alert")
async def get_price_alert_quote(
    symbol: Optional[str] = None,
    client: PolygonClient = Depends(get_polygon_client),
) -> Any:
    """Polygon 스냅샷 기반 단일 가격 (가격 알림 확인용)"""
    if not symbol:
        return legacy_error(400, "Symbol parameter required")

    try:
        snapshot = await client.snapshot(symbol)
    except ProviderFailure as e:
        return legacy_error_from(e, symbol=symbol.upper())

    if snapshot is None:
        return legacy_error(404, "Price not found for symbol", symbol=symbol.upper())
    return snapshot.model_dump()
