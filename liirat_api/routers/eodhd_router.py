import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from liirat_api.adapters.calendar import adapt_calendar_event
from liirat_api.adapters.fields import records
from liirat_api.adapters.news import adapt_news_article
from liirat_api.adapters.quote import normalize_quote_payload
from liirat_api.core.exceptions import ConfigurationError, ProviderFailure, UpstreamError
from liirat_api.core.responses import (
    NO_STORE,
    envelope_error,
    envelope_error_from,
    items_response,
)
from liirat_api.deps import get_eodhd_client
from liirat_api.providers.eodhd import EodhdClient, split_symbols

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/eodhd", tags=["eodhd"])


@router.get("/quotes")
@router.get("/price")
async def get_quotes(
    symbols: Optional[str] = Query(default=None, description="콤마 구분 심볼 (예: AAPL.US,MSFT.US)"),
    s: Optional[str] = Query(default=None),
    symbol: Optional[str] = Query(default=None),
    client: EodhdClient = Depends(get_eodhd_client),
) -> Any:
    """실시간 시세 (정규화된 Quote 목록)"""
    wanted = split_symbols(symbols or s or symbol)
    if not wanted:
        return envelope_error(400, "MISSING_SYMBOLS")

    try:
        payload = await client.real_time(wanted, timeout=client.fast_timeout)
    except ProviderFailure as e:
        return envelope_error_from(e)

    return items_response(quote.model_dump() for quote in normalize_quote_payload(payload))


@router.get("/calendar")
async def get_calendar(
    from_date: Optional[str] = Query(default=None, alias="from"),
    to_date: Optional[str] = Query(default=None, alias="to"),
    country: Optional[str] = None,
    type: Optional[str] = None,
    limit: int = Query(default=200, ge=1),
    client: EodhdClient = Depends(get_eodhd_client),
) -> Any:
    """경제 캘린더 이벤트"""
    if not from_date or not to_date:
        return envelope_error(400, "MISSING_RANGE")

    try:
        payload = await client.economic_events(
            from_date, to_date, country=country, type=type, limit=limit,
            timeout=client.fast_timeout,
        )
    except ProviderFailure as e:
        return envelope_error_from(e)

    return items_response(adapt_calendar_event(row).model_dump() for row in records(payload))


@router.get("/news")
async def get_news(
    s: Optional[str] = None,
    t: Optional[str] = None,
    from_date: Optional[str] = Query(default=None, alias="from"),
    to_date: Optional[str] = Query(default=None, alias="to"),
    limit: int = Query(default=50, ge=1),
    offset: int = Query(default=0, ge=0),
    client: EodhdClient = Depends(get_eodhd_client),
) -> Any:
    """심볼(s) 또는 태그(t) 기준 뉴스"""
    if not s and not t:
        return envelope_error(400, "MISSING_S_OR_T")

    try:
        payload = await client.news(
            s=s, t=t, from_date=from_date, to_date=to_date, limit=limit, offset=offset,
            timeout=client.fast_timeout,
        )
    except ProviderFailure as e:
        return envelope_error_from(e)

    return items_response(adapt_news_article(row).model_dump() for row in records(payload))


@router.get("/search")
async def search(
    q: Optional[str] = None,
    limit: int = Query(default=15, ge=1),
    type: str = "all",
    client: EodhdClient = Depends(get_eodhd_client),
) -> Any:
    if not q:
        return envelope_error(400, "MISSING_Q")

    try:
        payload = await client.search(q, limit=limit, type=type, timeout=client.fast_timeout)
    except ProviderFailure as e:
        return envelope_error_from(e)

    return items_response(dict(row) for row in records(payload))


@router.get("/ping")
async def ping(client: EodhdClient = Depends(get_eodhd_client)) -> Any:
    """API 키 확인용 실시간 조회"""
    try:
        await client.real_time(["AAPL.US"], timeout=client.fast_timeout)
        test = "API key valid"
    except ConfigurationError as e:
        return envelope_error_from(e)
    except UpstreamError as e:
        if e.upstream_status is None:
            # Timeout or network failure: the service itself is unreachable
            return envelope_error(500, "CONNECTION_ERROR", e.message)
        logger.warning(f"EODHD ping answered {e.upstream_status}")
        test = "API key test failed"

    return JSONResponse(
        status_code=200,
        content={"ok": True, "status": "EODHD API connection successful", "test": test},
        headers=NO_STORE,
    )
