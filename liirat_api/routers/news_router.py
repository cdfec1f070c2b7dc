import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from liirat_api.adapters.fields import records
from liirat_api.adapters.news import adapt_marketaux_article, adapt_news_article
from liirat_api.core.exceptions import ProviderFailure, UpstreamError
from liirat_api.core.responses import legacy_error_from
from liirat_api.deps import get_eodhd_client, get_marketaux_client
from liirat_api.providers.eodhd import EodhdClient
from liirat_api.providers.marketaux import MarketauxClient
from liirat_api.utils.date_utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["news"])

# Upstream answers that mean "plan does not include news", not a failure
ACCESS_RESTRICTED = {401, 403}


@router.get("/eodhd-news")
async def get_eodhd_news(
    s: Optional[str] = None,
    from_date: Optional[str] = Query(default=None, alias="from"),
    to_date: Optional[str] = Query(default=None, alias="to"),
    limit: int = Query(default=50, ge=1),
    offset: int = Query(default=0, ge=0),
    client: EodhdClient = Depends(get_eodhd_client),
) -> Any:
    """EODHD 금융 뉴스 (레거시 형식)"""
    filters = {"s": s, "from": from_date, "to": to_date, "limit": limit, "offset": offset}
    try:
        payload = await client.news(
            s=s, from_date=from_date, to_date=to_date, limit=limit, offset=offset
        )
    except UpstreamError as e:
        if e.upstream_status in ACCESS_RESTRICTED:
            logger.warning(f"EODHD news access restricted ({e.upstream_status})")
            return {
                "articles": [],
                "total": 0,
                "message": "EODHD API access restricted - no news available",
                "filters": filters,
            }
        return legacy_error_from(e, articles=[])
    except ProviderFailure as e:
        return legacy_error_from(e, articles=[])

    articles = [adapt_news_article(row).model_dump() for row in records(payload)]
    return {
        "articles": articles,
        "total": len(articles),
        "filters": filters,
        "timestamp": utc_now_iso(),
    }


@router.get("/marketaux-news")
async def get_marketaux_news(
    language: str = "en",
    countries: str = "us,gb,ae",
    limit: int = Query(default=10, ge=1),
    client: MarketauxClient = Depends(get_marketaux_client),
) -> Any:
    """Marketaux 뉴스 피드"""
    try:
        articles, found = await client.news(language=language, countries=countries, limit=limit)
    except ProviderFailure as e:
        return legacy_error_from(e, news=[])

    news = [
        adapt_marketaux_article(row, index).model_dump()
        for index, row in enumerate(articles)
        if isinstance(row, dict)
    ]
    return {"news": news, "total": found or len(news), "language": language}
