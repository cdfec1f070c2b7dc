import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query

from liirat_api.adapters.calendar import adapt_calendar_event, to_legacy_event
from liirat_api.adapters.fields import records
from liirat_api.core.exceptions import ProviderFailure
from liirat_api.core.responses import legacy_error_from
from liirat_api.deps import get_eodhd_client
from liirat_api.providers.eodhd import EodhdClient
from liirat_api.utils.date_utils import default_calendar_range, utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["calendar"])

MAX_EVENTS = 100
DEFAULT_EVENTS = 50


def parse_importance_levels(importance: Optional[str]) -> List[int]:
    """``"2,3"`` -> ``[2, 3]``; ``"all"`` and non-numeric parts are ignored."""
    if not importance or importance == "all":
        return []
    return [int(part.strip()) for part in importance.split(",") if part.strip().isdigit()]


def clamp_limit(limit: Optional[str]) -> int:
    try:
        value = int(limit) if limit else DEFAULT_EVENTS
    except ValueError:
        value = DEFAULT_EVENTS
    return max(1, min(value or DEFAULT_EVENTS, MAX_EVENTS))


@router.get("/eodhd-calendar")
async def get_economic_calendar(
    country: Optional[str] = None,
    importance: Optional[str] = Query(default=None, description="1=low, 2=medium, 3=high (콤마 구분 가능)"),
    from_date: Optional[str] = Query(default=None, alias="from"),
    to_date: Optional[str] = Query(default=None, alias="to"),
    limit: Optional[str] = None,
    client: EodhdClient = Depends(get_eodhd_client),
) -> Any:
    """
    경제 캘린더 (레거시 형식)

    - 기본 기간: 오늘 ~ 7일 후
    - importance가 여러 개면 가장 높은 값을 업스트림에 전달하고 로컬에서 다시 필터링
    """
    default_from, default_to = default_calendar_range()
    event_limit = clamp_limit(limit)
    levels = parse_importance_levels(importance)

    try:
        payload = await client.economic_events(
            from_date or default_from,
            to_date or default_to,
            country=country if country and country != "all" else None,
            importance=max(levels) if levels else None,
            limit=event_limit,
        )
    except ProviderFailure as e:
        return legacy_error_from(e, events=[], timestamp=utc_now_iso())

    events = [to_legacy_event(adapt_calendar_event(row)) for row in records(payload)]
    if len(levels) > 1:
        events = [event for event in events if event.importance in levels]

    return {
        "events": [event.model_dump() for event in events],
        "total": len(events),
        "filters": {
            "country": country,
            "importance": importance,
            "from": from_date,
            "to": to_date,
            "limit": event_limit,
        },
        "timestamp": utc_now_iso(),
    }
