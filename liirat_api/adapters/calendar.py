from typing import Any, Mapping, Optional

from liirat_api.adapters.fields import (
    FieldRule,
    parse_lower,
    parse_raw_text,
    parse_text,
    pick,
    rules,
)
from liirat_api.schemas.calendar import CalendarEvent, Importance, LegacyCalendarEvent
from liirat_api.utils.date_utils import to_iso_utc

_IMPORTANCE_ALIASES = {
    "high": Importance.HIGH,
    "3": Importance.HIGH,
    "medium": Importance.MEDIUM,
    "moderate": Importance.MEDIUM,
    "2": Importance.MEDIUM,
    "low": Importance.LOW,
    "1": Importance.LOW,
}


def parse_importance(value: Any) -> Optional[Importance]:
    text = parse_lower(value)
    if text is None:
        return None
    if text.endswith(".0"):
        text = text[:-2]
    return _IMPORTANCE_ALIASES.get(text, Importance.UNKNOWN)


DATETIME_FIELDS = (
    FieldRule("date", to_iso_utc),
    FieldRule("datetime", to_iso_utc),
)
COUNTRY_FIELDS = rules(parse_text, "country", "currency")
EVENT_FIELDS = rules(parse_text, "event", "title", "name")
CATEGORY_FIELDS = rules(parse_text, "category", "type")
IMPORTANCE_FIELDS = rules(parse_importance, "importance", "impact")
PREVIOUS_FIELDS = rules(parse_raw_text, "previous")
FORECAST_FIELDS = rules(parse_raw_text, "estimate", "forecast")
ACTUAL_FIELDS = rules(parse_raw_text, "actual")


def adapt_calendar_event(raw: Mapping[str, Any]) -> CalendarEvent:
    return CalendarEvent(
        datetimeUtc=pick(raw, DATETIME_FIELDS),
        country=pick(raw, COUNTRY_FIELDS) or "",
        event=pick(raw, EVENT_FIELDS) or "",
        category=pick(raw, CATEGORY_FIELDS) or "",
        importance=pick(raw, IMPORTANCE_FIELDS) or Importance.UNKNOWN,
        previous=pick(raw, PREVIOUS_FIELDS) or "",
        forecast=pick(raw, FORECAST_FIELDS) or "",
        actual=pick(raw, ACTUAL_FIELDS) or "",
    )


def to_legacy_event(event: CalendarEvent) -> LegacyCalendarEvent:
    """``/api/eodhd-calendar`` rendering: split date/time, 1-3 importance."""
    date, time = "", ""
    if event.datetimeUtc:
        date = event.datetimeUtc[:10]
        time = event.datetimeUtc[11:16]
    return LegacyCalendarEvent(
        date=date,
        time=time,
        country=event.country or "Unknown",
        event=event.event or "Economic Event",
        category=event.category or "Economic",
        importance=event.importance.level,
        actual=event.actual,
        forecast=event.forecast,
        previous=event.previous,
    )
