from enum import Enum
from typing import Any, Callable, Dict, Mapping

from pydantic import BaseModel

from liirat_api.adapters.calendar import adapt_calendar_event
from liirat_api.adapters.news import adapt_news_article
from liirat_api.adapters.quote import adapt_quote


class EntityKind(str, Enum):
    QUOTE = "quote"
    CALENDAR = "calendar"
    NEWS = "news"


_ADAPTERS: Dict[EntityKind, Callable[[Mapping[str, Any]], BaseModel]] = {
    EntityKind.QUOTE: adapt_quote,
    EntityKind.CALENDAR: adapt_calendar_event,
    EntityKind.NEWS: adapt_news_article,
}


def adapt(raw: Mapping[str, Any], kind: EntityKind) -> BaseModel:
    """Map one raw upstream record to its canonical record."""
    return _ADAPTERS[EntityKind(kind)](raw)
