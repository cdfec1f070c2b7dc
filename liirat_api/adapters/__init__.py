from .calendar import adapt_calendar_event, to_legacy_event
from .news import adapt_marketaux_article, adapt_news_article
from .quote import adapt_quote, normalize_quote_payload
from .registry import EntityKind, adapt
