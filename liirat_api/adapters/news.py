from typing import Any, Mapping, Optional

from liirat_api.adapters.fields import (
    FieldRule,
    parse_list,
    parse_number,
    parse_text,
    pick,
    rules,
)
from liirat_api.schemas.news import MarketauxArticle, NewsArticle
from liirat_api.utils.date_utils import to_iso_utc


def parse_sentiment(value: Any) -> Optional[float]:
    """EODHD sends either a bare score or ``{"polarity": .., "pos": ..}``."""
    if isinstance(value, Mapping):
        return parse_number(value.get("polarity"))
    return parse_number(value)


def _parse_date(value: Any) -> Optional[str]:
    return to_iso_utc(value) or parse_text(value)


DATE_FIELDS = (
    FieldRule("date", _parse_date),
    FieldRule("datetime", _parse_date),
    FieldRule("published_at", _parse_date),
)
TITLE_FIELDS = rules(parse_text, "title")
CONTENT_FIELDS = rules(parse_text, "content", "description")
SYMBOL_FIELDS = rules(parse_list, "symbols")
TAG_FIELDS = rules(parse_list, "tags")
LINK_FIELDS = rules(parse_text, "link", "url")
SOURCE_FIELDS = rules(parse_text, "source")
SENTIMENT_FIELDS = rules(parse_sentiment, "sentiment")


def adapt_news_article(raw: Mapping[str, Any]) -> NewsArticle:
    return NewsArticle(
        date=pick(raw, DATE_FIELDS) or "",
        title=pick(raw, TITLE_FIELDS) or "",
        content=pick(raw, CONTENT_FIELDS) or "",
        symbols=pick(raw, SYMBOL_FIELDS) or [],
        tags=pick(raw, TAG_FIELDS) or [],
        link=pick(raw, LINK_FIELDS) or "",
        source=pick(raw, SOURCE_FIELDS) or "",
        sentiment=pick(raw, SENTIMENT_FIELDS),
    )


def _average_entity_sentiment(raw: Mapping[str, Any]) -> Optional[float]:
    scores = [
        parse_number(entity.get("sentiment_score"))
        for entity in raw.get("entities") or []
        if isinstance(entity, Mapping)
    ]
    scores = [score for score in scores if score is not None]
    if not scores:
        return None
    return sum(scores) / len(scores)


def adapt_marketaux_article(raw: Mapping[str, Any], index: int = 0) -> MarketauxArticle:
    """Marketaux ``/news/all`` item rendered as a calendar-like news row."""
    entities = [entity for entity in raw.get("entities") or [] if isinstance(entity, Mapping)]
    country = next(
        (parse_text(entity.get("country")) for entity in entities if parse_text(entity.get("country"))),
        None,
    )
    source = raw.get("source")
    return MarketauxArticle(
        id=parse_text(raw.get("uuid")) or f"marketaux-{index}",
        date=pick(raw, DATE_FIELDS) or "",
        country=country.upper() if country else "Unknown",
        importance=1,
        event=parse_text(raw.get("title")) or "",
        description=parse_text(raw.get("description")) or parse_text(raw.get("snippet")) or "",
        url=parse_text(raw.get("url")) or "",
        source=parse_text(source) or "Liirat",
        sentiment=_average_entity_sentiment(raw),
        entities=[dict(entity) for entity in entities],
    )
