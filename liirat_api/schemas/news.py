from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class NewsArticle(BaseModel):
    """정규화된 뉴스 기사"""

    date: str = ""
    title: str = ""
    content: str = ""
    symbols: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    link: str = ""
    source: str = ""
    sentiment: Optional[float] = None


class MarketauxArticle(BaseModel):
    id: str
    date: str
    country: str = "Unknown"
    importance: int = 1
    event: str
    description: str = ""
    actual: Optional[str] = None
    forecast: Optional[str] = None
    previous: Optional[str] = None
    url: str = ""
    source: str = "Liirat"
    sentiment: Optional[float] = None
    entities: List[Dict[str, Any]] = Field(default_factory=list)
