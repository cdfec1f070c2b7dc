from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Importance(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"

    @property
    def level(self) -> int:
        """1-3 scale used by the legacy calendar route (unknown -> 1)."""
        return {"high": 3, "medium": 2}.get(self.value, 1)


class CalendarEvent(BaseModel):
    """경제 캘린더 이벤트 (업스트림에서 파싱된 후 불변)"""

    datetimeUtc: Optional[str] = Field(None, description="Event time (ISO-8601 UTC)")
    country: str = ""
    event: str = ""
    category: str = ""
    importance: Importance = Importance.UNKNOWN
    previous: str = ""
    forecast: str = ""
    actual: str = ""

    model_config = {"frozen": True}


class LegacyCalendarEvent(BaseModel):
    """``/api/eodhd-calendar`` row"""

    date: str
    time: str
    country: str
    event: str
    category: str
    importance: int = Field(..., ge=1, le=3)
    actual: str = ""
    forecast: str = ""
    previous: str = ""
