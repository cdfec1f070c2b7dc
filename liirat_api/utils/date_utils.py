from datetime import date, datetime, timedelta
from typing import Any, Optional, Tuple
import logging

import pytz

# 로거 설정
logger = logging.getLogger(__name__)

UTC = pytz.UTC

# epoch 값이 이보다 크면 밀리초로 간주
_EPOCH_MS_THRESHOLD = 1e12


def utc_now() -> datetime:
    """현재 UTC 시간을 반환합니다."""
    return datetime.now(UTC)


def utc_now_iso() -> str:
    """현재 UTC 시간을 ISO-8601 문자열(Z 접미사)로 반환합니다."""
    return format_iso_utc(utc_now())


def format_iso_utc(value: datetime) -> str:
    """datetime을 ``2024-01-15T09:30:00.000Z`` 형태로 변환합니다."""
    if value.tzinfo is None:
        value = UTC.localize(value)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def to_iso_utc(value: Any) -> Optional[str]:
    """
    업스트림 타임스탬프를 ISO-8601 UTC 문자열로 정규화

    Args:
        value: datetime, epoch 초/밀리초(int/float), "YYYY-MM-DD HH:mm:ss" 또는 ISO 문자열

    Returns:
        Optional[str]: 변환된 문자열, 해석할 수 없으면 None

    Examples:
        >>> to_iso_utc(1700000000)
        '2023-11-14T22:13:20.000Z'

        >>> to_iso_utc("2024-01-15 13:30:00")
        '2024-01-15T13:30:00.000Z'

        >>> to_iso_utc("NA")
        None
    """
    if value is None or value == "" or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return format_iso_utc(value)

    if isinstance(value, date):
        return format_iso_utc(datetime(value.year, value.month, value.day))

    if isinstance(value, (int, float)):
        if value != value or value <= 0:  # NaN 또는 음수
            return None
        seconds = value / 1000 if value > _EPOCH_MS_THRESHOLD else value
        try:
            return format_iso_utc(datetime.fromtimestamp(seconds, UTC))
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if not text or text.upper() in {"NA", "N/A"}:
            return None
        if text.isdigit():
            return to_iso_utc(int(text))

        normalized = text if "T" in text else text.replace(" ", "T", 1)
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError:
            logger.debug("Unparseable timestamp: %s", value)
            return None
        return format_iso_utc(parsed)

    return None


def default_calendar_range(today: Optional[date] = None, days: int = 7) -> Tuple[str, str]:
    """캘린더 기본 조회 범위 (오늘 ~ 오늘+days)를 YYYY-MM-DD 문자열로 반환합니다."""
    start = today or utc_now().date()
    end = start + timedelta(days=days)
    return start.isoformat(), end.isoformat()
