"""
In-process fixed-window rate limiter.
Key Format: {client}:{category}, one window per key
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, Tuple


@dataclass
class _Window:
    started_at: float
    count: int = 0


class InMemoryRateLimiter:
    """카테고리별 분당 요청 수 제한 (프로세스 로컬)"""

    def __init__(
        self,
        limits: Dict[str, int],
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limits = dict(limits)
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._last_sweep = clock()

    def check(self, client: str, category: str) -> Tuple[bool, Dict[str, int]]:
        """
        요청 1건을 기록하고 허용 여부를 반환합니다.

        Returns:
            (allowed, {"limit", "remaining", "reset_in", "retry_after"})
        """
        limit = self.limits.get(category)
        if not limit:
            return True, {"limit": 0, "remaining": 0, "reset_in": 0, "retry_after": 0}

        now = self._clock()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)
        key = f"{client}:{category}"
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.window_seconds:
            window = _Window(started_at=now)
            self._windows[key] = window

        reset_in = max(0, int(window.started_at + self.window_seconds - now))
        if window.count >= limit:
            return False, {
                "limit": limit,
                "remaining": 0,
                "reset_in": reset_in,
                "retry_after": max(1, reset_in),
            }

        window.count += 1
        return True, {
            "limit": limit,
            "remaining": limit - window.count,
            "reset_in": reset_in,
            "retry_after": 0,
        }

    def _sweep(self, now: float) -> None:
        """Drop windows that have already expired."""
        expired = [
            key
            for key, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    @property
    def tracked(self) -> int:
        return len(self._windows)

    def reset(self) -> None:
        self._windows.clear()
