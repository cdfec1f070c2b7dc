"""
레이트 리밋 미들웨어
경로를 카테고리(prices/news/calendar/analysis)로 매핑해 분당 요청 수를 제한
"""

from typing import Callable, Dict, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from liirat_api.config import Settings
from liirat_api.core.exception_handlers import json_with_cors
from liirat_api.services.rate_limiter import InMemoryRateLimiter

# 경로 prefix -> 레이트 리밋 카테고리
PATH_CATEGORIES: Dict[str, str] = {
    "/api/quotes": "prices",
    "/api/eodhd-price": "prices",
    "/api/eodhd/quotes": "prices",
    "/api/eodhd/price": "prices",
    "/api/eodhd/search": "prices",
    "/api/price-alert": "prices",
    "/api/watchlist": "prices",
    "/api/eodhd-news": "news",
    "/api/eodhd/news": "news",
    "/api/marketaux-news": "news",
    "/api/eodhd-calendar": "calendar",
    "/api/eodhd/calendar": "calendar",
    "/api/ai-chat": "analysis",
    "/api/chat": "analysis",
    "/api/translate": "analysis",
}


def category_for(path: str) -> Optional[str]:
    for prefix, category in PATH_CATEGORIES.items():
        if path == prefix or path.startswith(prefix + "/"):
            return category
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    """레이트 리밋 미들웨어"""

    def __init__(
        self,
        app,
        limiter: InMemoryRateLimiter,
        settings: Settings,
        exclude_paths: Optional[list] = None,
    ):
        super().__init__(app)
        self.limiter = limiter
        self.settings = settings

        # 레이트 리밋을 적용하지 않을 경로들
        self.exclude_paths = exclude_paths or [
            "/api/ping",
            "/api/health",
            "/docs",
            "/openapi.json",
            "/redoc",
        ]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.settings.RATE_LIMIT_ENABLED or request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        if any(path.startswith(excluded) for excluded in self.exclude_paths):
            return await call_next(request)

        category = category_for(path)
        if category is None:
            return await call_next(request)

        allowed, info = self.limiter.check(self._get_client_ip(request), category)
        if not allowed:
            return json_with_cors(
                429,
                {"error": "Rate limit exceeded", "category": category},
                headers={
                    "Retry-After": str(info["retry_after"]),
                    "X-RateLimit-Limit": str(info["limit"]),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(info["limit"])
        response.headers["X-RateLimit-Remaining"] = str(info["remaining"])
        return response

    def _get_client_ip(self, request: Request) -> str:
        """클라이언트 IP 주소 추출"""
        # 프록시 환경에서 실제 IP 추출
        x_forwarded_for = request.headers.get("X-Forwarded-For")
        if x_forwarded_for:
            return x_forwarded_for.split(",")[0].strip()

        x_real_ip = request.headers.get("X-Real-IP")
        if x_real_ip:
            return x_real_ip

        return request.client.host if request.client else "unknown"
