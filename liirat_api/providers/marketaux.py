from __future__ import annotations

from typing import Any, List, Optional, Tuple

from liirat_api.core.exceptions import UpstreamError
from liirat_api.providers.base import UpstreamClient


class MarketauxClient(UpstreamClient):
    """Marketaux ``/news/all`` feed."""

    provider = "Marketaux"
    auth_param = "api_token"

    @property
    def api_key(self) -> Optional[str]:
        return self._settings.MARKETAUX_API_KEY

    @property
    def base_url(self) -> str:
        return self._settings.MARKETAUX_BASE_URL.rstrip("/")

    @property
    def default_timeout(self) -> float:
        return self._settings.MARKETAUX_TIMEOUT_SECONDS

    async def news(
        self,
        language: str = "en",
        countries: str = "us,gb,ae",
        limit: int = 10,
    ) -> Tuple[List[Any], int]:
        """Returns ``(articles, found)``."""
        payload = await self.fetch(
            "/news/all",
            {"language": language, "countries": countries, "limit": limit},
            cache_category="news",
        )
        if not isinstance(payload, dict):
            return [], 0
        if payload.get("error"):
            error = payload["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise UpstreamError(message or "Marketaux error", provider=self.provider)

        articles = payload.get("data") or []
        found = (payload.get("meta") or {}).get("found") or 0
        return list(articles), int(found)
