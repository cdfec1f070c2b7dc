from __future__ import annotations

import logging
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from liirat_api.config import Settings
from liirat_api.core.exceptions import (
    ConfigurationError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
)
from liirat_api.services.redis_service import RedisService
from liirat_api.utils.cache_utils import masked_url

logger = logging.getLogger(__name__)

# Upstream body kept on errors (diagnostics only)
ERROR_BODY_LIMIT = 500


class UpstreamClient:
    """
    Authenticated GET against one market-data provider.

    Subclasses name the provider, where its key and base URL live in the
    settings and which query parameter carries the key. Every call:

    - reads the key from settings at call time (missing -> ConfigurationError)
    - applies one fixed timeout, never retries
    - maps timeouts, network errors, non-2xx and non-JSON bodies to
      ``UpstreamError`` subclasses
    - optionally reads/writes the Redis response cache for its category
    """

    provider = "Upstream"
    auth_param = "api_token"
    extra_params: Mapping[str, str] = {}
    default_timeout = 10.0

    def __init__(
        self,
        settings: Settings,
        redis_service: Optional[RedisService] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._redis = redis_service  # Optional for graceful degradation
        self._transport = transport

    @property
    def api_key(self) -> Optional[str]:
        raise NotImplementedError

    @property
    def base_url(self) -> str:
        raise NotImplementedError

    def require_key(self) -> str:
        key = self.api_key
        if not key:
            raise ConfigurationError(f"{self.provider} API key not configured")
        return key

    def _build_params(self, params: Optional[Mapping[str, Any]], key: str) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        for name, value in (params or {}).items():
            if value is None or value == "":
                continue
            query[name] = value
        query[self.auth_param] = key
        query.update(self.extra_params)
        return query

    async def fetch(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        timeout: Optional[float] = None,
        cache_category: Optional[str] = None,
    ) -> Any:
        key = self.require_key()
        query = self._build_params(params, key)

        if self._redis is not None:
            cached = await self._redis.get_response(self.provider, path, query, cache_category)
            if cached is not None:
                return cached

        logger.info("Fetching %s", masked_url(self.base_url, path, query))
        started_at = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=timeout or self.default_timeout,
                transport=self._transport,
                headers={"Accept": "application/json", "User-Agent": "Liirat-News/1.0"},
            ) as client:
                response = await client.get(path, params=query)
        except httpx.TimeoutException as exc:
            logger.warning("%s request timed out: %s", self.provider, path)
            raise UpstreamTimeoutError(
                f"Request timeout - {self.provider} API took too long to respond",
                provider=self.provider,
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("%s request error: %s", self.provider, exc)
            raise UpstreamError(
                f"{self.provider} API unreachable",
                provider=self.provider,
            ) from exc
        elapsed_ms = int((time.perf_counter() - started_at) * 1000)

        if response.status_code >= 400:
            body = response.text[:ERROR_BODY_LIMIT]
            logger.error(
                "%s API error: %s (%sms) %s",
                self.provider,
                response.status_code,
                elapsed_ms,
                body,
            )
            error_cls = UpstreamRateLimitError if response.status_code == 429 else UpstreamError
            raise error_cls(
                f"{self.provider} API error: {response.status_code}",
                provider=self.provider,
                upstream_status=response.status_code,
                body=body,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error(
                "%s API returned non-JSON content: %s",
                self.provider,
                response.headers.get("content-type"),
            )
            raise UpstreamError(
                f"Invalid response format from {self.provider} API",
                provider=self.provider,
                upstream_status=response.status_code,
                body=response.text[:ERROR_BODY_LIMIT],
            ) from exc

        if self._redis is not None:
            await self._redis.set_response(self.provider, path, query, cache_category, payload)
        return payload
