"""
Redis cache for upstream provider responses.
- Disabled when REDIS_HOST is empty; every lookup is then a miss
- Never raises: Redis or serialization failures are logged and count as a miss
- Key Format: upstream:{provider}:{path}:{sorted query, credentials removed}
- TTL per category (prices / news / calendar) from CACHE_TTL_SECONDS
"""

import json
import logging
from typing import Any, Mapping, Optional

import redis.asyncio as redis

from liirat_api.config import Settings
from liirat_api.utils.cache_utils import category_ttl, generate_upstream_cache_key

logger = logging.getLogger(__name__)


class RedisService:
    def __init__(self, settings: Settings):
        self._settings = settings
        self._client: Optional[redis.Redis] = None

    @property
    def enabled(self) -> bool:
        return self._settings.redis_enabled

    def ttl_for(self, category: Optional[str]) -> Optional[int]:
        """None when the category is not cached or Redis is off."""
        if not self.enabled:
            return None
        return category_ttl(self._settings, category)

    async def _get_client(self) -> Optional[redis.Redis]:
        """Lazy connection, checked with PING on first use"""
        if not self.enabled:
            return None
        if self._client is None:
            options = {
                "host": self._settings.REDIS_HOST,
                "port": self._settings.REDIS_PORT,
                "db": self._settings.REDIS_DB,
                "decode_responses": True,
                "socket_connect_timeout": 2,
                "socket_keepalive": True,
                "health_check_interval": 30,
            }
            if self._settings.REDIS_PASSWORD:
                options["password"] = self._settings.REDIS_PASSWORD
            try:
                client = redis.Redis(**options)
                await client.ping()
                self._client = client
            except Exception as e:
                logger.warning(f"Redis connection failed: {e}")
                self._client = None
        return self._client

    async def get_response(
        self, provider: str, path: str, params: Mapping[str, Any], category: Optional[str]
    ) -> Optional[Any]:
        """Cached upstream payload, None on a miss."""
        if self.ttl_for(category) is None:
            return None
        key = generate_upstream_cache_key(provider, path, params)
        try:
            client = await self._get_client()
            if client is None:
                return None
            value = await client.get(key)
        except Exception as e:
            logger.warning(f"Redis GET failed for {key}: {e}")
            return None
        if not value:
            return None
        logger.info(f"Cache HIT: {key}")
        return json.loads(value)

    async def set_response(
        self,
        provider: str,
        path: str,
        params: Mapping[str, Any],
        category: Optional[str],
        payload: Any,
    ) -> bool:
        ttl = self.ttl_for(category)
        if ttl is None:
            return False
        key = generate_upstream_cache_key(provider, path, params)
        try:
            client = await self._get_client()
            if client is None:
                return False
            await client.setex(key, ttl, json.dumps(payload))
            return True
        except Exception as e:
            logger.warning(f"Redis SET failed for {key}: {e}")
            return False

    async def close(self) -> None:
        """Close connection pool on app shutdown"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
