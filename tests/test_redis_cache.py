import asyncio
import json

import httpx

from liirat_api.providers.eodhd import EodhdClient
from liirat_api.services.redis_service import RedisService


class _FakeRedis:
    def __init__(self):
        self.store = {}
        self.ttls = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl

    async def aclose(self):
        pass


def _redis_service(test_settings):
    settings = test_settings.model_copy(update={"REDIS_HOST": "localhost"})
    service = RedisService(settings)
    fake = _FakeRedis()
    service._client = fake
    return service, fake


def test_disabled_without_host(test_settings):
    service = RedisService(test_settings)

    assert service.enabled is False
    assert service.ttl_for("prices") is None
    assert asyncio.run(service.get_response("EODHD", "/news", {}, "news")) is None


def test_uncached_category_is_never_stored(test_settings):
    service, fake = _redis_service(test_settings)

    stored = asyncio.run(service.set_response("EODHD", "/search/x", {}, None, [1]))

    assert stored is False
    assert fake.store == {}


def test_second_fetch_is_served_from_cache(test_settings, transport_factory):
    service, fake = _redis_service(test_settings)
    transport = transport_factory(lambda request: httpx.Response(200, json=[{"code": "AAPL.US", "close": 1}]))
    client = EodhdClient(service._settings, redis_service=service, transport=transport)

    async def scenario():
        first = await client.real_time(["AAPL.US"])
        second = await client.real_time(["AAPL.US"])
        return first, second

    first, second = asyncio.run(scenario())

    assert first == second
    assert len(transport.requests) == 1
    [(key, value)] = fake.store.items()
    assert key.startswith("upstream:eodhd:real-time/AAPL.US:")
    assert "eodhd-test" not in key
    assert json.loads(value) == first
    assert fake.ttls[key] == 30
