import asyncio

import httpx
import pytest

from liirat_api.core.exceptions import (
    ConfigurationError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
)
from liirat_api.providers.eodhd import EodhdClient, MarketKind, classify_symbol, split_symbols
from liirat_api.providers.marketaux import MarketauxClient
from liirat_api.providers.polygon import PolygonClient, extract_price, snapshot_path
from liirat_api.utils.cache_utils import generate_upstream_cache_key, masked_url


def _json(payload, status_code=200):
    return lambda request: httpx.Response(status_code, json=payload)


class TestEodhdClient:
    def test_real_time_appends_token_and_format(self, test_settings, transport_factory):
        transport = transport_factory(_json([{"code": "AAPL.US", "close": 1}]))
        client = EodhdClient(test_settings, transport=transport)

        payload = asyncio.run(client.real_time(["aapl.us", "msft.us"]))

        assert payload == [{"code": "AAPL.US", "close": 1}]
        request = transport.requests[0]
        assert request.url.path == "/api/real-time/AAPL.US"
        assert request.url.params["s"] == "MSFT.US"
        assert request.url.params["api_token"] == "eodhd-test"
        assert request.url.params["fmt"] == "json"

    def test_single_symbol_sends_no_s_param(self, test_settings, transport_factory):
        transport = transport_factory(_json({"code": "AAPL.US"}))
        client = EodhdClient(test_settings, transport=transport)

        asyncio.run(client.real_time(["AAPL.US"]))

        assert "s" not in transport.requests[0].url.params

    def test_missing_key_raises_configuration_error(self, test_settings, transport_factory):
        transport = transport_factory(_json([]))
        settings = test_settings.model_copy(update={"EODHD_API_KEY": None})
        client = EodhdClient(settings, transport=transport)

        with pytest.raises(ConfigurationError) as exc_info:
            asyncio.run(client.real_time(["AAPL.US"]))

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "EODHD API key not configured"
        assert transport.requests == []

    def test_non_2xx_keeps_status_and_body(self, test_settings, transport_factory):
        transport = transport_factory(
            lambda request: httpx.Response(403, text="Forbidden: plan does not include news")
        )
        client = EodhdClient(test_settings, transport=transport)

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(client.news(s="AAPL.US"))

        error = exc_info.value
        assert error.status_code == 502
        assert error.upstream_status == 403
        assert "plan does not include news" in error.body
        assert error.message == "EODHD API error: 403"

    def test_429_is_rate_limit_error(self, test_settings, transport_factory):
        transport = transport_factory(lambda request: httpx.Response(429, text="slow down"))
        client = EodhdClient(test_settings, transport=transport)

        with pytest.raises(UpstreamRateLimitError):
            asyncio.run(client.real_time(["AAPL.US"]))

    def test_timeout_is_reported_distinctly(self, test_settings, transport_factory):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = EodhdClient(test_settings, transport=transport_factory(handler))

        with pytest.raises(UpstreamTimeoutError) as exc_info:
            asyncio.run(client.economic_events("2024-01-01", "2024-01-07"))

        assert "timeout" in exc_info.value.message.lower()
        assert exc_info.value.upstream_status is None

    def test_network_error(self, test_settings, transport_factory):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = EodhdClient(test_settings, transport=transport_factory(handler))

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(client.search("apple"))

        assert not isinstance(exc_info.value, UpstreamTimeoutError)
        assert exc_info.value.message == "EODHD API unreachable"

    def test_non_json_body(self, test_settings, transport_factory):
        transport = transport_factory(
            lambda request: httpx.Response(200, text="<html>maintenance</html>")
        )
        client = EodhdClient(test_settings, transport=transport)

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(client.real_time(["AAPL.US"]))

        assert exc_info.value.message == "Invalid response format from EODHD API"

    def test_empty_params_are_dropped(self, test_settings, transport_factory):
        transport = transport_factory(_json([]))
        client = EodhdClient(test_settings, transport=transport)

        asyncio.run(client.economic_events("2024-01-01", "2024-01-07", country=None, type=""))

        params = transport.requests[0].url.params
        assert params["from"] == "2024-01-01"
        assert "country" not in params
        assert "type" not in params

    @pytest.mark.parametrize(
        "symbol,kind",
        [
            ("BTC-USD.CC", MarketKind.CRYPTO),
            ("ETH", MarketKind.CRYPTO),
            ("GSPC.INDX", MarketKind.INDEX),
            ("EURUSD.FOREX", MarketKind.FOREX),
            ("EURUSD", MarketKind.FOREX),
            ("AAPL.US", MarketKind.STOCK),
        ],
    )
    def test_classify_symbol(self, symbol, kind):
        assert classify_symbol(symbol) == kind

    def test_route_by_kind(self, test_settings):
        client = EodhdClient(test_settings)
        assert client.route_by_kind("EURUSD")[:2] == ("/real-time/forex", "EURUSD.FOREX")
        assert client.route_by_kind("BTC-USD.CC")[:2] == ("/real-time/crypto", "BTC-USD.CC")
        assert client.route_by_kind("GSPC.INDX")[:2] == ("/real-time/stocks", "GSPC.INDX")

    def test_crypto_route_sends_no_filter(self, test_settings, transport_factory):
        transport = transport_factory(_json({"code": "BTC-USD.CC", "close": 1}))
        client = EodhdClient(test_settings, transport=transport)

        asyncio.run(client.real_time_by_kind("BTC-USD.CC", filter="live"))

        assert "filter" not in transport.requests[0].url.params

    def test_split_symbols(self):
        assert split_symbols(" AAPL.US , ,MSFT.US") == ["AAPL.US", "MSFT.US"]
        assert split_symbols(None) == []


class TestMarketauxClient:
    def test_news_returns_articles_and_found(self, test_settings, transport_factory):
        transport = transport_factory(
            _json({"data": [{"uuid": "a"}], "meta": {"found": 42}})
        )
        client = MarketauxClient(test_settings, transport=transport)

        articles, found = asyncio.run(client.news(limit=1))

        assert articles == [{"uuid": "a"}]
        assert found == 42
        assert transport.requests[0].url.params["api_token"] == "marketaux-test"

    def test_error_payload_raises(self, test_settings, transport_factory):
        transport = transport_factory(_json({"error": {"message": "Invalid API token"}}))
        client = MarketauxClient(test_settings, transport=transport)

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(client.news())

        assert exc_info.value.message == "Invalid API token"


class TestPolygonClient:
    def test_snapshot_uses_api_key_param(self, test_settings, transport_factory):
        transport = transport_factory(
            _json({"ticker": {"lastTrade": {"p": 189.5, "t": 1700000000000}}})
        )
        client = PolygonClient(test_settings, transport=transport)

        snapshot = asyncio.run(client.snapshot("aapl"))

        assert snapshot.symbol == "AAPL"
        assert snapshot.price == 189.5
        assert snapshot.timestamp == 1700000000000
        assert snapshot.source == "polygon.io"
        assert transport.requests[0].url.params["apiKey"] == "polygon-test"

    def test_snapshot_without_price(self, test_settings, transport_factory):
        client = PolygonClient(test_settings, transport=transport_factory(_json({"ticker": {}})))
        assert asyncio.run(client.snapshot("AAPL")) is None

    def test_snapshot_path(self):
        assert snapshot_path("EURUSD").endswith("/forex/tickers/C:EURUSD")
        assert snapshot_path("BTC").endswith("/crypto/tickers/X:BTC")
        assert snapshot_path("BTCUSD").endswith("/crypto/tickers/X:BTCUSD")
        assert snapshot_path("USDCAD").endswith("/forex/tickers/C:USDCAD")
        assert snapshot_path("aapl").endswith("/stocks/tickers/AAPL")

    def test_extract_price_sources(self):
        assert extract_price({"results": [{"value": 1.08}]}) == (1.08, None)
        assert extract_price({"ticker": {"last": {"price": 2, "timestamp": 5}}}) == (2.0, 5)
        assert extract_price({"ticker": {"lastTrade": {"p": "NA"}}}) == (None, None)
        assert extract_price([]) == (None, None)


def test_cache_key_and_log_url_hide_credentials():
    params = {"s": "MSFT.US", "api_token": "secret", "fmt": "json"}
    key = generate_upstream_cache_key("EODHD", "/real-time/AAPL.US", params)
    assert key == "upstream:eodhd:real-time/AAPL.US:fmt=json&s=MSFT.US"
    assert "secret" not in masked_url("https://eodhd.com/api", "/real-time/AAPL.US", params)
