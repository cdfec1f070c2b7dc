import pytest
from fastapi.testclient import TestClient

from liirat_api.main import app
from liirat_api.middleware.rate_limit import category_for
from liirat_api.services.rate_limiter import InMemoryRateLimiter

ROUTES = [
    "/api/quotes",
    "/api/eodhd/quotes",
    "/api/eodhd-calendar",
    "/api/eodhd-news",
    "/api/alerts",
    "/api/chat",
    "/api/translate",
    "/api/health",
    "/api/does-not-exist",
]


@pytest.mark.parametrize("path", ROUTES)
def test_options_short_circuits_with_cors(client, path):
    response = client.options(path)

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.headers["Access-Control-Allow-Methods"] == "GET, POST, PUT, DELETE, OPTIONS"
    assert response.headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization"


def test_cors_headers_on_errors(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_validation_error_is_400(client):
    response = client.get("/api/eodhd/news?s=AAPL.US&limit=abc")

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request parameters")


def test_unexpected_error_is_500():
    from liirat_api.deps import get_watchlist_service

    class _BrokenService:
        def snapshot(self, symbols=None):
            raise RuntimeError("boom")

    app.dependency_overrides[get_watchlist_service] = lambda: _BrokenService()
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/watchlist")

    assert response.status_code == 500
    assert response.json()["error"] == "Internal server error"


def test_rate_limit_returns_429(client, monkeypatch):
    limiter = app.container.repositories.rate_limiter()
    monkeypatch.setitem(limiter.limits, "calendar", 1)

    first = client.get("/api/eodhd/calendar")
    second = client.get("/api/eodhd/calendar")

    assert first.status_code == 400
    assert first.headers["X-RateLimit-Limit"] == "1"
    assert second.status_code == 429
    assert second.json() == {"error": "Rate limit exceeded", "category": "calendar"}
    assert int(second.headers["Retry-After"]) >= 1
    assert second.headers["Access-Control-Allow-Origin"] == "*"


def test_rate_limit_can_be_disabled(client, monkeypatch):
    from liirat_api.config import settings

    limiter = app.container.repositories.rate_limiter()
    monkeypatch.setitem(limiter.limits, "calendar", 1)
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)

    for _ in range(3):
        assert client.get("/api/eodhd/calendar").status_code == 400


def test_category_for():
    assert category_for("/api/quotes") == "prices"
    assert category_for("/api/eodhd/calendar") == "calendar"
    assert category_for("/api/chat") == "analysis"
    assert category_for("/api/alerts") is None


class TestInMemoryRateLimiter:
    def test_fixed_window(self):
        now = [0.0]
        limiter = InMemoryRateLimiter({"news": 2}, window_seconds=60, clock=lambda: now[0])

        assert limiter.check("1.2.3.4", "news")[0] is True
        allowed, info = limiter.check("1.2.3.4", "news")
        assert allowed is True
        assert info["remaining"] == 0
        allowed, info = limiter.check("1.2.3.4", "news")
        assert allowed is False
        assert info["retry_after"] == 60

        assert limiter.check("5.6.7.8", "news")[0] is True

        now[0] = 61.0
        assert limiter.check("1.2.3.4", "news")[0] is True

    def test_expired_windows_are_dropped(self):
        now = [0.0]
        limiter = InMemoryRateLimiter({"news": 5}, window_seconds=60, clock=lambda: now[0])
        for i in range(100):
            limiter.check(f"10.0.0.{i}", "news")
        assert limiter.tracked == 100

        now[0] = 61.0
        limiter.check("1.2.3.4", "news")

        assert limiter.tracked == 1

    def test_unknown_category_is_unlimited(self):
        limiter = InMemoryRateLimiter({"news": 1})
        assert all(limiter.check("c", "other")[0] for _ in range(5))
