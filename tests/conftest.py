import httpx
import pytest
from fastapi.testclient import TestClient

from liirat_api.config import settings
from liirat_api.main import app


@pytest.fixture(autouse=True)
def reset_app_state():
    container = app.container
    app.dependency_overrides.clear()
    container.repositories.rate_limiter().reset()
    container.repositories.alert_store().reset()
    container.repositories.quote_cache().clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def test_settings():
    """Settings copy with every provider key set."""
    return settings.model_copy(
        update={
            "EODHD_API_KEY": "eodhd-test",
            "OPENAI_API_KEY": "openai-test",
            "MARKETAUX_API_KEY": "marketaux-test",
            "POLYGON_API_KEY": "polygon-test",
            "REDIS_HOST": "",
        }
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it answered."""

    def __init__(self, handler):
        self.requests = []

        def recording_handler(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


@pytest.fixture
def transport_factory():
    def build(handler):
        return RecordingTransport(handler)

    return build
