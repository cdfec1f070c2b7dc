import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import httpx
import openai
import pytest

from liirat_api.core.exceptions import (
    ConfigurationError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
)
from liirat_api.providers.openai_chat import ChatClient

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _openai_stub(result=None, error=None):
    create = AsyncMock(return_value=result, side_effect=error)
    stub = Mock()
    stub.chat.completions.create = create
    return stub, create


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_complete_uses_configured_defaults(test_settings):
    stub, create = _openai_stub(result=_completion("  Gold is at 2030.5  "))
    client = ChatClient(test_settings, client=stub)

    reply = asyncio.run(client.complete([{"role": "user", "content": "gold?"}]))

    assert reply == "Gold is at 2030.5"
    kwargs = create.await_args.kwargs
    assert kwargs["model"] == test_settings.OPENAI_CHAT_MODEL
    assert kwargs["max_tokens"] == test_settings.OPENAI_MAX_TOKENS
    assert kwargs["temperature"] == test_settings.OPENAI_TEMPERATURE


def test_empty_choices(test_settings):
    stub, _ = _openai_stub(result=SimpleNamespace(choices=[]))

    assert asyncio.run(ChatClient(test_settings, client=stub).complete([])) == ""


def test_missing_key(test_settings):
    settings = test_settings.model_copy(update={"OPENAI_API_KEY": None})

    with pytest.raises(ConfigurationError) as exc_info:
        asyncio.run(ChatClient(settings).complete([]))

    assert exc_info.value.message == "OpenAI API key not configured"


@pytest.mark.parametrize(
    "error,expected",
    [
        (openai.APITimeoutError(request=_REQUEST), UpstreamTimeoutError),
        (
            openai.RateLimitError(
                "rate limited", response=httpx.Response(429, request=_REQUEST), body=None
            ),
            UpstreamRateLimitError,
        ),
        (
            openai.AuthenticationError(
                "bad key", response=httpx.Response(401, request=_REQUEST), body=None
            ),
            UpstreamError,
        ),
        (openai.APIConnectionError(request=_REQUEST), UpstreamError),
    ],
)
def test_error_mapping(test_settings, error, expected):
    stub, _ = _openai_stub(error=error)

    with pytest.raises(expected) as exc_info:
        asyncio.run(ChatClient(test_settings, client=stub).complete([]))

    assert exc_info.value.provider == "OpenAI"


def test_status_error_keeps_upstream_status(test_settings):
    error = openai.AuthenticationError(
        "bad key", response=httpx.Response(401, request=_REQUEST), body=None
    )
    stub, _ = _openai_stub(error=error)

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(ChatClient(test_settings, client=stub).complete([]))

    assert exc_info.value.upstream_status == 401
