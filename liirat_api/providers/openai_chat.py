from __future__ import annotations

import logging
from typing import Dict, List, Optional

import openai
from openai import AsyncOpenAI

from liirat_api.config import Settings
from liirat_api.core.exceptions import (
    ConfigurationError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)

Message = Dict[str, str]


class ChatClient:
    """OpenAI chat completions behind the provider error types."""

    provider = "OpenAI"

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self._settings = settings
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client
        key = self._settings.OPENAI_API_KEY
        if not key:
            raise ConfigurationError("OpenAI API key not configured")
        self._client = AsyncOpenAI(
            api_key=key,
            timeout=self._settings.OPENAI_TIMEOUT_SECONDS,
            max_retries=0,
        )
        return self._client

    async def complete(
        self,
        messages: List[Message],
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        client = self._get_client()
        try:
            resp = await client.chat.completions.create(
                model=model or self._settings.OPENAI_CHAT_MODEL,
                messages=messages,
                max_tokens=max_tokens or self._settings.OPENAI_MAX_TOKENS,
                temperature=(
                    self._settings.OPENAI_TEMPERATURE if temperature is None else temperature
                ),
            )
        except openai.APITimeoutError as exc:
            raise UpstreamTimeoutError(
                "Request timeout - OpenAI API took too long to respond",
                provider=self.provider,
            ) from exc
        except openai.RateLimitError as exc:
            raise UpstreamRateLimitError(
                "OpenAI rate limit exceeded",
                provider=self.provider,
                upstream_status=429,
            ) from exc
        except openai.APIStatusError as exc:
            logger.error("OpenAI API error: %s", exc)
            raise UpstreamError(
                f"OpenAI API error: {exc.status_code}",
                provider=self.provider,
                upstream_status=exc.status_code,
                body=str(exc.message)[:500],
            ) from exc
        except openai.APIError as exc:
            logger.error("OpenAI request failed: %s", exc)
            raise UpstreamError("OpenAI API unreachable", provider=self.provider) from exc

        if not resp.choices:
            return ""
        return (resp.choices[0].message.content or "").strip()
