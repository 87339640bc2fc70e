"""Tests for the Anthropic provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from llm import (
    AnthropicService,
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
)

REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def status_error(cls, status: int, message: str):
    return cls(message, response=httpx.Response(status, request=REQUEST), body=None)


def make_response(*texts: str, usage=(10, 5)):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=t) for t in texts],
        model="claude-sonnet-4-20250514",
        usage=SimpleNamespace(input_tokens=usage[0], output_tokens=usage[1]),
    )


@pytest.fixture
def service():
    svc = AnthropicService()
    svc._client = MagicMock()
    svc._client.messages.create = AsyncMock(return_value=make_response("Hi!"))
    return svc


class TestSplitSystem:
    def test_system_turns_lifted_out(self):
        system, turns = AnthropicService.split_system(
            [
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Hello"},
            ]
        )
        assert system == "Be brief."
        assert turns == [{"role": "user", "content": "Hello"}]


class TestComplete:
    @pytest.mark.asyncio
    async def test_request_shape(self, service):
        await service.complete(
            [
                {"role": "system", "content": "SYS"},
                {"role": "user", "content": "Hello"},
            ],
            temperature=0.7,
            max_tokens=4096,
            top_p=1.0,
        )

        kwargs = service._client.messages.create.call_args.kwargs
        assert kwargs["system"] == "SYS"
        assert kwargs["messages"] == [{"role": "user", "content": "Hello"}]
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 4096
        assert kwargs["top_p"] == 1.0
        assert kwargs["stream"] is False

    @pytest.mark.asyncio
    async def test_defaults_from_settings(self, service):
        await service.complete([{"role": "user", "content": "Hello"}])

        kwargs = service._client.messages.create.call_args.kwargs
        assert kwargs["temperature"] == service.settings.llm_temperature
        assert kwargs["max_tokens"] == service.settings.llm_max_tokens
        assert kwargs["top_p"] == service.settings.llm_top_p

    @pytest.mark.asyncio
    async def test_text_and_usage(self, service):
        service._client.messages.create.return_value = make_response(
            "Part one. ", "Part two.", usage=(100, 20)
        )

        completion = await service.complete([{"role": "user", "content": "Hello"}])

        assert completion.text == "Part one. Part two."
        assert completion.usage.as_dict() == {
            "input_tokens": 100,
            "output_tokens": 20,
            "total_tokens": 120,
        }

    @pytest.mark.asyncio
    async def test_authentication_error(self, service):
        service._client.messages.create.side_effect = status_error(
            anthropic.AuthenticationError, 401, "invalid x-api-key"
        )

        with pytest.raises(LLMAuthenticationError) as exc_info:
            await service.complete([{"role": "user", "content": "Hello"}])

        assert exc_info.value.status_code == 401
        assert "Invalid API key" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_rate_limit_error(self, service):
        service._client.messages.create.side_effect = status_error(
            anthropic.RateLimitError, 429, "rate_limit_error"
        )

        with pytest.raises(LLMRateLimitError) as exc_info:
            await service.complete([{"role": "user", "content": "Hello"}])

        assert exc_info.value.status_code == 429
        assert "Rate limit" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_other_error_carries_provider_message(self, service):
        service._client.messages.create.side_effect = status_error(
            anthropic.InternalServerError, 500, "Overloaded"
        )

        with pytest.raises(LLMError) as exc_info:
            await service.complete([{"role": "user", "content": "Hello"}])

        assert type(exc_info.value) is LLMError
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Overloaded"

    @pytest.mark.asyncio
    async def test_connection_error(self, service):
        service._client.messages.create.side_effect = anthropic.APIConnectionError(
            request=REQUEST
        )

        with pytest.raises(LLMError) as exc_info:
            await service.complete([{"role": "user", "content": "Hello"}])

        assert exc_info.value.message == "Connection error."
