"""Anthropic Claude LLM implementation."""

import logging

import httpx
from anthropic import APIError, AsyncAnthropic, AuthenticationError, RateLimitError

from config import get_settings
from services.types import Completion, TokenUsage

from .base import BaseLLMService, LLMAuthenticationError, LLMError, LLMRateLimitError

logger = logging.getLogger(__name__)


class AnthropicService(BaseLLMService):
    """Claude LLM service via Anthropic API."""

    def __init__(self, model: str | None = None) -> None:
        settings = get_settings()
        self.model = model or settings.llm_model
        self.settings = settings

        self._client = AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            timeout=httpx.Timeout(timeout=settings.llm_timeout_seconds, connect=10.0),
        )

    @staticmethod
    def split_system(
        messages: list[dict[str, str]],
    ) -> tuple[str, list[dict[str, str]]]:
        """Lift system turns out of a conversation.

        Claude takes instructions as a separate ``system`` parameter rather
        than as a message role.
        """
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        turns = [
            {"role": m["role"], "content": m["content"]}
            for m in messages
            if m["role"] != "system"
        ]
        return "\n\n".join(system_parts), turns

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        top_p: float | None = None,
    ) -> Completion:
        """Generate a reply using Claude."""
        system, turns = self.split_system(messages)

        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens or self.settings.llm_max_tokens,
                temperature=temperature
                if temperature is not None
                else self.settings.llm_temperature,
                top_p=top_p if top_p is not None else self.settings.llm_top_p,
                system=system,
                messages=turns,
                stream=False,
            )

        except AuthenticationError as e:
            logger.error("Authentication failed: %s", e)
            raise LLMAuthenticationError(
                "Invalid API key. Please check your Anthropic API key."
            ) from e
        except RateLimitError as e:
            logger.warning("Rate limit: %s", e)
            raise LLMRateLimitError(
                "Rate limit exceeded. Please wait a moment and try again."
            ) from e
        except APIError as e:
            logger.error("API error: %s", e)
            raise LLMError(e.message or "Failed to get AI response") from e

        text = "".join(
            block.text for block in response.content if block.type == "text"
        )
        usage = TokenUsage()
        if response.usage is not None:
            usage = TokenUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )

        return Completion(text=text, model=response.model, usage=usage)
