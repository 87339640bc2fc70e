"""Base LLM service interface.

Defines the contract that all LLM providers must implement.
"""

from abc import ABC, abstractmethod

from services.types import Completion


class LLMError(Exception):
    """Raised when LLM generation fails."""

    status_code = 500

    def __init__(self, message: str = "Failed to get AI response") -> None:
        super().__init__(message)
        self.message = message


class LLMAuthenticationError(LLMError):
    """Raised when the provider rejects the API key."""

    status_code = 401


class LLMRateLimitError(LLMError):
    """Raised when the provider throttles the request."""

    status_code = 429


class BaseLLMService(ABC):
    """Abstract base class for LLM services.

    All LLM providers (Anthropic, OpenAI, etc.) must implement these methods.
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        top_p: float | None = None,
    ) -> Completion:
        """Generate a single non-streaming reply for a conversation.

        Args:
            messages: Turns as {"role", "content"} dicts. Turns with role
                "system" carry instructions; the rest alternate user/assistant.
            temperature: Sampling temperature (0-1).
            max_tokens: Maximum tokens to generate.
            top_p: Nucleus sampling width.

        Returns:
            Completion with reply text and token usage.

        Raises:
            LLMAuthenticationError: Provider rejected the credentials.
            LLMRateLimitError: Provider throttled the request.
            LLMError: Any other provider failure.
        """
