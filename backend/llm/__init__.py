"""LLM module - unified interface for language model interactions.

Usage:
    from llm import LLMService, LLMError

    llm = LLMService()
    completion = await llm.complete(messages)
    print(completion.text)

Structure:
    - base.py: Abstract interface (BaseLLMService) and error types
    - anthropic.py: Claude implementation (AnthropicService)
    - prompts/: System instructions
"""

from llm.anthropic import AnthropicService
from llm.base import (
    BaseLLMService,
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
)
from llm.prompts import ASSISTANT_SYSTEM_PROMPT

# Default provider - can be swapped by changing this alias
LLMService = AnthropicService

__all__ = [
    "BaseLLMService",
    "LLMService",
    "LLMError",
    "LLMAuthenticationError",
    "LLMRateLimitError",
    "AnthropicService",
    "ASSISTANT_SYSTEM_PROMPT",
]
