"""LLM prompts for various use cases."""

from llm.prompts.assistant import ASSISTANT_SYSTEM_PROMPT

__all__ = [
    "ASSISTANT_SYSTEM_PROMPT",
]
