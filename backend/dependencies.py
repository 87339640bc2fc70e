"""FastAPI dependency injection for services.

Services are cached with @lru_cache() to avoid recreation per request.
"""

from functools import lru_cache

from fastapi import Depends

from llm import BaseLLMService, LLMService
from services.chat import ChatService
from services.document import FileParser

# --- Cached Singletons ---
# These are created once and reused across all requests


@lru_cache
def get_llm_service() -> BaseLLMService:
    """Get cached LLM service (expensive - has API client)."""
    return LLMService()


# --- Lightweight Services (per-request is fine) ---


def get_file_parser() -> FileParser:
    """Get file parser (stateless, cheap to create)."""
    return FileParser()


# --- Composed Services ---


def get_chat_service(
    llm: BaseLLMService = Depends(get_llm_service),
) -> ChatService:
    """Get chat service with the injected LLM provider."""
    return ChatService(llm=llm)
