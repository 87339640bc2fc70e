"""POST /chat - Send the conversation and get the assistant's reply."""

import logging
import uuid

from fastapi import Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from apps.chat.models.message import ChatTurn
from dependencies import get_chat_service
from llm import LLMAuthenticationError, LLMError, LLMRateLimitError
from responses import ResponseCode, error_response, success_response
from services import ChatService
from utils import truncate_text

logger = logging.getLogger(__name__)


# --- Request/Response Schemas (API-specific) ---


class ChatRequest(BaseModel):
    """Request body for chat endpoint."""

    messages: list[ChatTurn] = Field(
        ...,
        min_length=1,
        description="Conversation turns, oldest first, ending with the new user turn",
    )
    file_content: str | None = Field(
        None,
        description="Optional: extracted document text to attach to the latest user turn",
    )


class ChatReply(BaseModel):
    """Successful chat payload."""

    message: str = Field(..., description="Assistant reply text")
    model: str = Field(..., description="Model that produced the reply")
    usage: dict[str, int] = Field(..., description="Token usage metrics")


# --- Error mapping ---

LLM_ERROR_MAP = {
    LLMAuthenticationError: ResponseCode.LLM_AUTH_FAILED,
    LLMRateLimitError: ResponseCode.LLM_RATE_LIMIT,
    LLMError: ResponseCode.LLM_ERROR,
}


# --- Handler ---


async def send_message(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> JSONResponse:
    """Send a conversation and return the assistant's reply.

    Errors:
    - 401: Provider rejected the API key
    - 429: Provider rate limit hit
    - 500: Any other provider failure
    """
    request_id = str(uuid.uuid4())[:8]
    logger.info(
        "[%s] Chat request: %d turns, file attached: %s, last: %s",
        request_id,
        len(request.messages),
        bool(request.file_content),
        truncate_text(request.messages[-1].content),
    )

    try:
        completion = await chat_service.reply(
            [turn.model_dump() for turn in request.messages],
            request.file_content,
        )

    except LLMError as e:
        code = LLM_ERROR_MAP.get(type(e), ResponseCode.LLM_ERROR)
        log_fn = logger.warning if code == ResponseCode.LLM_RATE_LIMIT else logger.error
        log_fn("[%s] %s: %s", request_id, type(e).__name__, e)
        return error_response(code, e.message or None, request_id)

    except Exception as e:
        logger.exception("[%s] Unexpected error during chat", request_id)
        return error_response(ResponseCode.LLM_ERROR, str(e) or None, request_id)

    reply = ChatReply(
        message=completion.text,
        model=completion.model,
        usage=completion.usage.as_dict(),
    )
    return success_response(ResponseCode.SUCCESS, reply.model_dump(), request_id)
