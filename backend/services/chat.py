"""Chat completion service.

Shapes a conversation for the hosted model:
1. Prepend the fixed system instruction
2. Splice uploaded file text into the most recent user turn
3. Submit with the configured sampling parameters
"""

import logging
from collections.abc import Sequence

from config import get_settings
from llm.base import BaseLLMService
from llm.prompts import ASSISTANT_SYSTEM_PROMPT
from services.types import Completion

logger = logging.getLogger(__name__)

DOCUMENT_START = "[DOCUMENT CONTENT START]"
DOCUMENT_END = "[DOCUMENT CONTENT END]"
EMPTY_REPLY = "No response generated."
# Claude rejects blank turns; file-only sends leave one in the history
EMPTY_TURN = "(no message text)"


def wrap_document(file_content: str, text: str) -> str:
    """Place a delimited document block before the user's typed text."""
    return f"{DOCUMENT_START}\n{file_content}\n{DOCUMENT_END}\n\n{text}"


class ChatService:
    """Stateless request shaping around an LLM provider."""

    def __init__(
        self,
        llm: BaseLLMService,
        system_prompt: str = ASSISTANT_SYSTEM_PROMPT,
    ) -> None:
        self.llm = llm
        self.system_prompt = system_prompt
        self.settings = get_settings()

    def build_messages(
        self,
        turns: Sequence[dict[str, str]],
        file_content: str | None = None,
    ) -> list[dict[str, str]]:
        """Build the provider message list.

        Args:
            turns: Conversation as {"role", "content"} dicts, oldest first.
            file_content: Extracted document text to attach, if any.

        Returns:
            New list: system turn followed by copies of the turns. Only the
            latest user turn receives the document block. Blank turns are
            replaced with a short placeholder.
        """
        messages = [{"role": t["role"], "content": t["content"]} for t in turns]

        if file_content:
            for i in range(len(messages) - 1, -1, -1):
                if messages[i]["role"] == "user":
                    messages[i] = {
                        "role": "user",
                        "content": wrap_document(file_content, messages[i]["content"]),
                    }
                    break
            else:
                logger.warning("File content supplied without a user turn; ignored")

        for message in messages:
            if not message["content"].strip():
                message["content"] = EMPTY_TURN

        return [{"role": "system", "content": self.system_prompt}, *messages]

    async def reply(
        self,
        turns: Sequence[dict[str, str]],
        file_content: str | None = None,
    ) -> Completion:
        """Get the assistant's reply to a conversation.

        Raises:
            LLMError: Propagated from the provider, with subclasses for
                authentication and rate-limit failures.
        """
        messages = self.build_messages(turns, file_content)

        completion = await self.llm.complete(
            messages,
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.llm_max_tokens,
            top_p=self.settings.llm_top_p,
        )

        if not completion.text:
            completion.text = EMPTY_REPLY

        logger.info(
            "Completion from %s: %d input / %d output tokens",
            completion.model,
            completion.usage.input_tokens,
            completion.usage.output_tokens,
        )
        return completion
