"""In-memory state of one chat UI session.

Holds the message list, the input box, the attached file and the error
banner. Nothing is persisted; dropping the session drops the history.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

from ui.gateway import GatewayClient, GatewayError
from ui.voice import SpeechRecognizer, SpeechSynthesizer, VoiceController
from utils import format_file_size

logger = logging.getLogger(__name__)


@dataclass
class Message:
    """A rendered chat message."""

    role: Literal["user", "assistant"]
    content: str
    file_name: str | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class UploadedFile:
    """Extracted text of the file waiting to be sent."""

    name: str
    content: str
    size: int

    @property
    def size_label(self) -> str:
        return format_file_size(self.size)


class ChatSession:
    """Chat UI state driven by user actions.

    Failures never raise out of the public actions; they land in ``error``
    and the session stays usable.
    """

    def __init__(
        self,
        gateway: GatewayClient,
        recognizer: SpeechRecognizer | None = None,
        synthesizer: SpeechSynthesizer | None = None,
        auto_speak: bool = False,
    ) -> None:
        self.gateway = gateway
        self.messages: list[Message] = []
        self.input_text = ""
        self.uploaded_file: UploadedFile | None = None
        self.is_loading = False
        self.error: str | None = None
        self.auto_speak = auto_speak
        self.voice = VoiceController(
            recognizer,
            synthesizer,
            on_transcript=self._set_input,
            on_error=self._set_error,
        )

    @property
    def can_send(self) -> bool:
        has_file = self.uploaded_file is not None and bool(
            self.uploaded_file.content.strip()
        )
        return not self.is_loading and (bool(self.input_text.strip()) or has_file)

    async def upload(
        self,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> bool:
        """Extract a file's text and attach it to the next message."""
        self.is_loading = True
        self.error = None
        try:
            data = await self.gateway.parse_file(filename, content, content_type)
            self.uploaded_file = UploadedFile(
                name=data["file_name"],
                content=data["content"],
                size=data["file_size"],
            )
            return True
        except GatewayError as e:
            logger.warning("Upload of %s failed: %s", filename, e.message)
            self.error = e.message
            return False
        finally:
            self.is_loading = False

    def remove_file(self) -> None:
        self.uploaded_file = None

    def dismiss_error(self) -> None:
        self.error = None

    def toggle_auto_speak(self) -> None:
        self.auto_speak = not self.auto_speak

    async def send(self) -> bool:
        """Send the typed text (and any attached file) to the assistant.

        Returns:
            True when an assistant reply was appended.
        """
        if not self.can_send:
            return False

        attached = self.uploaded_file
        history = [{"role": m.role, "content": m.content} for m in self.messages]
        user_message = Message(
            role="user",
            content=self.input_text.strip(),
            file_name=attached.name if attached else None,
        )
        history.append({"role": "user", "content": user_message.content})

        self.messages.append(user_message)
        self.input_text = ""
        self.is_loading = True
        self.error = None

        try:
            data = await self.gateway.chat(
                history, attached.content if attached else None
            )
        except GatewayError as e:
            logger.warning("Chat request failed: %s", e.message)
            self.error = e.message
            return False
        finally:
            self.is_loading = False

        reply = Message(role="assistant", content=data.get("message", ""))
        self.messages.append(reply)
        self.uploaded_file = None

        if self.auto_speak:
            self.voice.speak(reply.content)
        return True

    def read_aloud(self, message_id: str) -> None:
        for message in self.messages:
            if message.id == message_id and message.role == "assistant":
                self.voice.speak(message.content)
                return

    def _set_input(self, text: str) -> None:
        self.input_text = text

    def _set_error(self, message: str | None) -> None:
        self.error = message
