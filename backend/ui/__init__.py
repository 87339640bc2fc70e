"""Chat UI state - conversation, upload and voice handling on the client side.

Usage:
    from ui import ChatSession, GatewayClient

    async with GatewayClient("http://localhost:8000/api") as gateway:
        session = ChatSession(gateway)
        await session.upload("notes.md", data)
        session.input_text = "Summarize this"
        await session.send()
"""

from ui.gateway import GatewayClient, GatewayError
from ui.session import ChatSession, Message, UploadedFile
from ui.voice import SpeechRecognizer, SpeechSynthesizer, VoiceController

__all__ = [
    "ChatSession",
    "GatewayClient",
    "GatewayError",
    "Message",
    "UploadedFile",
    "SpeechRecognizer",
    "SpeechSynthesizer",
    "VoiceController",
]
