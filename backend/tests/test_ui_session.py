"""Tests for the chat UI session and gateway client."""

import json

import httpx
import pytest

from services.chat import ChatService
from ui import ChatSession, GatewayClient, GatewayError, SpeechSynthesizer


class RecordingSynthesizer(SpeechSynthesizer):
    def __init__(self):
        self.spoken: list[str] = []

    def speak(self, text):
        self.spoken.append(text)
        if self.on_start:
            self.on_start()

    def cancel(self):
        pass


class FakeBackend:
    """Serves canned envelopes and records chat request bodies."""

    def __init__(self):
        self.chat_bodies: list[dict] = []
        self.chat_status = 200
        self.chat_body = {
            "success": True,
            "message": "Operation completed successfully",
            "data": {"message": "Assistant reply", "usage": {}},
        }
        self.parse_status = 200
        self.parse_body = {
            "success": True,
            "data": {
                "file_name": "notes.txt",
                "file_type": "text/plain",
                "file_size": 11,
                "content": "hello notes",
                "content_length": 11,
            },
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/chat":
            self.chat_bodies.append(json.loads(request.content))
            return httpx.Response(self.chat_status, json=self.chat_body)
        if request.url.path == "/api/parse-file":
            return httpx.Response(self.parse_status, json=self.parse_body)
        return httpx.Response(404, json={"success": False, "message": "Not found"})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def session(backend):
    client = httpx.AsyncClient(
        base_url="http://testserver/api",
        transport=httpx.MockTransport(backend.handler),
    )
    return ChatSession(GatewayClient(client=client))


class TestGatewayClient:
    @pytest.mark.asyncio
    async def test_error_envelope_raises(self, backend, session):
        backend.chat_status = 401
        backend.chat_body = {
            "success": False,
            "message": "Invalid API key. Please check your Anthropic API key.",
        }

        with pytest.raises(GatewayError) as exc_info:
            await session.gateway.chat([{"role": "user", "content": "Hi"}])

        assert exc_info.value.status_code == 401
        assert "Invalid API key" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_json_body_uses_fallback(self):
        client = httpx.AsyncClient(
            base_url="http://testserver/api",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(502, text="Bad Gateway")
            ),
        )
        gateway = GatewayClient(client=client)

        with pytest.raises(GatewayError) as exc_info:
            await gateway.chat([{"role": "user", "content": "Hi"}])

        assert exc_info.value.message == "Failed to get response"

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(
            base_url="http://testserver/api", transport=httpx.MockTransport(fail)
        )

        with pytest.raises(GatewayError):
            await GatewayClient(client=client).parse_file("a.txt", b"a")


class TestChatSession:
    @pytest.mark.asyncio
    async def test_send_without_file(self, backend, session):
        session.input_text = "  Hello  "

        assert await session.send() is True

        assert backend.chat_bodies == [
            {"messages": [{"role": "user", "content": "Hello"}], "file_content": None}
        ]
        assert [m.role for m in session.messages] == ["user", "assistant"]
        assert session.messages[1].content == "Assistant reply"
        assert session.input_text == ""
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_cannot_send_blank(self, backend, session):
        session.input_text = "   "

        assert session.can_send is False
        assert await session.send() is False
        assert backend.chat_bodies == []

    @pytest.mark.asyncio
    async def test_upload_then_send_clears_file(self, backend, session):
        assert await session.upload("notes.txt", b"hello notes", "text/plain")
        assert session.uploaded_file.content == "hello notes"
        assert session.uploaded_file.size_label == "11.0 B"
        assert session.can_send is True

        session.input_text = "Summarize"
        await session.send()

        assert backend.chat_bodies[0]["file_content"] == "hello notes"
        assert session.messages[0].file_name == "notes.txt"
        assert session.uploaded_file is None

    @pytest.mark.asyncio
    async def test_history_never_resends_file_content(self, backend, session):
        await session.upload("notes.txt", b"hello notes")
        session.input_text = "First"
        await session.send()
        session.input_text = "Second"
        await session.send()

        second = backend.chat_bodies[1]
        assert second["file_content"] is None
        assert [m["content"] for m in second["messages"]] == [
            "First",
            "Assistant reply",
            "Second",
        ]

    @pytest.mark.asyncio
    async def test_failed_send_keeps_history_and_file(self, backend, session):
        session.input_text = "Hello"
        await session.send()
        await session.upload("notes.txt", b"hello notes")
        before = list(session.messages)

        backend.chat_status = 429
        backend.chat_body = {
            "success": False,
            "message": "Rate limit exceeded. Please wait a moment and try again.",
        }
        session.input_text = "Again"
        assert await session.send() is False

        assert session.messages[: len(before)] == before
        assert session.messages[-1].role == "user"
        assert len(session.messages) == len(before) + 1
        assert "Rate limit" in session.error
        assert session.uploaded_file is not None
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_failed_upload_sets_error(self, backend, session):
        backend.parse_status = 400
        backend.parse_body = {"success": False, "message": "Unsupported file type"}

        assert await session.upload("x.bin", b"\xff") is False

        assert session.uploaded_file is None
        assert session.error == "Unsupported file type"
        session.dismiss_error()
        assert session.error is None

    @pytest.mark.asyncio
    async def test_auto_speak_reads_reply(self, backend):
        synthesizer = RecordingSynthesizer()
        client = httpx.AsyncClient(
            base_url="http://testserver/api",
            transport=httpx.MockTransport(backend.handler),
        )
        session = ChatSession(
            GatewayClient(client=client), synthesizer=synthesizer, auto_speak=True
        )
        session.input_text = "Hello"

        await session.send()

        assert synthesizer.spoken == ["Assistant reply"]
        assert session.voice.is_speaking is True

    @pytest.mark.asyncio
    async def test_file_only_send_then_follow_up(self, backend, session):
        await session.upload("notes.txt", b"hello notes")
        assert await session.send() is True
        session.input_text = "What else?"
        assert await session.send() is True

        follow_up = backend.chat_bodies[1]
        assert follow_up["messages"][0] == {"role": "user", "content": ""}

        shaped = ChatService(llm=None).build_messages(
            follow_up["messages"], follow_up["file_content"]
        )
        assert all(m["content"].strip() for m in shaped)
        assert [m["role"] for m in shaped[1:]] == ["user", "assistant", "user"]

    @pytest.mark.asyncio
    async def test_cannot_send_blank_file_without_text(self, backend, session):
        backend.parse_body["data"]["content"] = ""
        await session.upload("empty.txt", b"")

        assert session.uploaded_file is not None
        assert session.can_send is False
        assert await session.send() is False
        assert backend.chat_bodies == []

    @pytest.mark.asyncio
    async def test_read_aloud_speaks_assistant_messages_only(self, backend):
        synthesizer = RecordingSynthesizer()
        client = httpx.AsyncClient(
            base_url="http://testserver/api",
            transport=httpx.MockTransport(backend.handler),
        )
        session = ChatSession(GatewayClient(client=client), synthesizer=synthesizer)
        session.input_text = "Hello"
        await session.send()
        user_message, reply = session.messages

        session.read_aloud(user_message.id)
        session.read_aloud("missing")
        assert synthesizer.spoken == []

        session.read_aloud(reply.id)
        assert synthesizer.spoken == ["Assistant reply"]
        assert session.voice.is_speaking is True
