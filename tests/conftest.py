import os

# Settings are read at import time; give them a key before the app is imported.
os.environ.setdefault("GROQ_API_KEY", "gsk_test")

import httpx
import groq
import pytest
from httpx import ASGITransport, AsyncClient

from lecture_notes.dependencies import (
    get_notes_service,
    get_study_service,
    get_transcription_service,
    get_upload_handler,
)
from lecture_notes.main import app
from lecture_notes.services.notes import NotesService
from lecture_notes.services.study import StudyService
from lecture_notes.services.transcription import TranscriptionService
from lecture_notes.services.uploads import UploadHandler


class FakeGroq:
    """Stands in for ``GroqClient``: canned replies, recorded calls, optional error."""

    def __init__(self, chat_reply: str = "", transcript: str = "transcribed text") -> None:
        self.chat_reply = chat_reply
        self.transcript = transcript
        self.error: Exception | None = None
        self.chat_calls: list[dict] = []
        self.transcribe_calls: list[dict] = []

    async def chat(self, messages, **kwargs) -> str:
        self.chat_calls.append({"messages": messages, **kwargs})
        if self.error:
            raise self.error
        return self.chat_reply

    async def transcribe(self, filename, audio, content_type, **kwargs) -> str:
        self.transcribe_calls.append(
            {"filename": filename, "audio": audio, "content_type": content_type}
        )
        if self.error:
            raise self.error
        return self.transcript


def connection_error() -> groq.APIConnectionError:
    return groq.APIConnectionError(
        request=httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    )


def rate_limit_error() -> groq.RateLimitError:
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    return groq.RateLimitError(
        "Rate limit reached",
        response=httpx.Response(429, request=request),
        body=None,
    )


@pytest.fixture
def fake_groq():
    return FakeGroq()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def upload_limit():
    return 1024 * 1024


@pytest.fixture
async def client(fake_groq, upload_dir, upload_limit):
    app.dependency_overrides[get_upload_handler] = lambda: UploadHandler(upload_dir, upload_limit)
    app.dependency_overrides[get_transcription_service] = lambda: TranscriptionService(fake_groq)
    app.dependency_overrides[get_notes_service] = lambda: NotesService(fake_groq)
    app.dependency_overrides[get_study_service] = lambda: StudyService(fake_groq)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
