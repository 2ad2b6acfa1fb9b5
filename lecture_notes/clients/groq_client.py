from groq import AsyncGroq

from lecture_notes.config import settings


class GroqClient:
    """Async wrapper around the official Groq SDK.

    Usage::

        groq = GroqClient()                                  # DEFAULT_MODEL from env
        text = await groq.chat(messages, max_tokens=1000)    # plain completion
        text = await groq.transcribe("lecture.mp3", data, "audio/mpeg")

    The SDK is built with an explicit timeout and ``max_retries=0``: a single
    upstream failure surfaces immediately as a ``groq.APIError`` subclass and
    the calling service decides what that means for the request.
    """

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._model = model or settings.default_model
        self._transcription_model = settings.transcription_model
        self._client = AsyncGroq(
            api_key=api_key or settings.groq_api_key,
            timeout=timeout or settings.upstream_timeout_seconds,
            max_retries=0,
        )

    @property
    def default_model(self) -> str:
        return self._model

    # ------------------------------------------------------------------
    # Completions
    # ------------------------------------------------------------------
    async def chat(
        self,
        messages: list[dict],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Plain-text chat completion. Returns the content string."""
        kwargs: dict = {
            "model": model or self._model,
            "messages": messages,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        resp = await self._client.chat.completions.create(**kwargs)
        return resp.choices[0].message.content or ""

    # ------------------------------------------------------------------
    # Speech-to-text
    # ------------------------------------------------------------------
    async def transcribe(
        self,
        filename: str,
        audio: bytes,
        content_type: str,
        *,
        model: str | None = None,
    ) -> str:
        """Hosted Whisper transcription. Returns the plain transcript text."""
        resp = await self._client.audio.transcriptions.create(
            file=(filename, audio, content_type),
            model=model or self._transcription_model,
            response_format="json",
        )
        return resp.text.strip()
