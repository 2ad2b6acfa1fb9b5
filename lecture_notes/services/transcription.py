import logging
from pathlib import Path

import aiofiles
import groq

from lecture_notes.clients import GroqClient
from lecture_notes.errors import TranscriptionFailure

logger = logging.getLogger(__name__)


class TranscriptionService:
    """Turn a stored audio file into plain text with the hosted Whisper model.

    No chunking, streaming or retry.  Size and extension limits are the
    caller's job (see ``UploadHandler``).
    """

    def __init__(self, groq_client: GroqClient | None = None) -> None:
        self.groq = groq_client or GroqClient()

    async def transcribe(self, path: str | Path, content_type: str) -> str:
        path = Path(path)
        async with aiofiles.open(path, "rb") as f:
            audio = await f.read()

        logger.info("Transcribing %s (%d bytes, %s)", path.name, len(audio), content_type)
        try:
            text = await self.groq.transcribe(path.name, audio, content_type)
        except groq.APIStatusError as e:
            logger.error("Whisper API error %s: %s", e.status_code, e.message)
            raise TranscriptionFailure(detail=e.message, status=e.status_code) from e
        except groq.APIError as e:
            logger.error("Whisper API unreachable: %s", e.message)
            raise TranscriptionFailure(detail=e.message) from e

        logger.info("Transcribed %s: %d characters", path.name, len(text))
        return text
