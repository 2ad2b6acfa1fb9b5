import logging
import re

from lecture_notes.clients import GroqClient
from lecture_notes.config import settings
from lecture_notes.services.completion import build_messages, complete

logger = logging.getLogger(__name__)

# Leading bullet marker plus the whitespace after it.
_BULLET_RE = re.compile(r"^[•\-*]\s*")

NOTES_SYSTEM_PROMPT = (
    "You are a lecture note-taker. Convert lecture transcriptions into "
    "well-organized study notes: bullet points covering key concepts, "
    "definitions, and important information, suitable for student review."
)


def parse_notes(text: str) -> list[str]:
    """Split a completion into note lines.

    Each line is trimmed and loses one leading bullet marker; lines that end up
    empty are dropped.  Nothing else is checked.
    """
    notes: list[str] = []
    for line in text.splitlines():
        line = _BULLET_RE.sub("", line.strip())
        if line:
            notes.append(line)
    return notes


class NotesService:
    """Generate bullet-point study notes from a transcript via the Groq API."""

    def __init__(self, groq: GroqClient | None = None) -> None:
        self.groq = groq or GroqClient()

    async def generate_notes(self, transcript: str) -> list[str]:
        messages = build_messages(
            NOTES_SYSTEM_PROMPT,
            (
                "Convert the following lecture transcription into well-organized study notes. "
                "Format the response as bullet points covering key concepts, definitions, "
                "and important information.\n\n"
                f"{transcript}\n\n"
                "Please provide clear, concise bullet points that capture the main ideas "
                "and important details."
            ),
        )
        text = await complete(
            self.groq,
            messages,
            max_tokens=settings.notes_max_tokens,
            failure_message="Failed to generate study notes",
        )
        notes = parse_notes(text)
        logger.info("Generated %d study notes", len(notes))
        return notes
