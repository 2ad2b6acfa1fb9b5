import json
import logging
import re
from typing import Callable, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from lecture_notes.clients import GroqClient
from lecture_notes.config import settings
from lecture_notes.models import Flashcard, QuizQuestion
from lecture_notes.services.completion import build_messages, complete

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)

QUIZ_ITEM_FORMAT = """{
  "question": "Question text",
  "options": ["Option A", "Option B", "Option C", "Option D"],
  "correct": 0,
  "id": 1
}"""

FLASHCARD_ITEM_FORMAT = """{
  "question": "Question or term",
  "answer": "Answer or definition",
  "id": 1
}"""


# ---------------------------------------------------------------------------
# Placeholders returned when the model ignores the requested JSON format
# ---------------------------------------------------------------------------


def placeholder_quiz() -> list[QuizQuestion]:
    return [
        QuizQuestion(
            id=1,
            question="What was the main topic of this lecture?",
            options=["Topic A", "Topic B", "Topic C", "Topic D"],
            correct=0,
        )
    ]


def placeholder_flashcards() -> list[Flashcard]:
    return [
        Flashcard(
            id=1,
            question="Key concept from this lecture",
            answer="Answer based on lecture content",
        )
    ]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _strip_fence(text: str) -> str:
    text = text.strip()
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def _number_items(data: list) -> None:
    # quiz answers are keyed by id, so ids must be present and unique
    ids = [item.get("id") if isinstance(item, dict) else None for item in data]
    if None not in ids and len(set(map(str, ids))) == len(ids):
        return
    for index, item in enumerate(data, start=1):
        if isinstance(item, dict):
            item["id"] = index


def parse_items(
    text: str,
    item_type: type[T],
    placeholder: Callable[[], list[T]],
    kind: str,
) -> list[T]:
    """Parse a JSON array completion into *item_type* models.

    Unparseable or mis-shaped output degrades to *placeholder()* and is logged
    as a fallback; a well-formed empty array is returned as-is.  Items are
    renumbered 1..n unless every one carries a distinct id.
    """
    try:
        data = json.loads(_strip_fence(text))
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        _number_items(data)
        items = TypeAdapter(list[item_type]).validate_python(data)
    except (ValueError, ValidationError, RecursionError) as e:
        # json.JSONDecodeError is a ValueError; RecursionError comes from deep nesting
        logger.warning(
            "structured output fallback: %s response could not be parsed (%s); "
            "returning placeholder",
            kind,
            e,
        )
        return placeholder()

    if not items:
        logger.info("%s response was an empty array", kind)
    return items


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class StudyService:
    """Generate quizzes and flashcards from a lecture transcript via the Groq API."""

    def __init__(self, groq: GroqClient | None = None) -> None:
        self.groq = groq or GroqClient()

    async def generate_quiz(
        self,
        transcript: str,
        num_questions: int | None = None,
    ) -> list[QuizQuestion]:
        """Generate multiple-choice questions, each with 4 options and the
        index of the correct one."""
        count = num_questions or settings.quiz_questions
        messages = build_messages(
            (
                "You are an expert quiz writer for college students. "
                "You answer with a JSON array only, no commentary."
            ),
            (
                f"Based on the following lecture transcription, create {count} "
                "multiple-choice quiz questions. Format the response as a JSON array "
                "where each question has the following structure:\n"
                f"{QUIZ_ITEM_FORMAT}\n\n"
                'The "correct" field should be the index (0-3) of the correct answer '
                "in the options array.\n\n"
                f"Lecture content:\n{transcript}\n\n"
                f"Please provide exactly {count} well-crafted questions that test "
                "understanding of key concepts."
            ),
        )
        text = await complete(
            self.groq,
            messages,
            max_tokens=settings.quiz_max_tokens,
            failure_message="Failed to generate quiz questions",
        )
        return parse_items(text, QuizQuestion, placeholder_quiz, "quiz")

    async def generate_flashcards(
        self,
        transcript: str,
        num_cards: int | None = None,
    ) -> list[Flashcard]:
        count = num_cards or settings.flashcard_count
        messages = build_messages(
            (
                "You write concise study flashcards. "
                "You answer with a JSON array only, no commentary."
            ),
            (
                f"Based on the following lecture transcription, create {count} "
                "flashcards for studying. Format the response as a JSON array where "
                "each flashcard has the following structure:\n"
                f"{FLASHCARD_ITEM_FORMAT}\n\n"
                "Create flashcards that focus on key terms, concepts, and important "
                "information from the lecture.\n\n"
                f"Lecture content:\n{transcript}\n\n"
                f"Please provide exactly {count} flashcards."
            ),
        )
        text = await complete(
            self.groq,
            messages,
            max_tokens=settings.flashcards_max_tokens,
            failure_message="Failed to generate flashcards",
        )
        return parse_items(text, Flashcard, placeholder_flashcards, "flashcards")
