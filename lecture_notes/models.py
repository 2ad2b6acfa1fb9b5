import time
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

QUIZ_OPTION_COUNT = 4

# Stages a clip goes through before results can be shown.
PROCESSING_STEPS = ("transcription", "notes", "quiz", "flashcards")


class QuizQuestion(BaseModel):
    id: int
    question: str
    options: list[str] = Field(min_length=QUIZ_OPTION_COUNT, max_length=QUIZ_OPTION_COUNT)
    correct: int

    @model_validator(mode="after")
    def _correct_in_range(self) -> "QuizQuestion":
        if not 0 <= self.correct < len(self.options):
            raise ValueError(
                f"correct must index into options (0-{len(self.options) - 1}), got {self.correct}"
            )
        return self


class Flashcard(BaseModel):
    id: int
    question: str
    answer: str


def _timestamp_id() -> int:
    return int(time.time() * 1000)


class LectureRecord(BaseModel):
    """Everything produced for one processed audio clip.  Lives in memory only;
    ``id`` exists so exports get a stable filename."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(default_factory=_timestamp_id)
    title: str = "Lecture Notes"
    transcription: str = ""
    study_notes: list[str] = Field(default_factory=list, alias="studyNotes")
    quiz: list[QuizQuestion] = Field(default_factory=list)
    flashcards: list[Flashcard] = Field(default_factory=list)

    def export_stem(self) -> str:
        return f"lecture-{self.id}"


@dataclass
class UploadedAudio:
    path: Path
    filename: str  # client-side filename
    content_type: str
    size: int
