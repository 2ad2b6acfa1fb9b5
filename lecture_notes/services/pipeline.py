import logging
from typing import Callable

from lecture_notes.models import LectureRecord
from lecture_notes.services.notes import NotesService
from lecture_notes.services.study import StudyService

logger = logging.getLogger(__name__)

StepCallback = Callable[[str], None]


class LecturePipeline:
    """Derive notes, quiz and flashcards from a transcript, one call after another.

    ``on_step`` is invoked with the step name after each step finishes, which
    is what drives the processing screen instead of a simulated timer.
    """

    def __init__(self, notes: NotesService, study: StudyService) -> None:
        self.notes = notes
        self.study = study

    async def process(
        self,
        transcript: str,
        title: str | None = None,
        on_step: StepCallback | None = None,
    ) -> LectureRecord:
        def done(step: str) -> None:
            logger.info("Pipeline step complete: %s", step)
            if on_step is not None:
                on_step(step)

        done("transcription")
        study_notes = await self.notes.generate_notes(transcript)
        done("notes")
        quiz = await self.study.generate_quiz(transcript)
        done("quiz")
        flashcards = await self.study.generate_flashcards(transcript)
        done("flashcards")

        return LectureRecord(
            title=title or "Lecture Notes",
            transcription=transcript,
            study_notes=study_notes,
            quiz=quiz,
            flashcards=flashcards,
        )
