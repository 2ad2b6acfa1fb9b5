"""FastAPI dependency providers.  Tests swap these out via ``app.dependency_overrides``."""

from functools import lru_cache

from fastapi import Depends

from lecture_notes.clients import GroqClient
from lecture_notes.config import settings
from lecture_notes.services.notes import NotesService
from lecture_notes.services.pipeline import LecturePipeline
from lecture_notes.services.study import StudyService
from lecture_notes.services.transcription import TranscriptionService
from lecture_notes.services.uploads import UploadHandler


@lru_cache()
def get_groq_client() -> GroqClient:
    """One SDK client (and httpx connection pool) per process."""
    return GroqClient()


def get_upload_handler() -> UploadHandler:
    return UploadHandler(settings.upload_dir, settings.max_upload_bytes)


def get_transcription_service() -> TranscriptionService:
    return TranscriptionService(get_groq_client())


def get_notes_service() -> NotesService:
    return NotesService(get_groq_client())


def get_study_service() -> StudyService:
    return StudyService(get_groq_client())


def get_pipeline(
    notes: NotesService = Depends(get_notes_service),
    study: StudyService = Depends(get_study_service),
) -> LecturePipeline:
    return LecturePipeline(notes, study)
