from fastapi import APIRouter, Depends, File, Form, UploadFile

from lecture_notes.dependencies import (
    get_pipeline,
    get_transcription_service,
    get_upload_handler,
)
from lecture_notes.errors import InvalidUpload
from lecture_notes.models import LectureRecord
from lecture_notes.services.pipeline import LecturePipeline
from lecture_notes.services.transcription import TranscriptionService
from lecture_notes.services.uploads import UploadHandler

router = APIRouter(prefix="/api", tags=["transcription"])


def _require_file(audio: UploadFile | None) -> UploadFile:
    if audio is None or not audio.filename:
        raise InvalidUpload("No audio file uploaded")
    return audio


@router.post("/transcribe")
async def transcribe(
    audio: UploadFile | None = File(None),
    uploads: UploadHandler = Depends(get_upload_handler),
    transcriber: TranscriptionService = Depends(get_transcription_service),
) -> dict:
    """Transcribe one uploaded audio file.  The stored copy is removed on every path."""
    audio = _require_file(audio)
    async with uploads.stored(audio) as stored:
        text = await transcriber.transcribe(stored.path, stored.content_type)
    return {"transcription": text}


@router.post("/process")
async def process(
    audio: UploadFile | None = File(None),
    title: str | None = Form(None),
    uploads: UploadHandler = Depends(get_upload_handler),
    transcriber: TranscriptionService = Depends(get_transcription_service),
    pipeline: LecturePipeline = Depends(get_pipeline),
) -> LectureRecord:
    """Upload, transcribe and generate notes, quiz and flashcards in one request."""
    audio = _require_file(audio)
    async with uploads.stored(audio) as stored:
        text = await transcriber.transcribe(stored.path, stored.content_type)
    return await pipeline.process(text, title=title)
