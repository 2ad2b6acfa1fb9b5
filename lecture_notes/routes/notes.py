from fastapi import APIRouter, Depends
from pydantic import BaseModel

from lecture_notes.dependencies import get_notes_service
from lecture_notes.errors import MissingTranscription
from lecture_notes.services.notes import NotesService

router = APIRouter(prefix="/api", tags=["notes"])


class TranscriptRequest(BaseModel):
    transcription: str | None = None


def require_transcript(body: TranscriptRequest) -> str:
    if not body.transcription or not body.transcription.strip():
        raise MissingTranscription()
    return body.transcription


@router.post("/generate-notes")
async def generate_notes(
    body: TranscriptRequest,
    notes_svc: NotesService = Depends(get_notes_service),
) -> dict:
    """Turn a transcript into a list of bullet-point study notes."""
    notes = await notes_svc.generate_notes(require_transcript(body))
    return {"notes": notes}
