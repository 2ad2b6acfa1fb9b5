from fastapi import APIRouter, Depends

from lecture_notes.dependencies import get_study_service
from lecture_notes.routes.notes import TranscriptRequest, require_transcript
from lecture_notes.services.study import StudyService

router = APIRouter(prefix="/api", tags=["study"])


@router.post("/generate-quiz")
async def generate_quiz(
    body: TranscriptRequest,
    study_svc: StudyService = Depends(get_study_service),
) -> dict:
    """Generate a multiple-choice quiz from a transcript."""
    questions = await study_svc.generate_quiz(require_transcript(body))
    return {"quiz": [q.model_dump() for q in questions]}


@router.post("/generate-flashcards")
async def generate_flashcards(
    body: TranscriptRequest,
    study_svc: StudyService = Depends(get_study_service),
) -> dict:
    cards = await study_svc.generate_flashcards(require_transcript(body))
    return {"flashcards": [c.model_dump() for c in cards]}
