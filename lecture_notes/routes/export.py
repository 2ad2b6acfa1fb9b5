import asyncio
from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from pydantic import BaseModel

from lecture_notes.models import Flashcard, LectureRecord, QuizQuestion
from lecture_notes.services.export import ExportService, export_filename

router = APIRouter(prefix="/api", tags=["export"])


# ------------------------------------------------------------------
# Request bodies
# ------------------------------------------------------------------


class ExportRequest(BaseModel):
    title: str | None = None
    transcription: str | None = None
    notes: list[str] | None = None
    quiz: list[QuizQuestion] | None = None
    flashcards: list[Flashcard] | None = None
    sections: list[str] | None = None  # default: every section

    def to_record(self) -> LectureRecord:
        return LectureRecord(
            title=self.title or "Lecture Notes",
            transcription=self.transcription or "",
            study_notes=self.notes or [],
            quiz=self.quiz or [],
            flashcards=self.flashcards or [],
        )


class CsvExportRequest(BaseModel):
    type: str | None = None
    data: list[Any] | None = None
    title: str | None = None


def _attachment(content: bytes | str, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------


@router.post("/export-pdf")
async def export_pdf(body: ExportRequest) -> Response:
    # reportlab layout is CPU-bound; keep it off the event loop
    pdf = await asyncio.to_thread(ExportService.render_pdf, body.to_record(), body.sections)
    return _attachment(pdf, "application/pdf", export_filename(body.title, "pdf", "lecture-notes"))


@router.post("/export-csv")
async def export_csv(body: CsvExportRequest) -> Response:
    """Export one content type (notes, quiz or flashcards) as CSV."""
    content = ExportService.render_csv(body.type or "", body.data)
    return _attachment(content, "text/csv", export_filename(body.title, "csv", "lecture-data"))


@router.post("/export-text")
async def export_text(body: ExportRequest) -> Response:
    """Markdown export of the selected sections."""
    record = body.to_record()
    content = ExportService.render_text(record, body.sections)
    return _attachment(
        content, "text/markdown", export_filename(body.title, "md", record.export_stem())
    )
