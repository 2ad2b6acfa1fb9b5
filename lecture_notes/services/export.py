import csv
import io
import logging
import re
from xml.sax.saxutils import escape

from pydantic import TypeAdapter, ValidationError
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from lecture_notes.errors import ExportFailure
from lecture_notes.models import Flashcard, LectureRecord, QuizQuestion

logger = logging.getLogger(__name__)

# Fixed render order; callers choose a subset, never the order.
SECTIONS = ("transcription", "notes", "quiz", "flashcards")

SECTION_HEADINGS = {
    "transcription": "Transcription",
    "notes": "Study Notes",
    "quiz": "Quiz Questions",
    "flashcards": "Flashcards",
}

CORRECT_MARK = "(correct)"

CSV_HEADERS = {
    "notes": ["Note Number", "Note Content"],
    "quiz": ["Question", "Option A", "Option B", "Option C", "Option D", "Correct Answer"],
    "flashcards": ["Question", "Answer"],
}

_UNSAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9_\- ]")


def option_letter(index: int) -> str:
    return chr(ord("A") + index)


def export_filename(title: str | None, ext: str, fallback: str) -> str:
    """Sanitize *title* for use in a Content-Disposition header."""
    stem = _UNSAFE_FILENAME_RE.sub("", title or "").strip()[:100]
    return f"{stem or fallback}.{ext}"


def _ordered(sections: list[str] | None) -> list[str]:
    if sections is None:
        return list(SECTIONS)
    unknown = set(sections) - set(SECTIONS)
    if unknown:
        raise ExportFailure(f"Unknown export section(s): {', '.join(sorted(unknown))}")
    return [s for s in SECTIONS if s in sections]


class ExportService:
    """Render a ``LectureRecord`` as PDF, CSV or markdown text, all in memory."""

    # ------------------------------------------------------------------
    # PDF
    # ------------------------------------------------------------------
    @staticmethod
    def pdf_lines(
        record: LectureRecord, sections: list[str] | None = None
    ) -> list[tuple[str, str]]:
        """Return the ordered ``(style, text)`` lines of the PDF body.

        Styles are ``title``, ``heading``, ``body``, ``bullet``, ``question``
        and ``option``.  Text is plain (not yet escaped for reportlab markup).
        Sections without content are skipped.
        """
        lines: list[tuple[str, str]] = [("title", record.title or "Lecture Notes")]

        for section in _ordered(sections):
            if section == "transcription" and record.transcription:
                lines.append(("heading", SECTION_HEADINGS[section]))
                lines.append(("body", record.transcription))

            elif section == "notes" and record.study_notes:
                lines.append(("heading", SECTION_HEADINGS[section]))
                lines.extend(("bullet", f"• {note}") for note in record.study_notes)

            elif section == "quiz" and record.quiz:
                lines.append(("heading", SECTION_HEADINGS[section]))
                for n, q in enumerate(record.quiz, start=1):
                    lines.append(("question", f"{n}. {q.question}"))
                    for i, option in enumerate(q.options):
                        text = f"{option_letter(i)}. {option}"
                        if i == q.correct:
                            text = f"{text} {CORRECT_MARK}"
                        lines.append(("option", text))

            elif section == "flashcards" and record.flashcards:
                lines.append(("heading", SECTION_HEADINGS[section]))
                for n, card in enumerate(record.flashcards, start=1):
                    lines.append(("question", f"{n}. Q: {card.question}"))
                    lines.append(("option", f"A: {card.answer}"))

        return lines

    @staticmethod
    def _pdf_styles() -> dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()
        return {
            "title": ParagraphStyle(
                "LectureTitle", parent=base["Title"], fontSize=20, alignment=TA_CENTER, spaceAfter=18
            ),
            "heading": ParagraphStyle(
                "SectionHeading", parent=base["Heading2"], fontSize=16, spaceBefore=12, spaceAfter=6
            ),
            "body": ParagraphStyle(
                "Body", parent=base["Normal"], fontSize=12, leading=15, alignment=TA_JUSTIFY
            ),
            "bullet": ParagraphStyle(
                "Bullet", parent=base["Normal"], fontSize=12, leading=15, leftIndent=12
            ),
            "question": ParagraphStyle(
                "Question", parent=base["Normal"], fontSize=12, leading=15, spaceBefore=6
            ),
            "option": ParagraphStyle(
                "Option", parent=base["Normal"], fontSize=12, leading=15, leftIndent=24
            ),
        }

    @staticmethod
    def render_pdf(record: LectureRecord, sections: list[str] | None = None) -> bytes:
        lines = ExportService.pdf_lines(record, sections)
        styles = ExportService._pdf_styles()

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=inch,
            leftMargin=inch,
            topMargin=inch,
            bottomMargin=inch,
            title=record.title,
        )
        story = []
        for style, text in lines:
            if style == "heading" and story:
                story.append(Spacer(1, 0.15 * inch))
            story.append(Paragraph(escape(text), styles[style]))
        doc.build(story)

        pdf = buffer.getvalue()
        logger.info("Rendered PDF for %r: %d bytes, %d lines", record.title, len(pdf), len(lines))
        return pdf

    # ------------------------------------------------------------------
    # CSV
    # ------------------------------------------------------------------
    @staticmethod
    def csv_rows(kind: str, rows: list | None) -> list[list[str]]:
        """Convert raw row data for *kind* into CSV value rows (header excluded)."""
        if kind not in CSV_HEADERS:
            raise ExportFailure(f"Unknown export type: {kind!r}")
        if not rows:
            raise ExportFailure("No data to export")

        try:
            if kind == "notes":
                notes = TypeAdapter(list[str]).validate_python(rows)
                return [[str(n), note] for n, note in enumerate(notes, start=1)]
            if kind == "quiz":
                questions = TypeAdapter(list[QuizQuestion]).validate_python(rows)
                return [[q.question, *q.options, q.options[q.correct]] for q in questions]
            cards = TypeAdapter(list[Flashcard]).validate_python(rows)
            return [[card.question, card.answer] for card in cards]
        except ValidationError as e:
            logger.warning("Rejected %s export: %s", kind, e)
            raise ExportFailure(f"Invalid {kind} data", detail=str(e)) from e

    @staticmethod
    def render_csv(kind: str, rows: list | None) -> str:
        """Every field is quoted; embedded quotes are doubled."""
        values = ExportService.csv_rows(kind, rows)
        out = io.StringIO()
        writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADERS[kind])
        writer.writerows(values)
        return out.getvalue()

    # ------------------------------------------------------------------
    # Markdown text
    # ------------------------------------------------------------------
    @staticmethod
    def render_text(record: LectureRecord, sections: list[str] | None = None) -> str:
        parts = [f"# {record.title}\n\n"]
        for section in _ordered(sections):
            heading = SECTION_HEADINGS[section]
            if section == "transcription":
                parts.append(f"## {heading}\n{record.transcription}\n\n")
            elif section == "notes":
                bullets = "\n".join(f"- {note}" for note in record.study_notes)
                parts.append(f"## {heading}\n{bullets}\n\n")
            elif section == "quiz":
                parts.append(f"## {heading}\n")
                for n, q in enumerate(record.quiz, start=1):
                    parts.append(f"{n}. {q.question}\n")
                    for i, option in enumerate(q.options):
                        marker = "*" if i == q.correct else " "
                        parts.append(f"  {marker} {option}\n")
                    parts.append("\n")
            elif section == "flashcards":
                parts.append(f"## {heading}\n")
                for n, card in enumerate(record.flashcards, start=1):
                    parts.append(f"{n}. Q: {card.question}\n   A: {card.answer}\n\n")
        return "".join(parts)
