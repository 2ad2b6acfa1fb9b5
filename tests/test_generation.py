"""
Notes, quiz and flashcard generation against a fake Groq client.
"""

import json
import logging

import pytest

from lecture_notes.errors import GenerationFailure
from lecture_notes.models import PROCESSING_STEPS, Flashcard, QuizQuestion
from lecture_notes.services.notes import NotesService, parse_notes
from lecture_notes.services.pipeline import LecturePipeline
from lecture_notes.services.study import (
    StudyService,
    parse_items,
    placeholder_flashcards,
    placeholder_quiz,
)
from tests.conftest import FakeGroq, connection_error, rate_limit_error

STUDY_LOGGER = "lecture_notes.services.study"


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


def test_parse_notes_strips_markers_and_blank_lines():
    text = "• Supervised learning\n\n  - Unsupervised learning\n*Reinforcement\n   \nPlain line"
    assert parse_notes(text) == [
        "Supervised learning",
        "Unsupervised learning",
        "Reinforcement",
        "Plain line",
    ]


def test_parse_notes_removes_only_one_marker():
    assert parse_notes("- - nested") == ["- nested"]
    assert parse_notes("-") == []


@pytest.mark.asyncio
async def test_generate_notes_uses_configured_tokens():
    fake = FakeGroq(chat_reply="- one\n- two")
    notes = await NotesService(fake).generate_notes("the transcript")

    assert notes == ["one", "two"]
    call = fake.chat_calls[0]
    assert call["max_tokens"] == 1000
    assert call["temperature"] == 0.7
    assert "the transcript" in call["messages"][-1]["content"]


@pytest.mark.asyncio
async def test_generate_notes_upstream_failure():
    fake = FakeGroq()
    fake.error = rate_limit_error()
    with pytest.raises(GenerationFailure) as exc_info:
        await NotesService(fake).generate_notes("t")
    assert exc_info.value.message == "Failed to generate study notes"
    assert exc_info.value.upstream_status == 429


# ---------------------------------------------------------------------------
# Structured output parsing
# ---------------------------------------------------------------------------


def test_parse_quiz_accepts_code_fence_and_numbers_missing_ids():
    text = "```json\n" + json.dumps([
        {"question": "Q1", "options": ["a", "b", "c", "d"], "correct": 3},
        {"question": "Q2", "options": ["a", "b", "c", "d"], "correct": 0},
    ]) + "\n```"
    quiz = parse_items(text, QuizQuestion, placeholder_quiz, "quiz")
    assert [q.id for q in quiz] == [1, 2]
    assert quiz[0].correct == 3


@pytest.mark.parametrize(
    "text",
    [
        "not json at all",
        '{"questions": []}',
        '[{"question": "Q", "options": ["a", "b"], "correct": 0}]',
        '[{"question": "Q", "options": ["a", "b", "c", "d"], "correct": 4}]',
        '["just a string"]',
    ],
)
def test_parse_quiz_falls_back_to_single_placeholder(text, caplog):
    with caplog.at_level(logging.WARNING, logger=STUDY_LOGGER):
        quiz = parse_items(text, QuizQuestion, placeholder_quiz, "quiz")

    assert len(quiz) == 1
    assert isinstance(quiz[0], QuizQuestion)
    assert 0 <= quiz[0].correct < len(quiz[0].options)
    assert any("structured output fallback" in r.getMessage() for r in caplog.records)


def test_deeply_nested_output_falls_back(caplog):
    text = "[" * 100_000 + "]" * 100_000
    with caplog.at_level(logging.WARNING, logger=STUDY_LOGGER):
        quiz = parse_items(text, QuizQuestion, placeholder_quiz, "quiz")

    assert quiz == placeholder_quiz()
    assert any("structured output fallback" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize(
    "ids,expected",
    [
        ([1, 1, 2], [1, 2, 3]),
        ([7, None, 3], [1, 2, 3]),
        ([1, "1"], [1, 2]),
        ([10, 20, 30], [10, 20, 30]),
    ],
)
def test_quiz_ids_are_made_unique(ids, expected):
    items = []
    for n, item_id in enumerate(ids):
        item = {"question": f"Q{n}", "options": ["a", "b", "c", "d"], "correct": n % 4}
        if item_id is not None:
            item["id"] = item_id
        items.append(item)

    quiz = parse_items(json.dumps(items), QuizQuestion, placeholder_quiz, "quiz")
    assert [q.id for q in quiz] == expected


def test_empty_array_is_not_a_fallback(caplog):
    with caplog.at_level(logging.INFO, logger=STUDY_LOGGER):
        quiz = parse_items("[]", QuizQuestion, placeholder_quiz, "quiz")

    assert quiz == []
    assert not any(r.levelno >= logging.WARNING for r in caplog.records)
    assert any("empty array" in r.getMessage() for r in caplog.records)


def test_parse_flashcards_falls_back():
    cards = parse_items("[{\"question\": \"only\"}]", Flashcard, placeholder_flashcards, "flashcards")
    assert cards == placeholder_flashcards()


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_generate_quiz_asks_for_configured_count():
    fake = FakeGroq(chat_reply="[]")
    await StudyService(fake).generate_quiz("transcript")

    call = fake.chat_calls[0]
    assert call["max_tokens"] == 1500
    assert "create 5 multiple-choice quiz questions" in call["messages"][-1]["content"]


@pytest.mark.asyncio
async def test_generate_flashcards_parses_cards():
    fake = FakeGroq(chat_reply=json.dumps([
        {"id": 1, "question": "Term", "answer": "Definition"},
        {"id": 2, "question": "Other", "answer": "Meaning"},
    ]))
    cards = await StudyService(fake).generate_flashcards("transcript")

    assert [c.answer for c in cards] == ["Definition", "Meaning"]
    assert fake.chat_calls[0]["max_tokens"] == 1200


@pytest.mark.asyncio
async def test_upstream_failure_is_not_swallowed_by_fallback():
    fake = FakeGroq()
    fake.error = connection_error()
    with pytest.raises(GenerationFailure) as exc_info:
        await StudyService(fake).generate_quiz("transcript")
    assert exc_info.value.message == "Failed to generate quiz questions"
    assert exc_info.value.upstream_status is None


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_pipeline_reports_each_step_in_order():
    fake = FakeGroq(chat_reply="- a note")
    pipeline = LecturePipeline(NotesService(fake), StudyService(fake))
    steps: list[str] = []

    record = await pipeline.process("the transcript", title="Week 2", on_step=steps.append)

    assert steps == list(PROCESSING_STEPS)
    assert record.title == "Week 2"
    assert record.study_notes == ["a note"]
    assert record.quiz == placeholder_quiz()
    assert record.flashcards == placeholder_flashcards()


@pytest.mark.asyncio
async def test_pipeline_stops_on_first_upstream_failure():
    fake = FakeGroq()
    fake.error = connection_error()
    steps: list[str] = []

    with pytest.raises(GenerationFailure):
        await LecturePipeline(NotesService(fake), StudyService(fake)).process("t", on_step=steps.append)

    assert steps == ["transcription"]
    assert len(fake.chat_calls) == 1
