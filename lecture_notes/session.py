"""Client session state as an immutable value plus pure update functions.

Every user action takes a ``SessionState`` and returns a new one; ``render``
turns a state into the ``View`` the page should show.  Screen changes go
through ``transition`` and its explicit table.
"""

import enum
import html
import re
from dataclasses import dataclass, field, replace

from lecture_notes.models import PROCESSING_STEPS, Flashcard, LectureRecord

RESULT_TABS = ("transcription", "notes", "quiz", "flashcards")
THEMES = ("light", "dark", "auto")


class Screen(str, enum.Enum):
    WELCOME = "welcome"
    RECORDING = "recording"
    UPLOAD = "upload"
    PROCESSING = "processing"
    RESULTS = "results"


TRANSITIONS: dict[Screen, frozenset[Screen]] = {
    Screen.WELCOME: frozenset({Screen.RECORDING, Screen.UPLOAD, Screen.RESULTS}),
    Screen.RECORDING: frozenset({Screen.WELCOME, Screen.PROCESSING}),
    Screen.UPLOAD: frozenset({Screen.WELCOME, Screen.PROCESSING}),
    Screen.PROCESSING: frozenset({Screen.WELCOME, Screen.RESULTS}),
    Screen.RESULTS: frozenset({Screen.WELCOME}),
}


class InvalidTransition(ValueError):
    pass


@dataclass(frozen=True)
class ViewSettings:
    theme: str = "light"  # light | dark | auto
    auto_save: bool = True
    export_format: str = "pdf"
    max_recording_time: int = 3600  # seconds
    audio_quality: str = "high"


@dataclass(frozen=True)
class SessionState:
    screen: Screen = Screen.WELCOME
    recording: bool = False
    completed_steps: tuple[str, ...] = ()
    record: LectureRecord | None = None
    active_tab: str = "transcription"
    quiz_answers: dict[int, int] = field(default_factory=dict)
    show_score: bool = False
    flashcard_index: int = 0
    flashcard_flipped: bool = False
    settings: ViewSettings = field(default_factory=ViewSettings)


@dataclass(frozen=True)
class QuizScore:
    correct: int
    total: int

    @property
    def accuracy(self) -> int:
        return round(self.correct / self.total * 100) if self.total else 0


@dataclass(frozen=True)
class View:
    screen: Screen
    recording: bool
    progress: float
    title: str | None
    active_tab: str | None
    flashcard: Flashcard | None
    flashcard_counter: str | None
    flashcard_flipped: bool
    score: QuizScore | None
    theme: str


# ---------------------------------------------------------------------------
# Screens
# ---------------------------------------------------------------------------


def _check_transition(state: SessionState, target: Screen) -> None:
    if target not in TRANSITIONS[state.screen]:
        raise InvalidTransition(f"Cannot go from {state.screen.value} to {target.value}")


def transition(state: SessionState, target: Screen) -> SessionState:
    """Move to *target*; the results screen is only reachable with a record loaded."""
    _check_transition(state, target)
    if target is Screen.RESULTS and state.record is None:
        raise InvalidTransition("No lecture loaded; use load_results")
    changes: dict = {"screen": target}
    if target is Screen.RECORDING or state.screen is Screen.RECORDING:
        changes["recording"] = False
    if target is Screen.PROCESSING:
        changes["completed_steps"] = ()
    return replace(state, **changes)


def _require(state: SessionState, screen: Screen) -> None:
    if state.screen is not screen:
        raise InvalidTransition(f"Expected the {screen.value} screen, on {state.screen.value}")
    if screen is Screen.RESULTS and state.record is None:
        raise InvalidTransition("No lecture loaded")


def start_recording(state: SessionState) -> SessionState:
    _require(state, Screen.RECORDING)
    if state.recording:
        return state
    return replace(state, recording=True)


def stop_recording(state: SessionState) -> SessionState:
    """Stopping a recording hands the clip to processing."""
    _require(state, Screen.RECORDING)
    if not state.recording:
        raise InvalidTransition("Not recording")
    return transition(state, Screen.PROCESSING)


def complete_step(state: SessionState, step: str) -> SessionState:
    _require(state, Screen.PROCESSING)
    if step not in PROCESSING_STEPS:
        raise ValueError(f"Unknown processing step: {step}")
    if step in state.completed_steps:
        return state
    return replace(state, completed_steps=state.completed_steps + (step,))


def progress(state: SessionState) -> float:
    return len(state.completed_steps) / len(PROCESSING_STEPS)


def load_results(state: SessionState, record: LectureRecord) -> SessionState:
    _check_transition(state, Screen.RESULTS)
    return replace(
        state,
        screen=Screen.RESULTS,
        record=record,
        active_tab="transcription",
        quiz_answers={},
        show_score=False,
        flashcard_index=0,
        flashcard_flipped=False,
    )


def select_tab(state: SessionState, tab: str) -> SessionState:
    _require(state, Screen.RESULTS)
    if tab not in RESULT_TABS:
        raise ValueError(f"Unknown tab: {tab}")
    return replace(state, active_tab=tab)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def change_theme(state: SessionState, theme: str) -> SessionState:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme: {theme}")
    return replace(state, settings=replace(state.settings, theme=theme))


def toggle_auto_save(state: SessionState, enabled: bool) -> SessionState:
    return replace(state, settings=replace(state.settings, auto_save=enabled))


# ---------------------------------------------------------------------------
# Quiz
# ---------------------------------------------------------------------------


def answer_quiz(state: SessionState, question_id: int, option_index: int) -> SessionState:
    _require(state, Screen.RESULTS)
    question = next((q for q in state.record.quiz if q.id == question_id), None)
    if question is None:
        raise ValueError(f"No quiz question with id {question_id}")
    if not 0 <= option_index < len(question.options):
        raise ValueError(f"Option {option_index} out of range for question {question_id}")
    return replace(state, quiz_answers={**state.quiz_answers, question_id: option_index})


def score_quiz(state: SessionState) -> QuizScore:
    quiz = state.record.quiz if state.record else []
    correct = sum(1 for q in quiz if state.quiz_answers.get(q.id) == q.correct)
    return QuizScore(correct=correct, total=len(quiz))


def check_quiz(state: SessionState) -> SessionState:
    _require(state, Screen.RESULTS)
    return replace(state, show_score=True)


def reset_quiz(state: SessionState) -> SessionState:
    return replace(state, quiz_answers={}, show_score=False)


# ---------------------------------------------------------------------------
# Flashcards
# ---------------------------------------------------------------------------


def _card_count(state: SessionState) -> int:
    return len(state.record.flashcards) if state.record else 0


def next_flashcard(state: SessionState) -> SessionState:
    if state.flashcard_index >= _card_count(state) - 1:
        return state
    return replace(state, flashcard_index=state.flashcard_index + 1, flashcard_flipped=False)


def previous_flashcard(state: SessionState) -> SessionState:
    if state.flashcard_index <= 0:
        return state
    return replace(state, flashcard_index=state.flashcard_index - 1, flashcard_flipped=False)


def flip_flashcard(state: SessionState) -> SessionState:
    return replace(state, flashcard_flipped=not state.flashcard_flipped)


# ---------------------------------------------------------------------------
# Transcript search
# ---------------------------------------------------------------------------


def highlight_matches(text: str, query: str) -> str:
    """HTML-escape *text* and wrap case-insensitive matches of *query* in <mark>.

    The query is matched literally, never as a regular expression.
    """
    if not query.strip():
        return html.escape(text)
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    out: list[str] = []
    pos = 0
    for match in pattern.finditer(text):
        out.append(html.escape(text[pos : match.start()]))
        out.append(f"<mark>{html.escape(match.group(0))}</mark>")
        pos = match.end()
    out.append(html.escape(text[pos:]))
    return "".join(out)


# ---------------------------------------------------------------------------
# View
# ---------------------------------------------------------------------------


def render(state: SessionState) -> View:
    in_results = state.screen is Screen.RESULTS and state.record is not None
    cards = state.record.flashcards if in_results else []
    card = cards[state.flashcard_index] if cards else None
    return View(
        screen=state.screen,
        recording=state.recording,
        progress=progress(state) if state.screen is Screen.PROCESSING else 0.0,
        title=state.record.title if in_results else None,
        active_tab=state.active_tab if in_results else None,
        flashcard=card,
        flashcard_counter=f"{state.flashcard_index + 1} / {len(cards)}" if card else None,
        flashcard_flipped=state.flashcard_flipped if card else False,
        score=score_quiz(state) if in_results and state.show_score else None,
        theme=state.settings.theme,
    )
