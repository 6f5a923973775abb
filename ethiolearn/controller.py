"""
controller.py
======================

View controller: owns the session state and every mutation of it.

All handlers are reducer-style: they take an AppState and return a new
one. Views never touch state; they return intents that app.py turns
into handler calls.

AI requests run in two steps so the triggering control can be disabled
while a call is outstanding:
1. request_*()      records a PendingRequest (ignored if one exists)
2. resolve_pending() performs the single gateway call and applies it
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from .catalog import INITIAL_STATS, SAMPLE_QUESTION, get_subject
from .gateway import AIGateway
from .logger import get_logger
from .models import (
    AnalysisResult,
    ChatMessage,
    ChatRole,
    Language,
    QuizQuestion,
    QuizRun,
    StudyPlan,
    StudyTask,
    UserStats,
    ViewState,
)
from .prompts import split_weak_areas

logger = get_logger(__name__)

# Gamification constants
XP_PER_CORRECT_ANSWER = 100
QUESTIONS_PER_QUIZ_CREDIT = 5
XP_PER_TASK = 50


class RequestKind(str, Enum):
    QUIZ = "quiz"
    CHAT = "chat"
    ANALYSIS = "analysis"
    PLAN = "plan"


@dataclass(frozen=True)
class PendingRequest:
    kind: RequestKind
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AppState:
    view: ViewState = ViewState.DASHBOARD
    language: Language = Language.EN
    stats: UserStats = INITIAL_STATS
    quiz: Optional[QuizRun] = None
    plan: Optional[StudyPlan] = None
    chat: Tuple[ChatMessage, ...] = ()
    analysis: Optional[AnalysisResult] = None
    analysis_text: str = ""
    selected_subject_id: Optional[str] = None
    # i18n key of a "nothing generated" message for the current view
    notice: Optional[str] = None
    pending: Optional[PendingRequest] = None

    @property
    def busy(self) -> bool:
        return self.pending is not None

    def is_pending(self, kind: RequestKind) -> bool:
        return self.pending is not None and self.pending.kind is kind


def initial_state(language: Language = Language.EN) -> AppState:
    return AppState(language=language)


# ----------------------------------------------------------------------
#  Navigation / language
# ----------------------------------------------------------------------
def navigate(state: AppState, view: ViewState) -> AppState:
    if view is not state.view:
        logger.debug(f"view {state.view.value} -> {view.value}")
    return replace(state, view=view, notice=None)


def set_language(state: AppState, language: Language) -> AppState:
    return replace(state, language=language)


# ----------------------------------------------------------------------
#  Study hub
# ----------------------------------------------------------------------
def select_subject(state: AppState, subject_id: str) -> AppState:
    if get_subject(subject_id) is None:
        return state
    return replace(state, selected_subject_id=subject_id, notice=None)


def clear_subject(state: AppState) -> AppState:
    return replace(state, selected_subject_id=None, notice=None)


# ----------------------------------------------------------------------
#  Quiz
# ----------------------------------------------------------------------
def start_quiz(state: AppState, subject_id: str, questions: Sequence[QuizQuestion]) -> AppState:
    """
    StudyHub -> Quiz, only when questions were generated. An empty list
    keeps the user in the study hub with a "try again" notice.
    """
    if not questions:
        return replace(state, view=ViewState.STUDY_HUB, notice="quiz_unavailable")
    run = QuizRun(subject_id=subject_id, questions=tuple(questions))
    return replace(navigate(state, ViewState.QUIZ), quiz=run)


def answer_question(state: AppState, option_index: int) -> AppState:
    run = state.quiz
    if run is None or run.current is None or run.answered:
        return state
    score = run.score + 1 if run.current.is_correct(option_index) else run.score
    return replace(state, quiz=replace(run, selected=option_index, score=score))


def next_question(state: AppState) -> AppState:
    """Advance after an answer; past the last question the quiz completes."""
    run = state.quiz
    if run is None or run.finished or not run.answered:
        return state
    if not run.is_last:
        return replace(state, quiz=replace(run, index=run.index + 1, selected=None))
    state = replace(state, quiz=replace(run, finished=True))
    return complete_quiz(state, run.score)


def complete_quiz(state: AppState, score: int) -> AppState:
    """score * 100 xp; questions answered always grows by 5."""
    stats = state.stats
    xp = score * XP_PER_CORRECT_ANSWER
    logger.debug(f"quiz complete: score={score} +{xp}xp")
    return replace(
        state,
        stats=replace(
            stats,
            xp=stats.xp + xp,
            questions_answered=stats.questions_answered + QUESTIONS_PER_QUIZ_CREDIT,
        ),
    )


def exit_quiz(state: AppState) -> AppState:
    return replace(navigate(state, ViewState.STUDY_HUB), quiz=None)


# ----------------------------------------------------------------------
#  Study plan
# ----------------------------------------------------------------------
def apply_study_plan(
    state: AppState,
    goals: str,
    weak_areas: Sequence[str],
    tasks: Sequence[StudyTask],
) -> AppState:
    """Replace the active plan; the previous one is discarded."""
    plan = StudyPlan(goals=goals, weak_areas=tuple(weak_areas), tasks=tuple(tasks))
    notice = None if tasks else "plan_empty"
    return replace(state, plan=plan, notice=notice)


def toggle_task(state: AppState, task_id: str) -> AppState:
    """
    Flip a task's completion. Only the incomplete -> complete edge awards
    50 xp and the task's minutes; un-completing does not take them back.
    """
    plan = state.plan
    task = plan.find_task(task_id) if plan else None
    if task is None:
        return state

    tasks = tuple(t.toggled() if t.id == task_id else t for t in plan.tasks)
    state = replace(state, plan=replace(plan, tasks=tasks))

    if not task.is_completed:
        stats = state.stats
        logger.debug(f"task {task_id} completed: +{XP_PER_TASK}xp +{task.duration_minutes}min")
        state = replace(
            state,
            stats=replace(
                stats,
                xp=stats.xp + XP_PER_TASK,
                study_minutes=stats.study_minutes + task.duration_minutes,
            ),
        )
    return state


# ----------------------------------------------------------------------
#  Analyzer
# ----------------------------------------------------------------------
def set_analysis_text(state: AppState, text: str) -> AppState:
    return replace(state, analysis_text=text)


def load_sample_question(state: AppState) -> AppState:
    return replace(state, analysis_text=SAMPLE_QUESTION)


# ----------------------------------------------------------------------
#  Pending requests
# ----------------------------------------------------------------------
def request_quiz(state: AppState, subject_id: str) -> AppState:
    if state.busy or get_subject(subject_id) is None:
        return state
    return replace(
        state,
        notice=None,
        pending=PendingRequest(RequestKind.QUIZ, {"subject_id": subject_id}),
    )


def request_chat(state: AppState, text: str) -> AppState:
    """The user's message shows in the transcript right away."""
    if state.busy or not text.strip():
        return state
    history_len = len(state.chat)
    message = ChatMessage(role=ChatRole.USER, text=text)
    return replace(
        state,
        chat=state.chat + (message,),
        pending=PendingRequest(RequestKind.CHAT, {"text": text, "history_len": history_len}),
    )


def request_analysis(state: AppState) -> AppState:
    if state.busy or not state.analysis_text.strip():
        return state
    return replace(
        state,
        analysis=None,
        notice=None,
        pending=PendingRequest(RequestKind.ANALYSIS, {"text": state.analysis_text}),
    )


def request_plan(state: AppState, goals: str, weak_areas_text: str) -> AppState:
    if state.busy or not goals.strip():
        return state
    return replace(
        state,
        notice=None,
        pending=PendingRequest(
            RequestKind.PLAN,
            {"goals": goals, "weak_areas": split_weak_areas(weak_areas_text)},
        ),
    )


def resolve_pending(state: AppState, gateway: AIGateway) -> AppState:
    """Run the outstanding request (one gateway call) and apply its result."""
    pending = state.pending
    if pending is None:
        return state

    state = replace(state, pending=None)
    payload = pending.payload
    language = state.language

    if pending.kind is RequestKind.QUIZ:
        subject = get_subject(payload["subject_id"])
        questions = gateway.generate_quiz(subject.name_en, language)
        return start_quiz(state, subject.id, questions)

    if pending.kind is RequestKind.CHAT:
        history = state.chat[: payload["history_len"]]
        reply = gateway.chat_with_tutor(history, payload["text"], language)
        message = ChatMessage(role=ChatRole.ASSISTANT, text=reply)
        return replace(state, chat=state.chat + (message,))

    if pending.kind is RequestKind.ANALYSIS:
        result = gateway.analyze_question(payload["text"], language)
        notice = None if result is not None else "analysis_failed"
        return replace(state, analysis=result, notice=notice)

    if pending.kind is RequestKind.PLAN:
        tasks = gateway.generate_study_plan(payload["goals"], payload["weak_areas"], language)
        return apply_study_plan(state, payload["goals"], payload["weak_areas"], tasks)

    raise ValueError(f"unknown request kind {pending.kind!r}")
