"""
models.py
======================

Domain model for EthioLearn.

Two kinds of shapes live here:
- entities produced by the AI gateway (QuizQuestion, AnalysisResult,
  StudyTask). These are pydantic models because every reply from the
  model is re-validated before it is trusted. Field aliases follow the
  camelCase keys of the declared response schemas.
- session values owned by the view controller (UserStats, Subject,
  ChatMessage, StudyPlan, QuizRun). Plain frozen dataclasses; the
  controller replaces them, it never mutates them in place.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ----------------------------------------------------------------------
#  Enums
# ----------------------------------------------------------------------
class Language(str, Enum):
    EN = "en"
    AM = "am"

    @property
    def display_name(self) -> str:
        return "Amharic" if self is Language.AM else "English"


class ViewState(str, Enum):
    DASHBOARD = "dashboard"
    STUDY_HUB = "study_hub"
    QUIZ = "quiz"
    AI_TUTOR = "ai_tutor"
    ANALYZER = "analyzer"


class ChatRole(str, Enum):
    USER = "user"
    # Gemini calls the assistant side of a conversation "model"
    ASSISTANT = "model"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    NATIONAL_EXAM = "National Exam"


class TaskType(str, Enum):
    READING = "reading"
    QUIZ = "quiz"
    VIDEO = "video"
    PRACTICE = "practice"


# ----------------------------------------------------------------------
#  Gateway-produced entities
# ----------------------------------------------------------------------
class _GatewayModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class QuizQuestion(_GatewayModel):
    """One multiple-choice question; correct_answer indexes options."""

    id: int
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_answer: int = Field(..., alias="correctAnswer")
    explanation: str

    @model_validator(mode="after")
    def _check_answer_index(self) -> "QuizQuestion":
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError(
                f"correctAnswer {self.correct_answer} out of range for "
                f"{len(self.options)} options"
            )
        return self

    def is_correct(self, option_index: int) -> bool:
        return option_index == self.correct_answer


class AnalysisResult(_GatewayModel):
    source: str
    difficulty: Difficulty
    success_rate: float = Field(..., alias="successRate", ge=0, le=100)
    similar_questions: List[str] = Field(..., alias="similarQuestions")
    topics: List[str]
    explanation: str


class StudyTask(_GatewayModel):
    id: str
    subject_id: str = Field(..., alias="subjectId")
    title: str
    duration_minutes: int = Field(..., alias="durationMinutes", gt=0)
    is_completed: bool = Field(..., alias="isCompleted")
    type: TaskType

    @field_validator("subject_id")
    @classmethod
    def _check_subject_id(cls, value: str) -> str:
        from .catalog import SUBJECT_IDS

        if value not in SUBJECT_IDS:
            raise ValueError(f"unknown subjectId {value!r}")
        return value

    def toggled(self) -> "StudyTask":
        return self.model_copy(update={"is_completed": not self.is_completed})


# ----------------------------------------------------------------------
#  Session values
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class UserStats:
    streak: int = 0
    xp: int = 0
    level: int = 1
    study_minutes: int = 0
    questions_answered: int = 0


@dataclass(frozen=True)
class Subject:
    id: str
    name_en: str
    name_am: str
    icon: str

    def name(self, language: Language) -> str:
        return self.name_am if language is Language.AM else self.name_en


@dataclass(frozen=True)
class ChatMessage:
    role: ChatRole
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class StudyPlan:
    """The single active plan. Replacing it discards the previous one."""

    goals: str
    weak_areas: Tuple[str, ...]
    tasks: Tuple[StudyTask, ...]

    def find_task(self, task_id: str) -> Optional[StudyTask]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


@dataclass(frozen=True)
class QuizRun:
    """
    Progress through one generated quiz.

    selected is the option picked for the current question (None until
    answered). finished flips once the last question is acknowledged.
    """

    subject_id: str
    questions: Tuple[QuizQuestion, ...]
    index: int = 0
    selected: Optional[int] = None
    score: int = 0
    finished: bool = False

    @property
    def current(self) -> Optional[QuizQuestion]:
        if self.finished or not self.questions:
            return None
        return self.questions[self.index]

    @property
    def answered(self) -> bool:
        return self.selected is not None

    @property
    def is_last(self) -> bool:
        return self.index >= len(self.questions) - 1
