"""
prompts.py
======================

Prompt templates and declared response schemas for the four Gemini
operations.

Schemas use the OpenAPI subset accepted by `response_schema` in
google-generativeai. The same shapes are re-checked on our side by the
pydantic models in models.py before a reply is trusted.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .catalog import SUBJECT_IDS
from .models import Difficulty, Language, TaskType

QUIZ_SIZE = 5
PLAN_MIN_TASKS = 3
PLAN_MAX_TASKS = 5

QUIZ_SYSTEM_INSTRUCTION = "You are an expert Ethiopian National Exam creator."


# ----------------------------------------------------------------------
#  Schemas
# ----------------------------------------------------------------------
QUIZ_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "min_items": QUIZ_SIZE,
    "max_items": QUIZ_SIZE,
    "items": {
        "type": "OBJECT",
        "properties": {
            "id": {"type": "INTEGER"},
            "question": {"type": "STRING"},
            "options": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
                "min_items": 4,
                "max_items": 4,
            },
            "correctAnswer": {
                "type": "INTEGER",
                "description": "Index of the correct answer (0-3)",
            },
            "explanation": {"type": "STRING"},
        },
        "required": ["id", "question", "options", "correctAnswer", "explanation"],
    },
}

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "source": {
            "type": "STRING",
            "description": "e.g. Grade 11 Biology, Unit 3, Page 45",
        },
        "difficulty": {
            "type": "STRING",
            "format": "enum",
            "enum": [d.value for d in Difficulty],
        },
        "successRate": {"type": "NUMBER", "description": "Percentage 0-100"},
        "similarQuestions": {"type": "ARRAY", "items": {"type": "STRING"}},
        "topics": {"type": "ARRAY", "items": {"type": "STRING"}},
        "explanation": {"type": "STRING"},
    },
    "required": [
        "source",
        "difficulty",
        "successRate",
        "similarQuestions",
        "topics",
        "explanation",
    ],
}

STUDY_PLAN_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "min_items": PLAN_MIN_TASKS,
    "max_items": PLAN_MAX_TASKS,
    "items": {
        "type": "OBJECT",
        "properties": {
            "id": {"type": "STRING"},
            "subjectId": {
                "type": "STRING",
                "format": "enum",
                "enum": list(SUBJECT_IDS),
            },
            "title": {"type": "STRING"},
            "durationMinutes": {"type": "INTEGER"},
            "isCompleted": {"type": "BOOLEAN"},
            "type": {
                "type": "STRING",
                "format": "enum",
                "enum": [t.value for t in TaskType],
            },
        },
        "required": [
            "id",
            "subjectId",
            "title",
            "durationMinutes",
            "isCompleted",
            "type",
        ],
    },
}


# ----------------------------------------------------------------------
#  Prompt builders
# ----------------------------------------------------------------------
def _language_line(language: Language) -> str:
    return f"Language: {language.display_name}."


def build_quiz_prompt(subject_name: str, language: Language) -> str:
    lines = [
        f"Generate {QUIZ_SIZE} multiple choice questions for Grade 12 {subject_name}.",
        "The questions should be challenging and relevant to the Ethiopian "
        "National Exam curriculum.",
        "Each question must have exactly 4 options and a correctAnswer index from 0 to 3.",
        _language_line(language),
    ]
    if language is Language.AM:
        lines.append("Write all text in Amharic (Ge'ez script) and make sure it is correctly encoded.")
    return "\n".join(lines)


def build_tutor_instruction(language: Language) -> str:
    """Persona for the tutor chat; sent as the system instruction."""
    return "\n".join(
        [
            "You are EthioLearn AI, a friendly and knowledgeable tutor for "
            "Ethiopian students (Grades 1-12).",
            "You explain concepts clearly, referencing standard Ethiopian "
            "textbooks where possible.",
            f"Current Language: {language.display_name}.",
            "Keep responses concise but helpful. Use emojis occasionally to be friendly.",
        ]
    )


def build_analysis_prompt(question_text: str, language: Language) -> str:
    return "\n".join(
        [
            f'Analyze this exam question: "{question_text.strip()}".',
            "Provide the likely source from the Ethiopian curriculum, estimate "
            "difficulty, simulate a student success rate (0-100), list similar "
            "questions and the topics it covers, and explain the answer.",
            _language_line(language),
        ]
    )


def build_study_plan_prompt(
    goals: str,
    weak_areas: Iterable[str],
    language: Language,
    subject_ids: Optional[Iterable[str]] = None,
) -> str:
    ids = ", ".join(subject_ids or SUBJECT_IDS)
    return "\n".join(
        [
            f"Create a personalized daily study plan ({PLAN_MIN_TASKS}-{PLAN_MAX_TASKS} "
            "tasks) for an Ethiopian student.",
            f"Goal: {goals.strip()}",
            f"Weak Areas: {', '.join(weak_areas)}",
            f"Use only these subject ids: {ids}.",
            "Every task needs a positive durationMinutes and isCompleted set to false.",
            _language_line(language),
            "Focus on helping them improve their weak areas while maintaining general progress.",
        ]
    )


def split_weak_areas(text: str) -> List[str]:
    """'math, physics,' -> ['math', 'physics']"""
    return [part.strip() for part in text.split(",") if part.strip()]
