"""
catalog.py
======================

Static data the app ships with: the subject catalog, the starting
(mock) gamification stats, the analyzer sample question and the
national exam countdown.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional, Tuple

from .models import Subject, UserStats

SUBJECTS: Tuple[Subject, ...] = (
    Subject("math", "Mathematics", "ሂሳብ", "📐"),
    Subject("physics", "Physics", "ፊዚክስ", "⚛️"),
    Subject("chemistry", "Chemistry", "ኬሚስትሪ", "🧪"),
    Subject("biology", "Biology", "ባዮሎጂ", "🧬"),
    Subject("english", "English", "እንግሊዝኛ", "📖"),
    Subject("history", "History", "ታሪክ", "🏛️"),
    Subject("geography", "Geography", "ጂኦግራፊ", "🌍"),
    Subject("civics", "Civics", "ሥነ ዜጋ", "⚖️"),
)

_BY_ID: Dict[str, Subject] = {s.id: s for s in SUBJECTS}

# Vocabulary the study-plan schema restricts subjectId to
SUBJECT_IDS: List[str] = [s.id for s in SUBJECTS]

INITIAL_STATS = UserStats(
    streak=12,
    xp=2450,
    level=5,
    study_minutes=420,
    questions_answered=85,
)

SAMPLE_QUESTION = (
    "Which of the following organelles is responsible for producing ATP "
    "through cellular respiration?\n"
    "A) Ribosome\nB) Mitochondrion\nC) Golgi apparatus\nD) Lysosome"
)


def get_subject(subject_id: str) -> Optional[Subject]:
    return _BY_ID.get(subject_id)


def days_until(exam_date: date, today: Optional[date] = None) -> int:
    """Whole days left before the exam, never negative."""
    today = today or date.today()
    return max(0, (exam_date - today).days)
