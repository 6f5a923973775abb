"""
ethiolearn package
======================

Internal logic of the EthioLearn AI study app.

Main parts:
- settings (config)
- domain model (models) and static catalog (catalog)
- prompt templates and response schemas (prompts)
- Gemini access behind AIGateway (gateway)
- session state and action handlers (controller)
- Streamlit views (ui)

app.py only wires Streamlit to this package.
"""

from .config import AppConfig
from .controller import AppState, initial_state, resolve_pending
from .gateway import APOLOGY, AIGateway
from .models import (
    AnalysisResult,
    ChatMessage,
    Language,
    QuizQuestion,
    StudyPlan,
    StudyTask,
    UserStats,
    ViewState,
)

__all__ = [
    "AppConfig",
    "AppState",
    "initial_state",
    "resolve_pending",
    "AIGateway",
    "APOLOGY",
    "AnalysisResult",
    "ChatMessage",
    "Language",
    "QuizQuestion",
    "StudyPlan",
    "StudyTask",
    "UserStats",
    "ViewState",
]
