"""
gateway.py
======================

AI gateway: the only place that talks to the Google Gemini API.

Requirements:
- exactly one external call per operation (no retries, no model
  failover, no streaming)
- the reply is parsed as JSON and re-validated against the same shape
  that was declared to the model
- every failure is absorbed here and turned into the operation's
  fallback value; callers never see an exception

Public operations:
- generate_quiz()        -> list of QuizQuestion, [] on failure
- chat_with_tutor()      -> reply text, APOLOGY on failure
- analyze_question()     -> AnalysisResult, None on failure
- generate_study_plan()  -> list of StudyTask, [] on failure
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPIError
from pydantic import TypeAdapter, ValidationError

from . import prompts
from .config import AppConfig
from .logger import get_logger
from .models import AnalysisResult, ChatMessage, ChatRole, Language, QuizQuestion, StudyTask

logger = get_logger(__name__)

APOLOGY = "Sorry, I encountered an error. Please try again."

ModelFactory = Callable[..., Any]

_QUIZ_ADAPTER = TypeAdapter(List[QuizQuestion])
_ANALYSIS_ADAPTER = TypeAdapter(AnalysisResult)
_PLAN_ADAPTER = TypeAdapter(List[StudyTask])


# ----------------------------------------------------------------------
#  Failure taxonomy
# ----------------------------------------------------------------------
class GatewayError(Exception):
    """Base class for failures absorbed at the gateway boundary."""

    kind = "gateway"


class TransportError(GatewayError):
    kind = "transport"


class EmptyResponseError(GatewayError):
    kind = "empty"


class MalformedResponseError(GatewayError):
    kind = "malformed"


class SchemaMismatchError(GatewayError):
    kind = "schema"


# ----------------------------------------------------------------------
#  Gateway
# ----------------------------------------------------------------------
class AIGateway:
    """
    Wraps a Gemini model behind four typed operations.

    model_factory defaults to genai.GenerativeModel; tests pass a fake
    with the same call signature.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.5-flash",
        timeout: float = 30.0,
        model_factory: Optional[ModelFactory] = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.timeout = timeout
        self._model_factory = model_factory or genai.GenerativeModel
        if api_key:
            genai.configure(api_key=api_key)

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs) -> "AIGateway":
        return cls(
            api_key=config.gemini_api_key,
            model_name=config.model_name,
            timeout=config.request_timeout,
            **kwargs,
        )

    # ------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------
    def generate_quiz(self, subject_name: str, language: Language) -> List[QuizQuestion]:
        """Five questions for the subject, or [] meaning "no quiz available"."""
        try:
            questions = self._structured_call(
                "generate_quiz",
                prompts.build_quiz_prompt(subject_name, language),
                prompts.QUIZ_SCHEMA,
                _QUIZ_ADAPTER,
                system_instruction=prompts.QUIZ_SYSTEM_INSTRUCTION,
            )
            if len(questions) != prompts.QUIZ_SIZE:
                raise SchemaMismatchError(
                    f"expected {prompts.QUIZ_SIZE} questions, got {len(questions)}"
                )
            _require_unique_ids(questions)
            return questions
        except GatewayError as e:
            _log_failure("generate_quiz", e)
            return []

    def chat_with_tutor(
        self,
        history: Sequence[ChatMessage],
        message: str,
        language: Language,
    ) -> str:
        """
        Send the prior turns plus the new message; returns the reply.
        On any failure returns APOLOGY, so the result is never empty.
        """
        try:
            self._require_key()
            logger.debug(f"chat_with_tutor: model={self.model_name} turns={len(history)}")
            model = self._new_model(system_instruction=prompts.build_tutor_instruction(language))
            chat = model.start_chat(history=_history_contents(history))
            response = self._send(lambda: chat.send_message(message, request_options=self._request_options()))
            return _response_text(response)
        except GatewayError as e:
            _log_failure("chat_with_tutor", e)
            return APOLOGY

    def analyze_question(self, question_text: str, language: Language) -> Optional[AnalysisResult]:
        """A fully populated report, or None. Blank input makes no call."""
        if not question_text.strip():
            return None
        try:
            return self._structured_call(
                "analyze_question",
                prompts.build_analysis_prompt(question_text, language),
                prompts.ANALYSIS_SCHEMA,
                _ANALYSIS_ADAPTER,
            )
        except GatewayError as e:
            _log_failure("analyze_question", e)
            return None

    def generate_study_plan(
        self,
        goals: str,
        weak_areas: Sequence[str],
        language: Language,
    ) -> List[StudyTask]:
        if not goals.strip():
            return []
        try:
            tasks = self._structured_call(
                "generate_study_plan",
                prompts.build_study_plan_prompt(goals, weak_areas, language),
                prompts.STUDY_PLAN_SCHEMA,
                _PLAN_ADAPTER,
            )
            if not prompts.PLAN_MIN_TASKS <= len(tasks) <= prompts.PLAN_MAX_TASKS:
                raise SchemaMismatchError(f"expected 3-5 tasks, got {len(tasks)}")
            _require_unique_ids(tasks)
            return tasks
        except GatewayError as e:
            _log_failure("generate_study_plan", e)
            return []

    # ------------------------------------------------------------
    # Structured call: prompt + schema -> call -> parse -> validate
    # ------------------------------------------------------------
    def _structured_call(
        self,
        operation: str,
        prompt: str,
        schema: Dict[str, Any],
        adapter: TypeAdapter,
        system_instruction: Optional[str] = None,
    ) -> Any:
        self._require_key()
        logger.debug(f"{operation}: model={self.model_name} prompt_chars={len(prompt)}")

        model = self._new_model(
            system_instruction=system_instruction,
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": schema,
            },
        )
        response = self._send(
            lambda: model.generate_content(prompt, request_options=self._request_options())
        )
        text = _response_text(response)

        # strict: wrong JSON types are rejected, not coerced
        try:
            return adapter.validate_json(text, strict=True)
        except ValidationError as e:
            if any(err["type"] == "json_invalid" for err in e.errors()):
                raise MalformedResponseError(f"reply is not JSON: {e}") from e
            raise SchemaMismatchError(f"{e.error_count()} validation error(s)") from e

    def _new_model(self, **kwargs):
        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        try:
            return self._model_factory(self.model_name, **kwargs)
        except Exception as e:
            raise TransportError(f"could not create model {self.model_name}: {e}") from e

    def _send(self, call: Callable[[], Any]):
        try:
            return call()
        except GoogleAPIError as e:
            raise TransportError(f"Gemini API error {type(e).__name__}: {e}") from e
        except Exception as e:
            # timeouts and connection errors surface as assorted types
            raise TransportError(f"request failed {type(e).__name__}: {e}") from e

    def _request_options(self) -> Dict[str, Any]:
        return {"timeout": self.timeout}

    def _require_key(self) -> None:
        if not self.api_key:
            raise TransportError("no Gemini API key configured")


# ----------------------------------------------------------------------
#  Model listing (settings page only)
# ----------------------------------------------------------------------
def list_models() -> List[str]:
    """
    Names of models that support generateContent, reverse-sorted so the
    newest tends to come first. [] on any error.
    """
    try:
        models = genai.list_models()
        names = [
            m.name
            for m in models
            if "generateContent" in getattr(m, "supported_generation_methods", [])
        ]
    except Exception as e:
        logger.warning(f"Could not list Gemini models: {e}")
        return []
    return sorted(names, reverse=True)


# ----------------------------------------------------------------------
#  Helpers
# ----------------------------------------------------------------------
def _response_text(response: Any) -> str:
    try:
        text = response.text
    except (AttributeError, ValueError) as e:
        # .text raises ValueError when the candidate was blocked or empty
        raise EmptyResponseError(str(e)) from e
    if not text or not text.strip():
        raise EmptyResponseError("empty reply")
    return text.strip()


def _history_contents(history: Sequence[ChatMessage]) -> List[Dict[str, Any]]:
    """Convert the transcript to Gemini contents; must open with a user turn."""
    contents = [{"role": m.role.value, "parts": [m.text]} for m in history]
    while contents and contents[0]["role"] != ChatRole.USER.value:
        contents.pop(0)
    return contents


def _require_unique_ids(items: Sequence[Any]) -> None:
    ids = [item.id for item in items]
    if len(set(ids)) != len(ids):
        raise SchemaMismatchError(f"duplicate ids in reply: {ids}")


def _log_failure(operation: str, error: GatewayError) -> None:
    logger.warning(f"{operation} failed ({error.kind}): {error}")
