import json

import pytest
from google.api_core.exceptions import DeadlineExceeded, PermissionDenied

from conftest import ANALYSIS, PLAN_ITEMS, QUIZ_ITEMS
from ethiolearn.gateway import (
    _ANALYSIS_ADAPTER,
    APOLOGY,
    MalformedResponseError,
    SchemaMismatchError,
    _history_contents,
    list_models,
)
from ethiolearn.models import ChatMessage, ChatRole, Difficulty, Language, TaskType
from ethiolearn.prompts import ANALYSIS_SCHEMA, QUIZ_SCHEMA, QUIZ_SYSTEM_INSTRUCTION


# --- generate_quiz ---


def test_generate_quiz_returns_five_questions(make_gateway):
    gateway, factory = make_gateway(QUIZ_ITEMS)
    questions = gateway.generate_quiz("Biology", Language.EN)
    assert len(questions) == 5
    for q in questions:
        assert 0 <= q.correct_answer < len(q.options)


def test_generate_quiz_declares_schema_and_timeout(make_gateway):
    gateway, factory = make_gateway(QUIZ_ITEMS)
    gateway.generate_quiz("Biology", Language.AM)

    model_name, kwargs = factory.created[0]
    assert model_name == "gemini-test"
    assert kwargs["system_instruction"] == QUIZ_SYSTEM_INSTRUCTION
    assert kwargs["generation_config"]["response_mime_type"] == "application/json"
    assert kwargs["generation_config"]["response_schema"] is QUIZ_SCHEMA

    prompt, options = factory.requests[0]
    assert "Biology" in prompt
    assert "Amharic" in prompt
    assert options == {"timeout": 5.0}


def test_generate_quiz_makes_exactly_one_call(make_gateway):
    gateway, factory = make_gateway(error=DeadlineExceeded("too slow"))
    assert gateway.generate_quiz("Physics", Language.EN) == []
    assert len(factory.requests) == 1


def test_generate_quiz_transport_error(make_gateway):
    gateway, _ = make_gateway(error=PermissionDenied("bad key"))
    assert gateway.generate_quiz("Physics", Language.EN) == []


def test_generate_quiz_empty_body(make_gateway):
    gateway, _ = make_gateway("   ")
    assert gateway.generate_quiz("Physics", Language.EN) == []


def test_generate_quiz_blocked_response(make_gateway):
    """response.text raises ValueError when the candidate was blocked."""
    gateway, _ = make_gateway(ValueError("no candidates"))
    assert gateway.generate_quiz("Physics", Language.EN) == []


def test_generate_quiz_not_json(make_gateway):
    gateway, _ = make_gateway("Here are your questions: 1. ...")
    assert gateway.generate_quiz("Physics", Language.EN) == []


def test_generate_quiz_answer_index_out_of_range(make_gateway):
    """One bad question rejects the whole quiz."""
    items = [dict(q) for q in QUIZ_ITEMS]
    items[2]["correctAnswer"] = 4
    gateway, _ = make_gateway(items)
    assert gateway.generate_quiz("Physics", Language.EN) == []


def test_generate_quiz_missing_field(make_gateway):
    items = [dict(q) for q in QUIZ_ITEMS]
    del items[0]["explanation"]
    gateway, _ = make_gateway(items)
    assert gateway.generate_quiz("Physics", Language.EN) == []


def test_generate_quiz_wrong_count(make_gateway):
    gateway, _ = make_gateway(QUIZ_ITEMS[:4])
    assert gateway.generate_quiz("Physics", Language.EN) == []


def test_generate_quiz_without_key_makes_no_call(make_gateway):
    gateway, factory = make_gateway(QUIZ_ITEMS, api_key="")
    assert gateway.generate_quiz("Physics", Language.EN) == []
    assert factory.created == []


def test_model_factory_failure_is_absorbed(make_gateway):
    gateway, _ = make_gateway(QUIZ_ITEMS)

    def broken_factory(name, **kwargs):
        raise RuntimeError("invalid schema")

    gateway._model_factory = broken_factory
    assert gateway.generate_quiz("Physics", Language.EN) == []


# --- chat_with_tutor ---


def test_chat_returns_reply(make_gateway):
    gateway, factory = make_gateway("Photosynthesis turns light into sugar 🌱")
    reply = gateway.chat_with_tutor([], "What is photosynthesis?", Language.EN)
    assert reply == "Photosynthesis turns light into sugar 🌱"
    assert factory.requests[0] == ("What is photosynthesis?", {"timeout": 5.0})
    assert "EthioLearn AI" in factory.created[0][1]["system_instruction"]
    assert "generation_config" not in factory.created[0][1]


def test_chat_passes_history(make_gateway):
    gateway, factory = make_gateway("Sure!")
    history = [
        ChatMessage(role=ChatRole.USER, text="Hi"),
        ChatMessage(role=ChatRole.ASSISTANT, text="Hello!"),
    ]
    gateway.chat_with_tutor(history, "Explain gravity", Language.AM)
    assert factory.history == [
        {"role": "user", "parts": ["Hi"]},
        {"role": "model", "parts": ["Hello!"]},
    ]
    assert "Amharic" in factory.created[0][1]["system_instruction"]


def test_chat_failure_returns_apology(make_gateway):
    gateway, _ = make_gateway(error=DeadlineExceeded("timeout"))
    assert gateway.chat_with_tutor([], "Hello", Language.EN) == APOLOGY


def test_chat_empty_reply_returns_apology(make_gateway):
    gateway, _ = make_gateway("")
    reply = gateway.chat_with_tutor([], "Hello", Language.EN)
    assert reply == APOLOGY
    assert len(reply) > 0


def test_chat_generic_exception_returns_apology(make_gateway):
    gateway, _ = make_gateway(error=ConnectionError("reset"))
    assert gateway.chat_with_tutor([], "Hello", Language.EN) == APOLOGY


def test_history_drops_leading_assistant_turns():
    history = [
        ChatMessage(role=ChatRole.ASSISTANT, text="Welcome"),
        ChatMessage(role=ChatRole.USER, text="Hi"),
        ChatMessage(role=ChatRole.ASSISTANT, text="Hello"),
    ]
    contents = _history_contents(history)
    assert [c["role"] for c in contents] == ["user", "model"]


# --- analyze_question ---


def test_analyze_question_returns_report(make_gateway):
    gateway, factory = make_gateway(ANALYSIS)
    result = gateway.analyze_question("Which organelle makes ATP?", Language.EN)
    assert result.difficulty is Difficulty.MEDIUM
    assert result.success_rate == 62.5
    assert result.topics == ["Cell biology", "Respiration"]
    assert factory.created[0][1]["generation_config"]["response_schema"] is ANALYSIS_SCHEMA
    assert "Which organelle makes ATP?" in factory.requests[0][0]


def test_analyze_question_national_exam_difficulty(make_gateway):
    gateway, _ = make_gateway(dict(ANALYSIS, difficulty="National Exam"))
    assert gateway.analyze_question("q", Language.EN).difficulty is Difficulty.NATIONAL_EXAM


def test_analyze_question_rate_out_of_range(make_gateway):
    gateway, _ = make_gateway(dict(ANALYSIS, successRate=140))
    assert gateway.analyze_question("q", Language.EN) is None


def test_analyze_question_unknown_difficulty(make_gateway):
    gateway, _ = make_gateway(dict(ANALYSIS, difficulty="Impossible"))
    assert gateway.analyze_question("q", Language.EN) is None


def test_analyze_question_partial_object(make_gateway):
    partial = {k: v for k, v in ANALYSIS.items() if k != "topics"}
    gateway, _ = make_gateway(partial)
    assert gateway.analyze_question("q", Language.EN) is None


def test_analyze_question_blank_text_makes_no_call(make_gateway):
    gateway, factory = make_gateway(ANALYSIS)
    assert gateway.analyze_question("   ", Language.EN) is None
    assert factory.requests == []


# --- generate_study_plan ---


def test_generate_study_plan(make_gateway):
    gateway, factory = make_gateway(PLAN_ITEMS)
    tasks = gateway.generate_study_plan("pass national exam", ["math", "physics"], Language.EN)
    assert [t.id for t in tasks] == ["t1", "t2", "t3"]
    assert all(t.duration_minutes > 0 for t in tasks)
    assert all(isinstance(t.type, TaskType) for t in tasks)
    prompt = factory.requests[0][0]
    assert "pass national exam" in prompt
    assert "math, physics" in prompt


def test_generate_study_plan_zero_duration(make_gateway):
    items = [dict(t) for t in PLAN_ITEMS]
    items[1]["durationMinutes"] = 0
    gateway, _ = make_gateway(items)
    assert gateway.generate_study_plan("goal", ["math"], Language.EN) == []


def test_generate_study_plan_bad_type(make_gateway):
    items = [dict(t) for t in PLAN_ITEMS]
    items[0]["type"] = "podcast"
    gateway, _ = make_gateway(items)
    assert gateway.generate_study_plan("goal", ["math"], Language.EN) == []


def test_generate_study_plan_too_many_tasks(make_gateway):
    items = [dict(PLAN_ITEMS[0], id=f"t{i}") for i in range(6)]
    gateway, _ = make_gateway(items)
    assert gateway.generate_study_plan("goal", ["math"], Language.EN) == []


def test_generate_study_plan_not_an_array(make_gateway):
    gateway, _ = make_gateway(json.dumps(PLAN_ITEMS[0]))
    assert gateway.generate_study_plan("goal", ["math"], Language.EN) == []


def test_generate_study_plan_blank_goals(make_gateway):
    gateway, factory = make_gateway(PLAN_ITEMS)
    assert gateway.generate_study_plan("  ", ["math"], Language.EN) == []
    assert factory.requests == []


def test_generate_study_plan_unknown_subject(make_gateway):
    items = [dict(t) for t in PLAN_ITEMS]
    items[0]["subjectId"] = "astrology"
    gateway, _ = make_gateway(items)
    assert gateway.generate_study_plan("goal", ["math"], Language.EN) == []


def test_generate_study_plan_missing_is_completed(make_gateway):
    items = [dict(t) for t in PLAN_ITEMS]
    del items[0]["isCompleted"]
    gateway, _ = make_gateway(items)
    assert gateway.generate_study_plan("goal", ["math"], Language.EN) == []


def test_generate_study_plan_duplicate_ids(make_gateway):
    """Task ids key the completion toggle, so they must be unique."""
    items = [dict(t, id="1") for t in PLAN_ITEMS]
    gateway, _ = make_gateway(items)
    assert gateway.generate_study_plan("goal", ["math"], Language.EN) == []


# --- wrong JSON types are rejected, not coerced ---


def test_generate_quiz_string_answer_index(make_gateway):
    items = [dict(q) for q in QUIZ_ITEMS]
    items[0]["correctAnswer"] = "2"
    gateway, _ = make_gateway(items)
    assert gateway.generate_quiz("Physics", Language.EN) == []


def test_generate_quiz_duplicate_ids(make_gateway):
    items = [dict(q, id=1) for q in QUIZ_ITEMS]
    gateway, _ = make_gateway(items)
    assert gateway.generate_quiz("Physics", Language.EN) == []


def test_analyze_question_string_success_rate(make_gateway):
    gateway, _ = make_gateway(dict(ANALYSIS, successRate="55"))
    assert gateway.analyze_question("q", Language.EN) is None


def test_analyze_question_integer_success_rate_accepted(make_gateway):
    gateway, _ = make_gateway(dict(ANALYSIS, successRate=55))
    assert gateway.analyze_question("q", Language.EN).success_rate == 55.0


def test_generate_study_plan_string_duration(make_gateway):
    items = [dict(t) for t in PLAN_ITEMS]
    items[0]["durationMinutes"] = "30"
    gateway, _ = make_gateway(items)
    assert gateway.generate_study_plan("goal", ["math"], Language.EN) == []


def test_generate_study_plan_string_is_completed(make_gateway):
    items = [dict(t) for t in PLAN_ITEMS]
    items[0]["isCompleted"] = "false"
    gateway, _ = make_gateway(items)
    assert gateway.generate_study_plan("goal", ["math"], Language.EN) == []


def test_structured_call_failure_kinds(make_gateway):
    gateway, factory = make_gateway("{not json")
    with pytest.raises(MalformedResponseError):
        gateway._structured_call("op", "p", ANALYSIS_SCHEMA, _ANALYSIS_ADAPTER)

    factory.reply = json.dumps(dict(ANALYSIS, successRate="55"))
    with pytest.raises(SchemaMismatchError):
        gateway._structured_call("op", "p", ANALYSIS_SCHEMA, _ANALYSIS_ADAPTER)


# --- list_models ---


class _FakeModelInfo:
    def __init__(self, name, methods):
        self.name = name
        self.supported_generation_methods = methods


def test_list_models_filters_and_sorts(monkeypatch):
    models = [
        _FakeModelInfo("models/gemini-1.5-flash", ["generateContent"]),
        _FakeModelInfo("models/embedding-001", ["embedContent"]),
        _FakeModelInfo("models/gemini-2.5-flash", ["generateContent", "countTokens"]),
    ]
    monkeypatch.setattr("ethiolearn.gateway.genai.list_models", lambda: iter(models))
    assert list_models() == ["models/gemini-2.5-flash", "models/gemini-1.5-flash"]


def test_list_models_error(monkeypatch):
    def boom():
        raise PermissionDenied("no key")

    monkeypatch.setattr("ethiolearn.gateway.genai.list_models", boom)
    assert list_models() == []
