import json

import pytest

from ethiolearn.gateway import AIGateway


QUIZ_ITEMS = [
    {
        "id": i + 1,
        "question": f"Question {i + 1}?",
        "options": ["A", "B", "C", "D"],
        "correctAnswer": 0,
        "explanation": f"Because A ({i + 1}).",
    }
    for i in range(5)
]

PLAN_ITEMS = [
    {"id": "t1", "subjectId": "math", "title": "Quadratic equations", "durationMinutes": 30,
     "isCompleted": False, "type": "practice"},
    {"id": "t2", "subjectId": "physics", "title": "Newton's laws", "durationMinutes": 45,
     "isCompleted": False, "type": "reading"},
    {"id": "t3", "subjectId": "biology", "title": "Cell review quiz", "durationMinutes": 20,
     "isCompleted": False, "type": "quiz"},
]

ANALYSIS = {
    "source": "Grade 11 Biology, Unit 3, Page 45",
    "difficulty": "Medium",
    "successRate": 62.5,
    "similarQuestions": ["What organelle makes proteins?"],
    "topics": ["Cell biology", "Respiration"],
    "explanation": "Mitochondria produce ATP.",
}


class FakeResponse:
    def __init__(self, text):
        self._text = text

    @property
    def text(self):
        if isinstance(self._text, Exception):
            raise self._text
        return self._text


class FakeChat:
    def __init__(self, factory, history):
        self.factory = factory
        factory.history = history

    def send_message(self, message, request_options=None):
        self.factory.requests.append((message, request_options))
        if self.factory.error is not None:
            raise self.factory.error
        return FakeResponse(self.factory.reply)


class FakeModel:
    def __init__(self, factory):
        self.factory = factory

    def generate_content(self, prompt, request_options=None):
        self.factory.requests.append((prompt, request_options))
        if self.factory.error is not None:
            raise self.factory.error
        return FakeResponse(self.factory.reply)

    def start_chat(self, history=None):
        return FakeChat(self.factory, history)


class FakeModelFactory:
    """Stands in for genai.GenerativeModel and records every call."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.created = []
        self.requests = []
        self.history = None

    def __call__(self, model_name, **kwargs):
        self.created.append((model_name, kwargs))
        return FakeModel(self)


@pytest.fixture(autouse=True)
def no_genai_configure(monkeypatch):
    monkeypatch.setattr("ethiolearn.gateway.genai.configure", lambda **kwargs: None)


@pytest.fixture
def make_gateway():
    """Build (gateway, factory) replying with the given text or raising error."""

    def _make(reply="", error=None, api_key="test-key"):
        if not isinstance(reply, str) and not isinstance(reply, Exception):
            reply = json.dumps(reply)
        factory = FakeModelFactory(reply=reply, error=error)
        gateway = AIGateway(api_key=api_key, model_name="gemini-test", timeout=5.0, model_factory=factory)
        return gateway, factory

    return _make
