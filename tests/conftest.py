"""Shared test fixtures for convo_flow."""
import pytest
from typing import Any, Optional

from convo_flow.client.memory import InMemoryClient
from convo_flow.domain.models import create_step, suspending


def _facet(value: Optional[str]) -> Optional[dict]:
    return {"value": value} if value is not None else None


def build_context(
    content: Any = "hello",
    content_type: str = "text",
    classification: Optional[dict] = None,
    prediction: Optional[dict] = None,
    state: Optional[dict] = None,
    sender_role: Optional[str] = None,
    slots: Optional[dict] = None,
) -> dict:
    part = {
        "content_type": content_type,
        "content": content,
        "sender": {"id": "user-1"},
        "slots": slots or {},
    }
    if classification is not None:
        part["classification"] = classification
    if prediction is not None:
        part["predicted_next_message"] = prediction

    return {
        "current_conversation": {
            "messages": [{"sender_role": sender_role, "parts": [part]}],
            "state": state or {},
            "conversation_message_index_to_process": 0,
        },
        "users": {"user-1": {"id": "user-1"}, "user-2": {"id": "user-2"}},
        "execution_data": {"execution_id": "exec-1"},
    }


class StepRecorder:
    """Builds steps that record every capability call in order."""

    def __init__(self):
        self.calls = []

    def step(
        self,
        name: str,
        satisfied: bool = False,
        signal: Optional[str] = None,
        suspend: bool = False,
        next_stream: Optional[str] = None,
        fallback: bool = False,
        expects=(),
    ):
        def prompt():
            self.calls.append(("prompt", name))
            return signal

        def suspending_prompt(proceed):
            self.calls.append(("prompt", name))
            proceed(signal)

        def run_fallback():
            self.calls.append(("fallback", name))

        return create_step(
            satisfied=lambda: satisfied,
            prompt=suspending(suspending_prompt) if suspend else prompt,
            next=lambda: next_stream,
            extract_info=lambda part: self.calls.append(("extract", name)),
            expects=lambda: list(expects),
            fallback=run_fallback if fallback else None,
        )

    def count(self, kind: str, name: str) -> int:
        return self.calls.count((kind, name))

    def names(self, kind: str) -> list:
        return [name for call_kind, name in self.calls if call_kind == kind]


@pytest.fixture
def recorder() -> StepRecorder:
    return StepRecorder()


@pytest.fixture
def make_context():
    return build_context


@pytest.fixture
def make_client():
    def _make(**kwargs) -> InMemoryClient:
        return InMemoryClient(build_context(**kwargs))
    return _make


@pytest.fixture
def client(make_client) -> InMemoryClient:
    return make_client()


@pytest.fixture
def make_classification():
    def _make(base: str, sub: Optional[str] = None, style: Optional[str] = None) -> dict:
        classification = {"base_type": {"value": base, "confidence": 0.9}}
        if sub is not None:
            classification["sub_type"] = _facet(sub)
        if style is not None:
            classification["style"] = _facet(style)
        return classification
    return _make


@pytest.fixture
def make_prediction():
    def _make(
        direction: str = "output",
        base: str = "greeting",
        sub: str = "",
        confidence: float = 0.9,
        auto_fill_capable: bool = True,
    ) -> dict:
        return {
            "direction": {"value": direction},
            "base_type": {"value": base},
            "sub_type": {"value": sub},
            "overall_confidence": confidence,
            "predicted_response": {"auto_fill_capable": auto_fill_capable},
        }
    return _make
