"""
Global pytest configuration and fixtures for adkpy tests
"""

import dataclasses
from typing import List, Sequence, Union

import pytest

from adkpy.agent.core.llm.base import BaseLLM
from adkpy.agent.core.llm.connection import StreamingLLMConnection
from adkpy.agent.core.runtime.models import LLMResponse

Turn = Union[LLMResponse, Sequence[LLMResponse], Exception]


class ScriptedLLM(BaseLLM):
    """Fake adapter replaying one scripted turn per generate call.

    A turn is a single response, a list of responses (streamed in order) or
    an exception to raise. Every request is recorded in ``requests``.
    """

    def __init__(self, turns: List[Turn], model: str = "fake-model"):
        super().__init__(model)
        self.turns = list(turns)
        self.requests = []
        self.stream_flags = []

    async def generate_content_async(self, llm_request, stream=False):
        self.requests.append(llm_request)
        self.stream_flags.append(stream)
        if not self.turns:
            raise AssertionError(f"Unexpected model call #{len(self.requests)}")
        turn = self.turns.pop(0)
        if isinstance(turn, Exception):
            raise turn
        items = [turn] if isinstance(turn, LLMResponse) else list(turn)
        for item in items:
            yield dataclasses.replace(item)

    def connect(self, llm_request):
        return StreamingLLMConnection(self, llm_request)


@pytest.fixture
def make_llm():
    """Factory for ScriptedLLM instances"""
    def _make(*turns: Turn, model: str = "fake-model") -> ScriptedLLM:
        return ScriptedLLM(list(turns), model=model)
    return _make


@pytest.fixture(autouse=True)
def clean_agent_env(monkeypatch):
    """Keep AGENT_* settings from the developer's shell out of the tests"""
    for var in ("AGENT_MAX_TOKENS", "AGENT_TEMPERATURE", "AGENT_MAX_TOOL_LOOPS", "AGENT_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    yield
