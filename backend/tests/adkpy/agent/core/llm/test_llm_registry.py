import threading

import pytest

from adkpy.agent.core.llm.openai_client import OpenAILLM
from adkpy.agent.core.llm.providers import (
    AnthropicLLM,
    GroqLLM,
    MoonshotLLM,
    OllamaLLM,
    OpenRouterLLM,
)
from adkpy.agent.core.llm.registry import LLMRegistry, create_default_registry
from adkpy.agent.exceptions import UnresolvedModelError


def _factory(label):
    def make(model):
        return (label, model)
    make.__name__ = label
    return make


def test_first_registration_wins():
    registry = LLMRegistry()
    p1, p2 = _factory("p1"), _factory("p2")
    registry.register(r"^gpt-.*", p1)
    registry.register(r"^gpt-4.*", p2)
    assert registry.resolve("gpt-4o") is p1


def test_resolution_is_stable_across_calls():
    registry = LLMRegistry()
    p1, p2 = _factory("p1"), _factory("p2")
    registry.register(r"model", p1)
    registry.register(r"model", p2)
    assert [registry.resolve("my-model") for _ in range(5)] == [p1] * 5


def test_resolve_returns_none_when_nothing_matches():
    registry = LLMRegistry()
    registry.register(r"^gpt-.*", _factory("p1"))
    assert registry.resolve("claude-3") is None


def test_new_llm_raises_for_unknown_model():
    registry = LLMRegistry()
    with pytest.raises(UnresolvedModelError) as exc_info:
        registry.new_llm("mystery-model")
    assert exc_info.value.model == "mystery-model"
    assert "mystery-model" in str(exc_info.value)


def test_new_llm_constructs_with_model_id():
    registry = LLMRegistry()
    registry.register(r"^fake-", _factory("fake"))
    assert registry.new_llm("fake-1") == ("fake", "fake-1")


def test_register_llm_uses_supported_models():
    registry = LLMRegistry()
    registry.register_llm(MoonshotLLM)
    assert registry.patterns == MoonshotLLM.supported_models()
    assert registry.resolve("kimi-k2") is MoonshotLLM


@pytest.mark.parametrize(
    "model, expected",
    [
        ("gpt-4o", OpenAILLM),
        ("gpt-5-mini", OpenAILLM),
        ("o3", OpenAILLM),
        ("o4-mini", OpenAILLM),
        ("claude-3-5-sonnet", AnthropicLLM),
        ("kimi-k2-0711-preview", MoonshotLLM),
        ("moonshot-v1-8k", MoonshotLLM),
        ("groq/llama-3.3-70b-versatile", GroqLLM),
        ("ollama/llama3", OllamaLLM),
        ("openrouter/openai/gpt-4o", OpenRouterLLM),
    ],
)
def test_default_registry_routes_models(model, expected):
    registry = create_default_registry()
    llm = registry.new_llm(model)
    assert type(llm) is expected
    assert llm.model == model


def test_prefix_is_stripped_on_the_wire():
    llm = create_default_registry().new_llm("openrouter/openai/gpt-4o")
    assert llm.wire_model == "openai/gpt-4o"


def test_concurrent_registration_keeps_every_entry():
    registry = LLMRegistry()

    def worker(n):
        for i in range(50):
            registry.register(rf"^m{n}-{i}$", _factory(f"f{n}-{i}"))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(registry) == 200
    assert registry.resolve("m3-49") is not None
