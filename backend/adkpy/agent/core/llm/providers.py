"""
OpenAI-compatible provider adapters

Each adapter differs from OpenAILLM only in how its client is built and in
the model-name patterns it declares. Prefix-routed providers take
identifiers such as ``groq/llama-3.3-70b-versatile`` and strip the prefix
before calling the backend.
"""

from __future__ import annotations

from typing import Any, List

from .openai_client import OpenAILLM
from ...clients import (
    get_anthropic_client,
    get_groq_client,
    get_moonshot_client,
    get_ollama_client,
    get_openrouter_client,
)


class AnthropicLLM(OpenAILLM):
    """Claude models through Anthropic's OpenAI-compatible endpoint."""

    provider_name = "Anthropic"

    @classmethod
    def supported_models(cls) -> List[str]:
        return [r"^claude-.*"]

    def _create_client(self) -> Any:
        return get_anthropic_client()


class GroqLLM(OpenAILLM):
    provider_name = "Groq"
    model_prefix = "groq/"

    @classmethod
    def supported_models(cls) -> List[str]:
        return [r"^groq/.+"]

    def _create_client(self) -> Any:
        return get_groq_client()


class MoonshotLLM(OpenAILLM):
    """Adapter for Moonshot (Kimi) OpenAI-compatible API."""

    provider_name = "Moonshot"

    @classmethod
    def supported_models(cls) -> List[str]:
        return [r"^kimi-.*", r"^moonshot-v1-.*"]

    def _create_client(self) -> Any:
        return get_moonshot_client()


class OllamaLLM(OpenAILLM):
    """Adapter for Ollama local OpenAI-compatible API."""

    provider_name = "Ollama"
    model_prefix = "ollama/"

    @classmethod
    def supported_models(cls) -> List[str]:
        return [r"^ollama/.+"]

    def _create_client(self) -> Any:
        return get_ollama_client()


class OpenRouterLLM(OpenAILLM):
    provider_name = "OpenRouter"
    model_prefix = "openrouter/"

    @classmethod
    def supported_models(cls) -> List[str]:
        return [r"^openrouter/.+"]

    def _create_client(self) -> Any:
        return get_openrouter_client()
