"""
Async OpenAI-compatible client factories for every supported backend.

Each factory reads its credentials from the environment (after loading .env)
and raises ValueError when they are missing; adapters normalize that to
ProviderNotConfigured.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from openai import AsyncOpenAI

load_dotenv(override=False)


def get_openai_client(api_key: Optional[str] = None, base_url: Optional[str] = None,
                      organization: Optional[str] = None) -> AsyncOpenAI:
    """
    Initializes and returns an AsyncOpenAI client configured for OpenAI's API.
    """
    api_key = api_key or os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ValueError("OPENAI_API_KEY environment variable is not set.")

    return AsyncOpenAI(
        api_key=api_key,
        base_url=base_url or os.getenv("OPENAI_BASE_URL") or "https://api.openai.com/v1",
        organization=organization or os.getenv("OPENAI_ORG_ID"),
    )


def get_anthropic_client() -> AsyncOpenAI:
    """
    Initializes and returns a client for Anthropic's OpenAI-compatible API (Claude).
    """
    anthropic_api_key = os.getenv("ANTHROPIC_API_KEY")
    if not anthropic_api_key:
        raise ValueError("ANTHROPIC_API_KEY environment variable is not set.")

    return AsyncOpenAI(
        api_key=anthropic_api_key,
        base_url="https://api.anthropic.com/v1",
    )


def get_groq_client() -> AsyncOpenAI:
    """
    Initializes and returns a client configured for Groq's API.
    """
    groq_api_key = os.getenv("GROQ_API_KEY")
    if not groq_api_key:
        raise ValueError("GROQ_API_KEY environment variable is not set.")

    return AsyncOpenAI(
        api_key=groq_api_key,
        # OpenAI-compatible endpoint as per Groq docs
        base_url="https://api.groq.com/openai/v1",
    )


def get_moonshot_client() -> AsyncOpenAI:
    """
    Initializes and returns a client configured for Moonshot's API.
    """
    moonshot_api_key = os.getenv("MOONSHOT_API_KEY")
    if not moonshot_api_key:
        raise ValueError("MOONSHOT_API_KEY environment variable is not set.")

    return AsyncOpenAI(
        api_key=moonshot_api_key,
        base_url="https://api.moonshot.ai/v1",
    )


def get_openrouter_client() -> AsyncOpenAI:
    """
    Initializes and returns a client configured for OpenRouter.
    """
    openrouter_api_key = os.getenv("OPENROUTER_API_KEY")
    if not openrouter_api_key:
        raise ValueError("OPENROUTER_API_KEY environment variable is not set.")

    return AsyncOpenAI(
        api_key=openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
        default_headers={
            "X-Title": os.getenv("OPENROUTER_APP_TITLE", "adkpy"),
        },
    )


def get_ollama_client() -> AsyncOpenAI:
    """
    Initializes and returns a client configured for Ollama's local API.

    Uses OLLAMA_URL environment variable
    """
    ollama_url = os.getenv("OLLAMA_URL")
    if not ollama_url:
        raise ValueError("OLLAMA_URL environment variable is not set. Example: http://localhost:11434/v1")

    return AsyncOpenAI(
        api_key="ollama",  # Ollama uses a fixed API key
        base_url=ollama_url,
    )
