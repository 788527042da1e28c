from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, AsyncGenerator, List, Optional

from ..runtime.config import LLMRequest
from ..runtime.models import LLMResponse
from ...exceptions import AgentError

if TYPE_CHECKING:
    from .connection import BaseLLMConnection


class ProviderNotConfigured(AgentError):
    """Raised when a provider is not properly configured (e.g., missing API key)."""


class ProviderError(AgentError):
    """Raised for provider-specific errors that should surface to callers."""

    def __init__(self, message: str, model: Optional[str] = None):
        super().__init__(message)
        self.model = model


class BaseLLM(ABC):
    """Provider-agnostic interface every model backend adapter satisfies.

    Implementations must not perform network calls during tests unless explicitly mocked.
    """

    def __init__(self, model: str) -> None:
        self.model = model

    @classmethod
    def supported_models(cls) -> List[str]:
        """Regex patterns of model identifiers this adapter serves, consumed by LLMRegistry."""
        return []

    @abstractmethod
    def generate_content_async(
        self,
        llm_request: LLMRequest,
        stream: bool = False,
    ) -> AsyncGenerator[LLMResponse, None]:
        """Issue one backend request and yield its responses.

        The generator is finite and not restartable. With ``stream=False`` it
        yields a single final response.
        """
        raise NotImplementedError

    @abstractmethod
    def connect(self, llm_request: LLMRequest) -> "BaseLLMConnection":
        """Open a duplex connection seeded with ``llm_request``."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"
