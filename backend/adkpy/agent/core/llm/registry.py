"""
Registry mapping model identifiers to provider adapters

Model identifiers are matched by pattern (families of names), so resolution
is an ordered scan: the first registration whose pattern matches wins, and
registration order expresses provider precedence.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Callable, List, Optional, Pattern, Tuple, Type

from .base import BaseLLM
from ...exceptions import UnresolvedModelError

logger = logging.getLogger(__name__)

LLMFactory = Callable[[str], BaseLLM]


class LLMRegistry:
    """Append-only, ordered registry of (pattern, factory) pairs.

    Registration takes a lock; resolution reads an immutable snapshot, so
    readers are never blocked by a concurrent append.
    """

    def __init__(self) -> None:
        self._entries: Tuple[Tuple[Pattern[str], LLMFactory], ...] = ()
        self._lock = threading.Lock()

    def register(self, model_name_regex: str, factory: LLMFactory) -> None:
        """Register a factory for model names matching ``model_name_regex``"""
        pattern = re.compile(model_name_regex)
        with self._lock:
            self._entries = self._entries + ((pattern, factory),)
        logger.debug(f"Registered LLM pattern {model_name_regex!r} -> {getattr(factory, '__name__', factory)}")

    def register_llm(self, llm_class: Type[BaseLLM]) -> None:
        """Register every pattern an adapter class declares as supported"""
        for pattern in llm_class.supported_models():
            self.register(pattern, llm_class)

    def resolve(self, model: str) -> Optional[LLMFactory]:
        for pattern, factory in self._entries:
            if pattern.search(model):
                return factory
        return None

    def new_llm(self, model: str) -> BaseLLM:
        """Resolve ``model`` and construct its adapter"""
        factory = self.resolve(model)
        if factory is None:
            logger.error(f"No registered provider matches model {model!r}")
            raise UnresolvedModelError(model)
        llm = factory(model)
        logger.info(f"Resolved model {model!r} to {type(llm).__name__}")
        return llm

    @property
    def patterns(self) -> List[str]:
        return [pattern.pattern for pattern, _ in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def log_registered_models(self) -> None:
        logger.info("Registered LLM models:")
        for pattern, factory in self._entries:
            logger.info(f"  - Pattern: {pattern.pattern} ({getattr(factory, '__name__', factory)})")


def create_default_registry() -> LLMRegistry:
    """Build a registry preloaded with the built-in adapters.

    Prefix-routed providers are registered before the bare model families so
    that ``openrouter/openai/gpt-4o`` never reaches the OpenAI adapter.
    """
    from .openai_client import OpenAILLM
    from .providers import AnthropicLLM, GroqLLM, MoonshotLLM, OllamaLLM, OpenRouterLLM

    registry = LLMRegistry()
    for llm_class in (OpenRouterLLM, GroqLLM, OllamaLLM, OpenAILLM, AnthropicLLM, MoonshotLLM):
        registry.register_llm(llm_class)
    return registry


_default_registry: Optional[LLMRegistry] = None
_default_lock = threading.Lock()


def get_default_registry() -> LLMRegistry:
    """Get the process-wide registry used when none is injected"""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = create_default_registry()
    return _default_registry
