# adkpy Agent Module
# Agent tree, model-backed agents and composite workflows

from .base_agent import BaseAgent
from .llm_agent import Agent
from .workflows import LoopAgent, ParallelAgent, SequentialAgent
from .core.llm.base import BaseLLM, ProviderError, ProviderNotConfigured
from .core.llm.registry import LLMRegistry, create_default_registry, get_default_registry
from .core.runtime.config import LLMRequest, LLMRequestConfig, RunConfig, StreamingMode
from .core.runtime.context import InvocationContext, LLMCallsLimitExceededError, RunOptions, ToolContext
from .core.runtime.models import LLMResponse, Message, MessageRole, RunResult
from .memory.memory_service import InMemoryMemoryService, SearchMemoryOptions
from .memory.session_service import InMemorySessionService
from .tools import BaseTool, ExitLoopTool, FunctionTool, GoogleSearchTool

__all__ = [
    'BaseAgent',
    'Agent',
    'SequentialAgent',
    'ParallelAgent',
    'LoopAgent',
    'BaseLLM',
    'ProviderError',
    'ProviderNotConfigured',
    'LLMRegistry',
    'create_default_registry',
    'get_default_registry',
    'LLMRequest',
    'LLMRequestConfig',
    'RunConfig',
    'StreamingMode',
    'InvocationContext',
    'LLMCallsLimitExceededError',
    'RunOptions',
    'ToolContext',
    'LLMResponse',
    'Message',
    'MessageRole',
    'RunResult',
    'InMemoryMemoryService',
    'SearchMemoryOptions',
    'InMemorySessionService',
    'BaseTool',
    'ExitLoopTool',
    'FunctionTool',
    'GoogleSearchTool',
]
