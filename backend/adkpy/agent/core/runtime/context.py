"""
Invocation and tool contexts

An InvocationContext is created per top-level run and handed down the agent
tree. Sequential and loop agents pass a child view that shares the history
list; parallel agents hand each branch an independent copy. A ToolContext
wraps the invocation context for one tool call and adds an auth handle and a
free-form parameter bag.
"""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from .config import RunConfig
from .models import Message, RunResult, ensure_messages
from ...exceptions import AgentError

if TYPE_CHECKING:
    from ...base_agent import BaseAgent
    from ..auth.handler import AuthHandler
    from ...memory.memory_service import BaseMemoryService, SearchMemoryOptions, SearchMemoryResponse
    from ...memory.session_service import BaseSessionService


class LLMCallsLimitExceededError(AgentError):
    """Invocation made more model calls than RunConfig.max_llm_calls allows."""

    def __init__(self, limit: int):
        super().__init__(f"Max number of LLM calls limit of {limit} exceeded")
        self.limit = limit


@dataclass
class RunOptions:
    """Input of BaseAgent.run / run_streaming"""
    messages: Sequence[Any] = field(default_factory=list)
    config: Optional[RunConfig] = None
    session_id: Optional[str] = None
    session_service: Optional["BaseSessionService"] = None
    memory_service: Optional["BaseMemoryService"] = None


@dataclass
class EventActions:
    """Signals raised by agents or tools during an invocation"""
    escalate: bool = False


@dataclass
class _CallCounter:
    count: int = 0


@dataclass
class InvocationContext:
    agent: "BaseAgent"
    messages: List[Message] = field(default_factory=list)
    run_config: RunConfig = field(default_factory=RunConfig)
    session_id: Optional[str] = None
    invocation_id: str = field(default_factory=lambda: f"e-{uuid.uuid4()}")
    branch: Optional[str] = None
    actions: EventActions = field(default_factory=EventActions)
    memory_service: Optional["BaseMemoryService"] = None
    _llm_calls: _CallCounter = field(default_factory=_CallCounter, repr=False)
    # Per-agent outcome, filled in by BaseAgent.run_async
    metadata: Dict[str, Any] = field(default_factory=dict)
    child_results: Dict[str, RunResult] = field(default_factory=dict)
    result: Optional[RunResult] = None

    @classmethod
    def from_options(cls, agent: "BaseAgent", options: RunOptions,
                     history: Optional[Sequence[Message]] = None) -> "InvocationContext":
        messages = list(history or []) + ensure_messages(options.messages)
        return cls(
            agent=agent,
            messages=messages,
            run_config=options.config or RunConfig(),
            session_id=options.session_id,
            memory_service=options.memory_service,
        )

    def for_agent(self, agent: "BaseAgent") -> "InvocationContext":
        """Child view sharing history and actions (sequential/loop scheduling)"""
        return dataclasses.replace(self, agent=agent, metadata={}, child_results={}, result=None)

    def branch_copy(self, agent: "BaseAgent") -> "InvocationContext":
        """Independent copy for a parallel branch; history is copied, not shared"""
        branch = f"{self.branch}.{agent.name}" if self.branch else f"{self.agent.name}.{agent.name}"
        return dataclasses.replace(
            self,
            agent=agent,
            messages=list(self.messages),
            actions=EventActions(),
            branch=branch,
            metadata={},
            child_results={},
            result=None,
        )

    def append_message(self, message: Message) -> None:
        self.messages.append(message)

    def escalate(self) -> None:
        self.actions.escalate = True

    def increment_llm_call_count(self) -> int:
        self._llm_calls.count += 1
        limit = self.run_config.max_llm_calls
        if limit is not None and self._llm_calls.count > limit:
            raise LLMCallsLimitExceededError(limit)
        return self._llm_calls.count


class ToolContext:
    """Context for tool execution"""

    def __init__(
        self,
        invocation_context: InvocationContext,
        auth: Optional["AuthHandler"] = None,
        parameters: Optional[Dict[str, Any]] = None,
        function_call_id: Optional[str] = None,
    ):
        self.invocation_context = invocation_context
        self.auth = auth
        self.parameters: Dict[str, Any] = dict(parameters or {})
        self.function_call_id = function_call_id
        self.escalated = False

    @property
    def session_id(self) -> Optional[str]:
        return self.invocation_context.session_id

    @property
    def run_config(self) -> RunConfig:
        return self.invocation_context.run_config

    @property
    def agent_name(self) -> str:
        return self.invocation_context.agent.name

    def get_parameter(self, name: str, default: Any = None) -> Any:
        return self.parameters[name] if name in self.parameters else default

    def set_parameter(self, name: str, value: Any) -> None:
        self.parameters[name] = value

    async def search_memory(self, query: str,
                            options: Optional["SearchMemoryOptions"] = None) -> "SearchMemoryResponse":
        """Search the memory service attached to the run"""
        memory_service = self.invocation_context.memory_service
        if memory_service is None:
            raise ValueError("No memory service is available for this run")
        return await memory_service.search_memory(query, options)

    def escalate(self) -> None:
        """Ask the enclosing loop agent to stop"""
        self.escalated = True
        self.invocation_context.escalate()
