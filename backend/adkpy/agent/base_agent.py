"""
Base Agent Interface for adkpy

This module provides the foundational interface for all agents: the named
agent tree (parent/child ownership, lookup) and the shared run contract that
model-backed and composite agents implement.

Callers use ``await agent.run(options)`` for one terminal RunResult or
``agent.run_streaming(options)`` for the lazy response stream. Parents drive
their children through ``child.run_async(ctx)``; subclasses implement
``_run_async_impl``.
"""

import logging
import re
from abc import ABC, abstractmethod
from contextlib import aclosing
from typing import AsyncGenerator, Iterable, List, Optional

from .core.runtime.context import InvocationContext, RunOptions
from .core.runtime.models import LLMResponse, Message, RunResult, ensure_messages
from .exceptions import (
    AlreadyParentedError,
    DuplicateSiblingNameError,
    InvalidAgentNameError,
    ReservedAgentNameError,
)

logger = logging.getLogger(__name__)

_AGENT_NAME_RE = re.compile(r"^[A-Za-z_]\w*$")

# Author name reserved for end-user input
USER_AUTHOR = "user"


def validate_agent_name(name: str) -> None:
    """Raise if ``name`` cannot be used as an agent name"""
    if not isinstance(name, str) or not _AGENT_NAME_RE.match(name):
        raise InvalidAgentNameError(
            f"Invalid agent name: {name!r}. Agent name must be a valid identifier "
            f"(letters, digits and underscores, not starting with a digit).",
            agent_name=name if isinstance(name, str) else None,
        )
    if name == USER_AUTHOR:
        raise ReservedAgentNameError(
            f"Agent name cannot be {USER_AUTHOR!r}; it is reserved for end-user input.",
            agent_name=name,
        )


class BaseAgent(ABC):
    """
    Base class for every agent in an execution tree

    An agent exclusively owns its ``sub_agents``; each sub-agent keeps a
    non-owning ``parent_agent`` reference that is set exactly once.
    """

    def __init__(self, name: str, description: str = "", sub_agents: Optional[Iterable["BaseAgent"]] = None):
        validate_agent_name(name)
        children = list(sub_agents or [])
        self._check_attachable(children, name)

        self.name = name
        self.description = description
        self.parent_agent: Optional[BaseAgent] = None
        self.sub_agents: List[BaseAgent] = []
        for child in children:
            self.add_sub_agent(child)

    @staticmethod
    def _check_attachable(children: List["BaseAgent"], parent_name: str) -> None:
        # Validated up front so a failing constructor never re-parents anything
        seen = set()
        for child in children:
            if child.parent_agent is not None:
                raise AlreadyParentedError(
                    f"Agent {child.name!r} already has a parent agent {child.parent_agent.name!r}",
                    agent_name=child.name,
                    parent_name=parent_name,
                )
            if child.name in seen:
                raise DuplicateSiblingNameError(
                    f"Agent {parent_name!r} already has a sub-agent named {child.name!r}",
                    agent_name=child.name,
                    parent_name=parent_name,
                )
            seen.add(child.name)

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def add_sub_agent(self, agent: "BaseAgent") -> "BaseAgent":
        """Attach ``agent`` as the last child of this agent. Returns self."""
        if agent.parent_agent is not None:
            raise AlreadyParentedError(
                f"Agent {agent.name!r} already has a parent agent {agent.parent_agent.name!r}",
                agent_name=agent.name,
                parent_name=self.name,
            )
        if self.find_sub_agent(agent.name) is not None:
            raise DuplicateSiblingNameError(
                f"Agent {self.name!r} already has a sub-agent named {agent.name!r}",
                agent_name=agent.name,
                parent_name=self.name,
            )
        self.sub_agents.append(agent)
        agent.parent_agent = self
        return self

    def find_sub_agent(self, name: str) -> Optional["BaseAgent"]:
        """Find a direct child by name"""
        for agent in self.sub_agents:
            if agent.name == name:
                return agent
        return None

    def find_agent(self, name: str) -> Optional["BaseAgent"]:
        """Depth-first search of this subtree, self first"""
        if self.name == name:
            return self
        for agent in self.sub_agents:
            found = agent.find_agent(name)
            if found is not None:
                return found
        return None

    @property
    def root_agent(self) -> "BaseAgent":
        agent = self
        while agent.parent_agent is not None:
            agent = agent.parent_agent
        return agent

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def run(self, options: Optional[RunOptions] = None) -> RunResult:
        """Run to completion and return the terminal result"""
        options = options or RunOptions()
        ctx = await self._create_invocation_context(options)
        async with aclosing(self.run_async(ctx)) as responses:
            async for _ in responses:
                pass
        await self._save_session(options, ctx)
        return ctx.result

    async def run_streaming(self, options: Optional[RunOptions] = None) -> AsyncGenerator[LLMResponse, None]:
        """Run and yield every response (partial and final) as it is produced"""
        options = options or RunOptions()
        ctx = await self._create_invocation_context(options)
        async with aclosing(self.run_async(ctx)) as responses:
            async for response in responses:
                yield response
        await self._save_session(options, ctx)

    async def run_async(self, ctx: InvocationContext) -> AsyncGenerator[LLMResponse, None]:
        """Entry point used by parent agents; ``ctx.agent`` must be this agent."""
        start = len(ctx.messages)
        final: Optional[LLMResponse] = None
        logger.info(f"Agent {self.name} starting (invocation {ctx.invocation_id})")
        async with aclosing(self._run_async_impl(ctx)) as responses:
            async for response in responses:
                if response.author is None:
                    response.author = self.name
                if not response.is_partial:
                    final = response
                yield response
        ctx.result = RunResult(
            agent_name=self.name,
            response=final,
            messages=list(ctx.messages[start:]),
            children=dict(ctx.child_results),
            metadata=dict(ctx.metadata),
        )
        logger.info(f"Agent {self.name} finished")

    @abstractmethod
    def _run_async_impl(self, ctx: InvocationContext) -> AsyncGenerator[LLMResponse, None]:
        """Agent behaviour; an async generator of responses"""
        raise NotImplementedError

    async def _create_invocation_context(self, options: RunOptions) -> InvocationContext:
        history: List[Message] = []
        if options.session_service is not None and options.session_id:
            history = await options.session_service.list_messages(options.session_id)
            logger.debug(f"Loaded {len(history)} messages from session {options.session_id}")
        return InvocationContext.from_options(self, options, history=history)

    async def _save_session(self, options: RunOptions, ctx: InvocationContext) -> None:
        if options.session_service is None or not options.session_id:
            return
        new_messages = ensure_messages(options.messages)
        if ctx.result is not None:
            new_messages.extend(ctx.result.messages)
        await options.session_service.append_messages(options.session_id, new_messages)
        logger.debug(f"Appended {len(new_messages)} messages to session {options.session_id}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
