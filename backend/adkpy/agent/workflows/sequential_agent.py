"""
Sequential workflow agent

Runs its sub-agents one after another against the shared conversation
history: each child sees everything the previous children appended.
"""

import logging
from contextlib import aclosing
from typing import AsyncGenerator

from ..base_agent import BaseAgent
from ..core.runtime.context import InvocationContext
from ..core.runtime.models import LLMResponse

logger = logging.getLogger(__name__)


class SequentialAgent(BaseAgent):
    """Runs sub-agents in declaration order"""

    async def _run_async_impl(self, ctx: InvocationContext) -> AsyncGenerator[LLMResponse, None]:
        for index, agent in enumerate(self.sub_agents):
            logger.debug(f"SequentialAgent {self.name}: step {index + 1}/{len(self.sub_agents)} -> {agent.name}")
            child_ctx = ctx.for_agent(agent)
            try:
                async with aclosing(agent.run_async(child_ctx)) as responses:
                    async for response in responses:
                        yield response
            except Exception as e:
                logger.error(f"SequentialAgent {self.name}: sub-agent {agent.name} failed: {e}")
                raise
            ctx.child_results[agent.name] = child_ctx.result
