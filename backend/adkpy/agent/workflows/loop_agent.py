"""
Loop workflow agent

Repeats its sub-agents in order until the iteration cap is reached or a
termination signal is observed. Both are normal terminations.

Termination signals:
- the invocation was escalated (``ExitLoopTool`` or ``ToolContext.escalate()``)
- ``stop_condition(response)`` returned True for a final response
"""

import logging
from contextlib import aclosing
from typing import AsyncGenerator, Callable, Iterable, Optional

from ..base_agent import BaseAgent
from ..core.runtime.context import InvocationContext
from ..core.runtime.models import LLMResponse

logger = logging.getLogger(__name__)

StopCondition = Callable[[LLMResponse], bool]


class LoopAgent(BaseAgent):
    """Runs sub-agents in a loop"""

    def __init__(
        self,
        name: str,
        description: str = "",
        sub_agents: Optional[Iterable[BaseAgent]] = None,
        max_iterations: Optional[int] = None,
        stop_condition: Optional[StopCondition] = None,
    ):
        if max_iterations is not None and max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        super().__init__(name, description=description, sub_agents=sub_agents)
        self.max_iterations = max_iterations
        self.stop_condition = stop_condition

    async def _run_async_impl(self, ctx: InvocationContext) -> AsyncGenerator[LLMResponse, None]:
        iterations = 0
        stop_reason = "max_iterations"

        while self.max_iterations is None or iterations < self.max_iterations:
            iterations += 1
            logger.debug(f"LoopAgent {self.name}: iteration {iterations}")
            stop = False
            for agent in self.sub_agents:
                child_ctx = ctx.for_agent(agent)
                async with aclosing(agent.run_async(child_ctx)) as responses:
                    async for response in responses:
                        if (
                            not response.is_partial
                            and self.stop_condition is not None
                            and self.stop_condition(response)
                        ):
                            stop_reason = "stop_condition"
                            stop = True
                        yield response
                ctx.child_results[agent.name] = child_ctx.result
                if ctx.actions.escalate:
                    # Consumed here; escalation ends the innermost loop only
                    ctx.actions.escalate = False
                    stop_reason = "escalated"
                    stop = True
                if stop:
                    break
            if stop:
                break

        ctx.metadata["iterations"] = iterations
        ctx.metadata["stop_reason"] = stop_reason
        logger.info(f"LoopAgent {self.name}: stopped after {iterations} iteration(s) ({stop_reason})")
