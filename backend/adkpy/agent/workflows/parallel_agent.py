"""
Parallel workflow agent

Each sub-agent runs as its own asyncio task against an independent copy of
the conversation history. Branch output is merged through a single queue:
order within a branch is preserved, there is no ordering across branches.

Failure policy is cancel-on-first-failure: the first branch error cancels
and awaits every other branch, then propagates unchanged. Closing the merged
stream early cancels all branches as well. When every branch completes, the
messages each branch produced are appended to the parent history in
sub-agent declaration order.
"""

import asyncio
import logging
from contextlib import aclosing
from typing import AsyncGenerator, List, Optional, Tuple

from ..base_agent import BaseAgent
from ..core.runtime.context import InvocationContext
from ..core.runtime.models import LLMResponse

logger = logging.getLogger(__name__)

# Queue marker for a branch that finished cleanly
_BRANCH_DONE = object()


class ParallelAgent(BaseAgent):
    """Runs sub-agents concurrently and merges their responses"""

    async def _run_async_impl(self, ctx: InvocationContext) -> AsyncGenerator[LLMResponse, None]:
        branches = [(agent, ctx.branch_copy(agent)) for agent in self.sub_agents]
        queue: "asyncio.Queue[Tuple[BaseAgent, object, Optional[BaseException]]]" = asyncio.Queue()

        async def run_branch(agent: BaseAgent, branch_ctx: InvocationContext) -> None:
            try:
                async with aclosing(agent.run_async(branch_ctx)) as responses:
                    async for response in responses:
                        await queue.put((agent, response, None))
            except Exception as e:
                await queue.put((agent, None, e))
                return
            await queue.put((agent, _BRANCH_DONE, None))

        tasks: List[asyncio.Task] = [
            asyncio.create_task(run_branch(agent, branch_ctx), name=f"{self.name}.{agent.name}")
            for agent, branch_ctx in branches
        ]
        logger.debug(f"ParallelAgent {self.name}: started {len(tasks)} branches")

        pending = len(tasks)
        try:
            while pending:
                agent, item, error = await queue.get()
                if error is not None:
                    logger.error(f"ParallelAgent {self.name}: branch {agent.name} failed: {error}")
                    raise error
                if item is _BRANCH_DONE:
                    pending -= 1
                    continue
                yield item
        finally:
            await self._cancel_branches(tasks)

        for agent, branch_ctx in branches:
            result = branch_ctx.result
            ctx.child_results[agent.name] = result
            if result is not None:
                ctx.messages.extend(result.messages)
            if branch_ctx.actions.escalate:
                ctx.escalate()

    async def _cancel_branches(self, tasks: List[asyncio.Task]) -> None:
        """Cancel unfinished branches and wait until they are gone"""
        running = [task for task in tasks if not task.done()]
        for task in running:
            task.cancel()
        if running:
            logger.info(f"ParallelAgent {self.name}: cancelling {len(running)} running branch(es)")
        await asyncio.gather(*tasks, return_exceptions=True)
